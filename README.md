# utilkit

Small, dependency-free building blocks for Python programs:

- `utilkit.dllist` – `DoublyLinkedList` and its `DLLNode`. Insertion and
  removal work by index, and negative indexes count from the tail. You can
  search the list with a predicate and walk it from either end.
- `utilkit.arena` – `Arena`, a bump allocator over one fixed-size buffer.
  Each allocation is a writable `memoryview` slice of that buffer.
  `save`/`restore` checkpoints roll the arena back to an earlier point.
  `ArenaExhaustedError` is raised when an allocation does not fit.
- `utilkit.bloomhash` – the 64-bit FNV-1a hashing a Bloom filter uses by
  default (`fnv_1a`, `default_hash`), `optimal_parameters` to size a filter,
  and `estimate_elements_by_values` to estimate how many elements a filter
  holds.
- `utilkit.bloom` – `BloomFilter`, held either in memory or in a
  memory-mapped file. A filter can be exported to a file or to a hex string
  and loaded back. Filters can be combined by union and intersection, and
  compared by Jaccard index. Invalid parameters, bad data and incompatible
  filters raise `BloomFilterError`.
- `utilkit.graph` – `Graph`, a directed graph built from `Vertex` and `Edge`
  objects, each carrying arbitrary metadata. It has breadth-first and
  depth-first traversal.

## Installation

```
pip install utilkit
```

## Examples

### Doubly linked list

```python
from utilkit.dllist import DoublyLinkedList

people = DoublyLinkedList()
people.append("Alice")
people.append("Bob")
people.insert("Zed", 0)
print(list(people))             # ['Zed', 'Alice', 'Bob']
print(list(reversed(people)))   # ['Bob', 'Alice', 'Zed']
print(people.remove(-1))        # 'Bob'

node = people.search("Alice", lambda data, key: data == key)
print(node.data)                # 'Alice'
```

`insert` and `remove` raise `IndexError` for negative indexes that are out of
range. `remove` also raises `IndexError` on an empty list. A positive index
past the end appends on insert and removes the tail on remove.

### Arena

```python
from utilkit.arena import Arena

arena = Arena(1024)
greeting = arena.alloc(50)
greeting[:5] = b"hello"

checkpoint = arena.save()
arena.alloc(40)
arena.restore(checkpoint)       # the 40 bytes are available again
print(arena.stats())            # [arena] size=1024 offset=50 peak=90
arena.free()
```

### Bloom filter

```python
from utilkit.bloom import BloomFilter

bf = BloomFilter(1000, 0.01)
bf.add("hello")
print("hello" in bf)            # True
print(bf.check("foo"))          # almost certainly False
print(bf.stats())

copy = BloomFilter.from_hex(bf.export_hex())
bf.export("filter.bloom")
loaded = BloomFilter.from_file("filter.bloom")
print(bf.jaccard_index(loaded)) # 1.0
```

A filter can also be kept in a file rather than in memory:

```python
with BloomFilter.on_disk(1_000_000, 0.01, "big.bloom") as disk_filter:
    disk_filter.add("hello")
```

Every change to an on-disk filter goes straight to the mapped file,
including the count of added elements. `BloomFilter.from_file_on_disk`
reopens such a file.

The file format is the bit array followed by three little-endian values: the
estimated element count and the number of elements added (both unsigned
64-bit), then the false positive rate as a 32-bit float.

To hash with something other than the default, pass a `hash_function`. It is
called as `hash_function(number_hashes, value)` and must return a sequence of
integers. `union`, `intersection`, `count_union_bits_set`,
`count_intersection_bits_set` and `jaccard_index` require both filters to
have the same number of hashes, the same number of bits and the same hash
function.

### Directed graph

```python
from utilkit.graph import Graph

g = Graph()
for name in ("a", "b", "c"):
    g.add_vertex(name)
g.add_edge(0, 1, "a->b")
g.add_edge(1, 2, "b->c")
g.add_edge(0, 2, "a->c")

print(g.breadth_first_traverse(g.get_vertex(0)))   # [0, 1, 2]
print(g.depth_first_traverse(0))                   # [0, 1, 2]
print([v.metadata for v in g.vertices()])          # ['a', 'b', 'c']
```

Vertex and edge ids are handed out in sequence and are never reused. When a
vertex is removed, every edge touching it is removed too. Asking for a vertex
or edge that does not exist through `add_edge`, `remove_vertex` or
`remove_edge` raises `KeyError`. `add_vertex_with_id` raises `ValueError`
when the id is already taken.

## What is not included

This package holds in-memory data structures only, plus a Bloom filter that
can be stored in a file. It has no helpers for working with the file system
in general, such as creating, listing, inspecting or removing files and
directories. It has no standalone bit-array type and no command-line tools.

## Running the tests

```
pip install -e ".[test]"
pytest
```