"""A doubly linked list holding arbitrary values."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

__all__ = ["DLLNode", "DoublyLinkedList"]


@dataclass(eq=False)
class DLLNode:
    """One node of a doubly linked list."""

    data: Any
    next: DLLNode | None = field(default=None, repr=False)
    prev: DLLNode | None = field(default=None, repr=False)


class DoublyLinkedList:
    """A doubly linked list with index-based insertion and removal.

    Negative indices count from the tail; for insertion ``-1`` means
    "after the last element".
    """

    def __init__(self) -> None:
        self._head: DLLNode | None = None
        self._tail: DLLNode | None = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Any]:
        return (node.data for node in self.nodes())

    def __reversed__(self) -> Iterator[Any]:
        return (node.data for node in self.reverse_nodes())

    def __repr__(self) -> str:
        return f"DoublyLinkedList({list(self)!r})"

    def first_node(self) -> DLLNode | None:
        """The head node, or None when empty."""
        return self._head

    def last_node(self) -> DLLNode | None:
        """The tail node, or None when empty."""
        return self._tail

    def nodes(self) -> Iterator[DLLNode]:
        """Yield the nodes from head to tail."""
        node = self._head
        while node is not None:
            nxt = node.next
            yield node
            node = nxt

    def reverse_nodes(self) -> Iterator[DLLNode]:
        """Yield the nodes from tail to head."""
        node = self._tail
        while node is not None:
            prev = node.prev
            yield node
            node = prev

    def _node_at(self, pos: int) -> DLLNode:
        """Walk from the nearer end to the node at ``pos`` (0 < pos < size)."""
        if pos <= self._size // 2:
            node = self._head
            for _ in range(pos):
                node = node.next
        else:
            node = self._tail
            for _ in range(self._size - 1 - pos):
                node = node.prev
        return node

    def append(self, data: Any) -> None:
        """Add ``data`` after the last element."""
        self.insert(data, -1)

    def insert(self, data: Any, idx: int) -> None:
        """Insert ``data`` so it ends up at position ``idx``.

        Indices past the end append; ``-1`` appends; other negative indices
        count back from the tail and must be greater than ``-len(self)``.
        """
        if idx < -1 and idx <= -self._size:
            raise IndexError(f"insert index {idx} out of range")
        if idx < 0:
            idx = self._size + idx + 1

        node = DLLNode(data)
        if self._size == 0:
            self._head = self._tail = node
        elif idx == 0:
            node.next = self._head
            self._head.prev = node
            self._head = node
        elif idx >= self._size:
            node.prev = self._tail
            self._tail.next = node
            self._tail = node
        else:
            after = self._node_at(idx)
            before = after.prev
            node.prev = before
            node.next = after
            before.next = node
            after.prev = node
        self._size += 1

    def remove(self, idx: int) -> Any:
        """Remove the element at ``idx`` and return its data.

        Positive indices past the end remove the tail. A negative index must
        satisfy ``-idx < len(self)``.
        """
        if self._size == 0:
            raise IndexError("remove from empty list")
        if idx < 0 and -idx >= self._size:
            raise IndexError(f"remove index {idx} out of range")
        if idx < 0:
            idx += self._size

        if self._size == 1:
            node = self._head
            self._head = self._tail = None
        elif idx == 0:
            node = self._head
            self._head = node.next
            self._head.prev = None
        elif idx >= self._size - 1:
            node = self._tail
            self._tail = node.prev
            self._tail.next = None
        else:
            node = self._node_at(idx)
            node.prev.next = node.next
            node.next.prev = node.prev
        node.next = node.prev = None
        self._size -= 1
        return node.data

    def search(
        self, key: Any, predicate: Callable[[Any, Any], bool]
    ) -> DLLNode | None:
        """Return the first node for which ``predicate(data, key)`` is true."""
        for node in self.nodes():
            if predicate(node.data, key):
                return node
        return None

    def clear(self) -> None:
        """Remove every element."""
        for node in self.nodes():
            node.next = node.prev = None
        self._head = self._tail = None
        self._size = 0