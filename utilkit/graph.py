"""A directed graph with integer-identified vertices and edges."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, TypeVar

__all__ = ["Edge", "Vertex", "Graph"]

_T = TypeVar("_T")


@dataclass(eq=False)
class Edge:
    """A directed edge from vertex ``src`` to vertex ``dest``."""

    id: int
    src: int
    dest: int
    metadata: Any = None


@dataclass(eq=False)
class Vertex:
    """A vertex; tracks its outgoing edges and the number of incoming ones."""

    id: int
    metadata: Any = None
    num_edges_in: int = 0
    _out: list[Edge] = field(default_factory=list, repr=False)

    def num_edges_out(self) -> int:
        """Number of edges that start at this vertex."""
        return len(self._out)

    def edge(self, idx: int) -> Edge | None:
        """The ``idx``-th outgoing edge, or None if there is none."""
        if 0 <= idx < len(self._out):
            return self._out[idx]
        return None

    def edges(self) -> Iterator[Edge]:
        """Yield the outgoing edges in their current order."""
        yield from list(self._out)


def _ensure_slot(slots: list[_T | None], index: int) -> None:
    """Grow ``slots`` by doubling until ``index`` fits."""
    while index >= len(slots):
        slots.extend([None] * len(slots))


class Graph:
    """A directed graph.

    Vertices and edges receive sequential ids as they are added; ids of
    removed vertices and edges are not reused. ``size`` is the initial
    number of vertex and edge slots; both grow as needed.
    """

    def __init__(self, size: int = 1024) -> None:
        if size <= 0:
            raise ValueError("graph size must be positive")
        self._vertices: list[Vertex | None] = [None] * size
        self._edges: list[Edge | None] = [None] * size
        self._num_vertices = 0
        self._num_edges = 0
        self._prev_vert_id = 0
        self._prev_edge_id = 0

    def __repr__(self) -> str:
        return (
            f"Graph(vertices={self._num_vertices}, edges={self._num_edges})"
        )

    def num_vertices(self) -> int:
        """Number of vertices currently in the graph."""
        return self._num_vertices

    def num_edges(self) -> int:
        """Number of edges currently in the graph."""
        return self._num_edges

    def vertices_inserted(self) -> int:
        """One past the highest vertex id ever used."""
        return self._prev_vert_id

    def vertices(self) -> Iterator[Vertex]:
        """Yield the vertices present, in id order."""
        for vertex in self._vertices[: self._prev_vert_id]:
            if vertex is not None:
                yield vertex

    def get_vertex(self, vertex_id: int) -> Vertex | None:
        """The vertex with ``vertex_id``, or None if absent."""
        if 0 <= vertex_id < len(self._vertices):
            return self._vertices[vertex_id]
        return None

    def get_edge(self, edge_id: int) -> Edge | None:
        """The edge with ``edge_id``, or None if absent."""
        if 0 <= edge_id < len(self._edges):
            return self._edges[edge_id]
        return None

    def add_vertex(self, metadata: Any = None) -> Vertex:
        """Add a vertex with the next free sequential id."""
        return self.add_vertex_with_id(self._prev_vert_id, metadata)

    def add_vertex_with_id(self, vertex_id: int, metadata: Any = None) -> Vertex:
        """Add a vertex under ``vertex_id``; the id must not be in use."""
        if vertex_id < 0:
            raise ValueError("vertex id must not be negative")
        _ensure_slot(self._vertices, vertex_id)
        if self._vertices[vertex_id] is not None:
            raise ValueError(f"vertex {vertex_id} already exists")
        if vertex_id >= self._prev_vert_id:
            self._prev_vert_id = vertex_id + 1
        vertex = Vertex(vertex_id, metadata)
        self._vertices[vertex_id] = vertex
        self._num_vertices += 1
        return vertex

    def _require_vertex(self, vertex_id: int) -> Vertex:
        vertex = self.get_vertex(vertex_id)
        if vertex is None:
            raise KeyError(f"no vertex with id {vertex_id}")
        return vertex

    def remove_vertex(self, vertex_id: int) -> Vertex:
        """Remove a vertex and every edge touching it; returns the vertex."""
        vertex = self._require_vertex(vertex_id)
        for edge in list(self._edges[: self._prev_edge_id]):
            if edge is not None and vertex_id in (edge.src, edge.dest):
                self.remove_edge(edge.id)
        self._vertices[vertex_id] = None
        self._num_vertices -= 1
        return vertex

    def add_edge(self, src: int, dest: int, metadata: Any = None) -> Edge:
        """Add an edge from ``src`` to ``dest``; both vertices must exist."""
        source = self._require_vertex(src)
        target = self._require_vertex(dest)
        edge_id = self._prev_edge_id
        self._prev_edge_id += 1
        _ensure_slot(self._edges, edge_id)
        edge = Edge(edge_id, src, dest, metadata)
        source._out.append(edge)
        target.num_edges_in += 1
        self._edges[edge_id] = edge
        self._num_edges += 1
        return edge

    def remove_edge(self, edge_id: int) -> Edge:
        """Remove an edge and return it.

        The source vertex's last outgoing edge takes the removed edge's place.
        """
        edge = self.get_edge(edge_id)
        if edge is None:
            raise KeyError(f"no edge with id {edge_id}")
        self._edges[edge_id] = None
        self._num_edges -= 1
        source = self._vertices[edge.src]
        out = source._out
        for pos, candidate in enumerate(out):
            if candidate is edge:
                out[pos] = out[-1]
                out.pop()
                break
        self._vertices[edge.dest].num_edges_in -= 1
        return edge

    def _start_id(self, vertex: Vertex | int) -> int:
        vertex_id = vertex if isinstance(vertex, int) else vertex.id
        self._require_vertex(vertex_id)
        return vertex_id

    def breadth_first_traverse(self, vertex: Vertex | int) -> list[int]:
        """Vertex ids reachable from ``vertex`` in breadth-first order."""
        start = self._start_id(vertex)
        visited = {start}
        order = [start]
        pending = deque([start])
        while pending:
            current = self._vertices[pending.popleft()]
            for edge in current._out:
                if edge.dest in visited:
                    continue
                visited.add(edge.dest)
                order.append(edge.dest)
                pending.append(edge.dest)
        return order

    def depth_first_traverse(self, vertex: Vertex | int) -> list[int]:
        """Vertex ids reachable from ``vertex`` in depth-first order."""
        start = self._start_id(vertex)
        visited = {start}
        order = [start]
        stack = [iter(self._vertices[start]._out)]
        while stack:
            for edge in stack[-1]:
                if edge.dest not in visited:
                    visited.add(edge.dest)
                    order.append(edge.dest)
                    stack.append(iter(self._vertices[edge.dest]._out))
                    break
            else:
                stack.pop()
        return order