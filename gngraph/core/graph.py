from __future__ import annotations

import operator

from ._adjacency import Edge, EdgeCursor, EdgeList
from ._Cache import CacheManager, Operations
from ._helpers import EdgeType, _equivalent
from ._History import History
from ._Views import ViewsClass
from .slot_store import SlotCursor, SlotStore


class Vertex:
    """Vertex record: the stored ``value`` and its outgoing ``edges``."""

    __slots__ = ("value", "edges")

    def __init__(self, value):
        self.value = value
        self.edges = EdgeList()

    def __repr__(self):
        return f"Vertex(value={self.value!r}, out_degree={len(self.edges)})"


class VertexCursor(SlotCursor):
    """Cursor over graph vertices; ``value`` is the vertex value, not the record.

    ``edges`` is the vertex's adjacency list for reading and for edge cursors;
    the list itself offers no public mutators.
    """

    __slots__ = ()

    def _vertex(self) -> Vertex:
        return self._store[self.index]

    @property
    def value(self):
        return self._vertex().value

    @property
    def edges(self) -> EdgeList:
        return self._vertex().edges


class _VertexLess:
    """Lifts a value ordering to :class:`Vertex` records."""

    __slots__ = ("less",)

    def __init__(self, less):
        self.less = less

    def __call__(self, a, b):
        a = a.value if isinstance(a, Vertex) else a
        b = b.value if isinstance(b, Vertex) else b
        return self.less(a, b)


class DirectedGraph(History, ViewsClass, Operations):
    """Directed multigraph over recyclable vertex slots.

    Vertices live in a :class:`SlotStore`, so a vertex index stays valid until
    that vertex is erased, and erased indices are reused (most recently freed
    first) by later inserts. Each vertex owns a singly linked list of outgoing
    edges ``{weight, head}``.

    Parameters
    --
    less : callable, optional
        Strict weak ordering over vertex values. Keyed erasure matches values
        ``v`` with ``not less(v, key) and not less(key, v)``. Defaults to ``<``.
    capacity : int, optional
        Vertex slots to preallocate.
    history : bool, optional
        Record every mutation in the in-memory history log (default False).

    Notes
    -
    - No live adjacency list ever holds an edge whose head is a dead slot:
      every vertex erasure path sweeps the surviving lists once before it
      returns, O(V + E).
    - Parallel edges are kept (no deduplication).
    - ``edge_count()`` is a maintained counter, never a rescan.

    """

    edge_type = EdgeType.DIRECTED

    def __init__(self, less=None, capacity: int = 0, history: bool = False):
        self._less = less if less is not None else operator.lt
        self._vertices = SlotStore(
            less=_VertexLess(self._less),
            capacity=capacity,
            cursor_type=VertexCursor,
        )
        self._edge_cnt = 0
        self._cache = CacheManager(self)
        self._init_history(history)

    # Handles

    def _index(self, handle) -> int:
        """INTERNAL: live slot position for an ``int`` or vertex cursor."""
        return self._vertices._live_position(handle)

    def _vertex(self, handle) -> Vertex:
        return self._vertices._values[self._index(handle)]

    def get_index(self, cursor) -> int:
        """Stable index of the vertex at ``cursor``."""
        if not isinstance(cursor, SlotCursor):
            raise TypeError(f"expected a vertex cursor, got {type(cursor).__name__}")
        return self._index(cursor)

    def get_vertex(self, index) -> VertexCursor:
        """Cursor at the live vertex ``index``."""
        return self._vertices._cursor(self._index(index))

    def has_vertex(self, handle) -> bool:
        return self._vertices.is_live(handle)

    def __contains__(self, handle):
        return self.has_vertex(handle)

    def value(self, handle):
        return self._vertex(handle).value

    def __getitem__(self, handle):
        return self.value(handle)

    def set_value(self, handle, value):
        """Replace the value of a live vertex; its edges and index are kept."""
        self._vertex(handle).value = value

    # Vertex modifiers

    def insert_vertex(self, value) -> int:
        """Insert a vertex holding ``value``; O(1) amortized.

        Returns
        ---
        int
            The vertex index (stable until the vertex is erased).

        """
        return self._vertices.insert(Vertex(value))

    def erase_vertex(self, handle) -> VertexCursor:
        """Erase one vertex and every edge touching it.

        Parameters
        --
        handle : int | VertexCursor

        Returns
        ---
        VertexCursor
            Cursor at the next live vertex, or ``end()``.

        Raises
        --
        InvalidHandleError
            If ``handle`` does not denote a live vertex.

        """
        pos = self._index(handle)
        self._erase_positions([pos])
        return self._vertices._cursor(self._vertices._next_live(pos))

    def erase_vertex_range(self, first, last) -> VertexCursor:
        """Erase every vertex in the half-open cursor range ``[first, last)``.

        The erased indices are collected first and the surviving adjacency
        lists are swept once for all of them.

        Returns
        ---
        VertexCursor
            ``last``.

        """
        self._erase_positions(self._vertices._range_positions(first, last))
        return last

    def erase_vertex_key(self, key) -> int:
        """Erase every vertex whose value is equivalent to ``key``.

        Returns
        ---
        int
            Number of vertices erased; 0 when nothing matches.

        """
        doomed = [
            pos for pos, v in self._vertices.items() if _equivalent(self._less, v.value, key)
        ]
        self._erase_positions(doomed)
        return len(doomed)

    def erase_vertices(self, handles) -> int:
        """Erase many vertices (and all their edges) with a single sweep.

        Parameters
        --
        handles : Iterable[int | VertexCursor]
            Every handle must denote a live vertex; duplicates are ignored.

        Returns
        ---
        int
            Number of vertices erased.

        """
        positions = list(dict.fromkeys(self._index(h) for h in handles))
        self._erase_positions(positions)
        return len(positions)

    def _erase_positions(self, positions):
        """INTERNAL: release ``positions`` (all live) and purge their edges in one sweep."""
        if not positions:
            return
        store = self._vertices
        doomed = set(positions)
        records = loops = 0
        for pos in positions:
            edges = store._values[pos].edges
            records += len(edges)
            loops += sum(1 for e in edges if e.head == pos)
            store._release(pos)
        if len(doomed) == 1:
            (gone,) = doomed
            pred = lambda e: e.head == gone  # noqa: E731
        else:
            pred = lambda e: e.head in doomed  # noqa: E731
        for vertex in store:
            records += len(vertex.edges._remove_if(pred))
        self._edge_cnt -= self._edges_in(records, loops)

    def _edges_in(self, records: int, loops: int) -> int:
        """INTERNAL: logical edges represented by ``records`` removed records."""
        return records

    def clear(self):
        """Drop all vertices and edges."""
        self._vertices.clear()
        self._edge_cnt = 0

    # Edge modifiers

    def insert_edge(self, tail, head, weight=1.0):
        """Add the edge ``tail -> head``; O(1).

        The record is prepended to ``tail``'s adjacency list, so it is the
        first one visited. Repeated ``(tail, head)`` pairs give parallel edges.

        Raises
        --
        InvalidHandleError
            If either endpoint is not a live vertex.

        """
        t = self._index(tail)
        h = self._index(head)
        self._vertices._values[t].edges._push_front(weight, h)
        self._edge_cnt += 1

    def erase_after_edge(self, tail, cursor) -> EdgeCursor:
        """Erase the edge record right after ``cursor`` in ``tail``'s list; O(1).

        Parameters
        --
        tail : int | VertexCursor
        cursor : EdgeCursor
            A position in ``tail``'s list (``edge_before_begin(tail)`` to erase
            the first record).

        Returns
        ---
        EdgeCursor
            Cursor at the record that followed the erased one.

        Raises
        --
        InvalidHandleError
            If ``tail`` is not live, ``cursor`` belongs to another list or was
            removed, or no record follows ``cursor``.

        """
        edges = self._vertex(tail).edges
        removed = edges._erase_after(cursor)
        self._drop_records([removed])
        return EdgeCursor(edges, cursor._node._next)

    def erase_after_edge_range(self, tail, first, last) -> EdgeCursor:
        """Erase the edge records strictly between ``first`` and ``last``.

        Returns
        ---
        EdgeCursor
            ``last``.

        """
        edges = self._vertex(tail).edges
        run = edges._erase_after_range(first, last)
        self._drop_records(run)
        return last

    def set_weight(self, tail, cursor, weight):
        """Replace the weight of the edge record at ``cursor`` in ``tail``'s list.

        Parameters
        --
        tail : int | VertexCursor
        cursor : EdgeCursor
            Must point at a record (not before-begin or end) of ``tail``'s list.

        Raises
        --
        InvalidHandleError
            If ``tail`` is not live or ``cursor`` does not point at one of its
            records.

        """
        edges = self._vertex(tail).edges
        self._reweight(edges._record(cursor), weight)

    def _reweight(self, record: Edge, weight):
        record._weight = weight

    def _drop_records(self, run: list[Edge]):
        self._edge_cnt -= len(run)

    # Capacity

    def vertex_count(self) -> int:
        return len(self._vertices)

    def edge_count(self) -> int:
        return self._edge_cnt

    def empty(self) -> bool:
        return self.vertex_count() == 0

    def __len__(self):
        return self.vertex_count()

    # Vertex iteration

    def begin(self) -> VertexCursor:
        return self._vertices.begin()

    def end(self) -> VertexCursor:
        return self._vertices.end()

    def __iter__(self):
        """Iterate vertex values in index order."""
        for vertex in self._vertices:
            yield vertex.value

    def __reversed__(self):
        for vertex in reversed(self._vertices):
            yield vertex.value

    def vertices(self) -> list[int]:
        """Live vertex indices, ascending."""
        return [pos for pos, _v in self._vertices.items()]

    def items(self):
        """Yield ``(index, value)`` for every live vertex."""
        for pos, vertex in self._vertices.items():
            yield pos, vertex.value

    # Edge iteration

    def edge_before_begin(self, vertex) -> EdgeCursor:
        return self._vertex(vertex).edges.before_begin()

    def edge_begin(self, vertex) -> EdgeCursor:
        return self._vertex(vertex).edges.begin()

    def edge_end(self, vertex) -> EdgeCursor:
        return self._vertex(vertex).edges.end()

    def out_edges(self, vertex):
        """Outgoing edge records of ``vertex``, most recently inserted first."""
        return iter(self._vertex(vertex).edges)

    def out_degree(self, vertex) -> int:
        return len(self._vertex(vertex).edges)

    def successors(self, vertex) -> list[int]:
        """Head indices of the outgoing edges (with repeats for parallel edges)."""
        return [e.head for e in self._vertex(vertex).edges]

    def has_edge(self, tail, head) -> bool:
        h = self._index(head)
        return any(e.head == h for e in self._vertex(tail).edges)

    def find_edge(self, tail, head) -> EdgeCursor:
        """Predecessor cursor of the first ``tail -> head`` record.

        The result can be passed straight to :meth:`erase_after_edge`. Returns
        ``edge_end(tail)`` when there is no such edge.
        """
        h = self._index(head)
        edges = self._vertex(tail).edges
        prev = edges.before_begin()
        for e in edges:
            if e.head == h:
                return prev
            prev = EdgeCursor(edges, e)
        return edges.end()

    def edges(self):
        """Yield ``(tail, head, weight)`` for every edge."""
        for pos, vertex in self._vertices.items():
            for e in vertex.edges:
                yield pos, e.head, e.weight

    def edge_list(self) -> list[tuple]:
        return list(self.edges())

    def __repr__(self):
        return (
            f"{type(self).__name__}(vertices={self.vertex_count()}, "
            f"edges={self.edge_count()})"
        )

