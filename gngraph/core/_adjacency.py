from __future__ import annotations

from ._helpers import NO_SLOT, InvalidHandleError

_DETACHED = object()  # ``_next`` of a record that was unlinked from its list


class Edge:
    """One outgoing edge record: ``weight`` and the ``head`` vertex index.

    Records are owned by the tail vertex's :class:`EdgeList` and are read-only
    outside the graph; weights change through ``set_weight``. Undirected graphs
    link the two mirrored records of an edge through ``_twin``.
    """

    __slots__ = ("_weight", "_head", "_next", "_twin")

    def __init__(self, weight, head: int, next_=None):
        self._weight = weight
        self._head = head
        self._next = next_
        self._twin = None

    @property
    def weight(self):
        return self._weight

    @property
    def head(self) -> int:
        return self._head

    @property
    def detached(self) -> bool:
        return self._next is _DETACHED

    def __repr__(self):
        return f"Edge(weight={self.weight!r}, head={self.head})"


class EdgeCursor:
    """Forward position in an :class:`EdgeList`.

    Three kinds of position exist: before-begin (the list anchor, used as the
    predecessor of the first record), a record, and end. Only record
    positions can be dereferenced.
    """

    __slots__ = ("_list", "_node")

    def __init__(self, edges: EdgeList, node):
        self._list = edges
        self._node = node

    @property
    def is_end(self) -> bool:
        return self._node is None

    @property
    def is_before_begin(self) -> bool:
        return self._node is self._list._anchor

    @property
    def edge(self) -> Edge:
        node = self._node
        if node is None or node is self._list._anchor:
            raise InvalidHandleError("cursor does not point at an edge record")
        if node._next is _DETACHED:
            raise InvalidHandleError("edge record was already removed")
        return node

    @property
    def weight(self):
        return self.edge.weight

    @property
    def head(self) -> int:
        return self.edge.head

    def next(self):
        node = self._node
        if node is None:
            raise InvalidHandleError("cannot advance past end")
        if node._next is _DETACHED:
            raise InvalidHandleError("edge record was already removed")
        return EdgeCursor(self._list, node._next)

    def __add__(self, steps: int):
        if steps < 0:
            raise ValueError("edge cursors only move forward")
        cur = self
        for _ in range(steps):
            cur = cur.next()
        return cur

    def __eq__(self, other):
        if not isinstance(other, EdgeCursor):
            return NotImplemented
        return self._list is other._list and self._node is other._node

    def __hash__(self):
        return hash((id(self._list), id(self._node)))

    def __repr__(self):
        if self._node is None:
            return "EdgeCursor(end)"
        if self._node is self._list._anchor:
            return "EdgeCursor(before_begin)"
        return f"EdgeCursor({self._node!r})"


class EdgeList:
    """Singly linked, prepend-only adjacency list with erase-after removal.

    Notes
    -
    - ``_push_front`` and ``_erase_after`` are O(1).
    - Records are visited most recently inserted first.
    - Unlinked records are marked detached so stale cursors are rejected.

    """

    __slots__ = ("_anchor", "_len")

    def __init__(self):
        self._anchor = Edge(None, NO_SLOT)
        self._len = 0

    def __len__(self):
        return self._len

    def __iter__(self):
        node = self._anchor._next
        while node is not None:
            yield node
            node = node._next

    def _push_front(self, weight, head: int) -> Edge:
        node = Edge(weight, head, self._anchor._next)
        self._anchor._next = node
        self._len += 1
        return node

    def _check(self, cursor):
        if not isinstance(cursor, EdgeCursor):
            raise TypeError(f"expected an EdgeCursor, got {type(cursor).__name__}")
        if cursor._list is not self:
            raise InvalidHandleError("edge cursor belongs to another adjacency list")
        node = cursor._node
        if node is not None and node._next is _DETACHED:
            raise InvalidHandleError("edge record was already removed")
        return node

    def _record(self, cursor) -> Edge:
        node = self._check(cursor)
        if node is None or node is self._anchor:
            raise InvalidHandleError("cursor does not point at an edge record")
        return node

    def _unlink_after(self, node) -> Edge:
        removed = node._next
        node._next = removed._next
        removed._next = _DETACHED
        self._len -= 1
        return removed

    def _erase_after(self, cursor) -> Edge:
        """Unlink the record following ``cursor`` and return it."""
        node = self._check(cursor)
        if node is None or node._next is None:
            raise InvalidHandleError("no edge record after cursor")
        return self._unlink_after(node)

    def _erase_after_range(self, first, last) -> list[Edge]:
        """Unlink every record strictly between ``first`` and ``last``.

        Raises
        --
        ValueError
            If ``last`` is not reachable from ``first``.

        """
        start = self._check(first)
        stop = self._check(last)
        if start is stop:
            return []
        if start is None:
            if stop is None:
                return []
            raise ValueError("range end is not reachable from range start")
        node = start._next
        run = []
        while node is not stop:
            if node is None:
                raise ValueError("range end is not reachable from range start")
            run.append(node)
            node = node._next
        start._next = stop
        for removed in run:
            removed._next = _DETACHED
        self._len -= len(run)
        return run

    def _remove(self, record: Edge) -> bool:
        """Unlink ``record`` (identity match); O(len). True if it was found."""
        prev = self._anchor
        node = prev._next
        while node is not None:
            if node is record:
                self._unlink_after(prev)
                return True
            prev, node = node, node._next
        return False

    def _remove_if(self, pred) -> list[Edge]:
        """Unlink every record for which ``pred(record)`` holds, in one pass."""
        removed = []
        prev = self._anchor
        node = prev._next
        while node is not None:
            if pred(node):
                removed.append(self._unlink_after(prev))
            else:
                prev = node
            node = prev._next
        return removed

    # cursors

    def before_begin(self) -> EdgeCursor:
        return EdgeCursor(self, self._anchor)

    def begin(self) -> EdgeCursor:
        return EdgeCursor(self, self._anchor._next)

    def end(self) -> EdgeCursor:
        return EdgeCursor(self, None)

    def __repr__(self):
        return f"EdgeList({list(self)!r})"
