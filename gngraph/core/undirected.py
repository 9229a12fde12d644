from __future__ import annotations

from ._adjacency import Edge
from ._helpers import EdgeType
from .graph import DirectedGraph


class UndirectedGraph(DirectedGraph):
    """Undirected multigraph: every edge is a pair of mirrored records.

    ``insert_edge(a, b, w)`` stores ``{w, b}`` in ``a``'s list and ``{w, a}``
    in ``b``'s list; the two records are twins and are always removed
    together, so the graph is never observed with only one direction present.
    A self-loop is a single record that is its own twin.

    Notes
    -
    - ``edge_count()`` counts undirected edges, not records.
    - Erasing after a cursor also unlinks the twin from the other endpoint's
      list, which costs O(deg(head)) on top of the O(1) local unlink.
    - ``edges()`` reports each undirected edge once, from the endpoint with the
      lower index.

    """

    edge_type = EdgeType.UNDIRECTED

    def insert_edge(self, tail, head, weight=1.0):
        """Add the undirected edge ``tail -- head``; O(1).

        Raises
        --
        InvalidHandleError
            If either endpoint is not a live vertex.

        """
        a = self._index(tail)
        b = self._index(head)
        values = self._vertices._values
        near = values[a].edges._push_front(weight, b)
        if a == b:
            near._twin = near
        else:
            far = values[b].edges._push_front(weight, a)
            near._twin = far
            far._twin = near
        self._edge_cnt += 1

    def _drop_records(self, run: list[Edge]):
        # each record in ``run`` was unlinked from the tail list; take its twin too
        values = self._vertices._values
        for record in run:
            twin = record._twin
            if twin is not record:
                values[record.head].edges._remove(twin)
            record._twin = None
            twin._twin = None
        self._edge_cnt -= len(run)

    def _reweight(self, record: Edge, weight):
        # twins always carry the same weight
        record._weight = weight
        record._twin._weight = weight

    def _edges_in(self, records: int, loops: int) -> int:
        # a loop is one record, any other edge is two
        return (records + loops) // 2

    def degree(self, vertex) -> int:
        """Incident edges of ``vertex``; a self-loop counts once."""
        return self.out_degree(vertex)

    def neighbors(self, vertex) -> list[int]:
        return self.successors(vertex)

    def edges(self):
        """Yield ``(u, v, weight)`` once per undirected edge."""
        seen = set()
        for pos, vertex in self._vertices.items():
            for e in vertex.edges:
                twin = e._twin
                if twin is e:
                    yield pos, e.head, e.weight
                elif id(twin) in seen:
                    continue
                else:
                    seen.add(id(e))
                    yield pos, e.head, e.weight
