# test_graph.py
import pytest

from conftest import assert_consistent
from gngraph.core._helpers import EdgeType, InvalidHandleError
from gngraph.core.graph import DirectedGraph, VertexCursor


def _edge_set(G):
    return sorted((t, h, w) for t, h, w in G.edges())


class TestVertices:
    def test_insert_and_lookup(self):
        G = DirectedGraph()
        idx = [G.insert_vertex(v) for v in "xyz"]
        assert idx == [0, 1, 2]
        assert G.vertex_count() == 3
        assert len(G) == 3
        assert G.value(1) == "y"
        assert G[2] == "z"
        assert list(G) == ["x", "y", "z"]
        assert list(reversed(G)) == ["z", "y", "x"]
        assert list(G.items()) == [(0, "x"), (1, "y"), (2, "z")]
        assert G.edge_type is EdgeType.DIRECTED

    def test_cursor_round_trip(self):
        G = DirectedGraph()
        for v in range(3):
            G.insert_vertex(v)
        cur = G.get_vertex(2)
        assert isinstance(cur, VertexCursor)
        assert cur.value == 2
        assert G.get_index(cur) == 2
        assert G.get_index(G.begin() + 1) == 1
        with pytest.raises(TypeError):
            G.get_index(2)

    def test_set_value_keeps_edges(self):
        G = DirectedGraph()
        a, b = G.insert_vertex("a"), G.insert_vertex("b")
        G.insert_edge(a, b)
        G.set_value(a, "A")
        assert G.value(a) == "A"
        assert G.successors(a) == [b]

    def test_empty_graph(self):
        G = DirectedGraph()
        assert G.empty()
        assert G.vertex_count() == 0
        assert G.edge_count() == 0
        assert G.begin() == G.end()
        assert list(G.edges()) == []

    def test_erased_index_is_recycled_clean(self, scenario_graph):
        G = scenario_graph
        G.erase_vertex(1)
        new = G.insert_vertex("fresh")
        assert new == 1
        assert G.out_degree(new) == 0
        assert all(h != new for _t, h, _w in G.edges())
        assert_consistent(G)


class TestKeyedErase:
    def test_scenario_erase_key(self, scenario_graph):
        G = scenario_graph
        assert G.vertex_count() == 5
        assert G.edge_count() == 6
        assert G.erase_vertex_key(1) == 1
        assert G.vertex_count() == 4
        assert G.edge_count() == 2
        assert _edge_set(G) == [(3, 4, 1), (4, 2, 1)]
        assert_consistent(G)

    def test_absent_key_is_noop(self, scenario_graph):
        G = scenario_graph
        assert G.erase_vertex_key(99) == 0
        assert G.vertex_count() == 5
        assert G.edge_count() == 6

    def test_all_equivalent_values_erased(self):
        G = DirectedGraph(less=lambda a, b: abs(a) < abs(b))
        for v in [1, -1, 2, 1]:
            G.insert_vertex(v)
        G.insert_edge(2, 0)
        G.insert_edge(2, 1)
        G.insert_edge(2, 3)
        assert G.erase_vertex_key(-1) == 3
        assert list(G) == [2]
        assert G.edge_count() == 0
        assert_consistent(G)


class TestSingleErase:
    def test_erase_removes_incident_edges(self, scenario_graph):
        G = scenario_graph
        nxt = G.erase_vertex(3)
        assert nxt.index == 4
        assert _edge_set(G) == [(0, 1, 1), (1, 2, 2), (4, 2, 1)]
        assert G.edge_count() == 3
        assert_consistent(G)

    def test_erase_last_returns_end(self, scenario_graph):
        assert scenario_graph.erase_vertex(4).is_end

    def test_erase_by_cursor(self, scenario_graph):
        G = scenario_graph
        G.erase_vertex(G.begin())
        assert 0 not in G
        assert G.edge_count() == 5

    def test_self_loop_counted_once(self):
        G = DirectedGraph()
        a, b = G.insert_vertex("a"), G.insert_vertex("b")
        G.insert_edge(a, a)
        G.insert_edge(a, b)
        G.insert_edge(b, a)
        G.erase_vertex(a)
        assert G.edge_count() == 0
        assert_consistent(G)

    def test_stale_handle(self, scenario_graph):
        G = scenario_graph
        G.erase_vertex(2)
        with pytest.raises(InvalidHandleError):
            G.erase_vertex(2)
        with pytest.raises(InvalidHandleError):
            G.insert_edge(0, 2)
        with pytest.raises(InvalidHandleError):
            G.value(2)
        with pytest.raises(TypeError):
            G.erase_vertex("2")


class TestRangeErase:
    def test_scenario_first_two(self, scenario_graph):
        G = scenario_graph
        first = G.begin()
        ret = G.erase_vertex_range(first, first + 2)
        assert ret.index == 2
        assert G.vertices() == [2, 3, 4]
        assert _edge_set(G) == [(3, 4, 1), (4, 2, 1)]
        assert_consistent(G)

    def test_many_inbound_references(self):
        G = DirectedGraph()
        for v in range(5):
            G.insert_vertex(v)
        for tail in (2, 3, 4):
            G.insert_edge(tail, 0)
            G.insert_edge(tail, 1)
            G.insert_edge(tail, 1)
        G.insert_edge(3, 4)
        G.erase_vertex_range(G.begin(), G.begin() + 2)
        assert G.edge_count() == 1
        assert _edge_set(G) == [(3, 4, 1.0)]
        assert_consistent(G)

    def test_range_to_end_and_empty_range(self, scenario_graph):
        G = scenario_graph
        cur = G.begin() + 3
        G.erase_vertex_range(cur, cur)
        assert G.vertex_count() == 5
        G.erase_vertex_range(cur, G.end())
        assert G.vertices() == [0, 1, 2]
        assert _edge_set(G) == [(0, 1, 1), (1, 2, 2)]
        assert_consistent(G)


class TestBulkErase:
    def test_erase_vertices_single_sweep(self, scenario_graph):
        G = scenario_graph
        assert G.erase_vertices([1, 4, 1]) == 2
        assert G.vertices() == [0, 2, 3]
        assert G.edge_count() == 0
        assert_consistent(G)

    def test_invalid_handle_aborts_before_mutation(self, scenario_graph):
        G = scenario_graph
        with pytest.raises(InvalidHandleError):
            G.erase_vertices([0, 17])
        assert G.vertex_count() == 5
        assert G.edge_count() == 6


class TestEdges:
    def test_parallel_edges_kept(self):
        G = DirectedGraph()
        a, b = G.insert_vertex("a"), G.insert_vertex("b")
        G.insert_edge(a, b, 1.5)
        G.insert_edge(a, b, 2.5)
        assert G.edge_count() == 2
        assert G.successors(a) == [b, b]
        # newest record first
        assert [e.weight for e in G.out_edges(a)] == [2.5, 1.5]

    def test_default_weight(self):
        G = DirectedGraph()
        a, b = G.insert_vertex(0), G.insert_vertex(1)
        G.insert_edge(a, b)
        assert G.edge_begin(a).weight == 1.0
        assert G.has_edge(a, b)
        assert not G.has_edge(b, a)

    def test_erase_after_first(self, scenario_graph):
        G = scenario_graph
        nxt = G.erase_after_edge(1, G.edge_before_begin(1))
        assert nxt.head == 3
        assert G.out_degree(1) == 2
        assert G.edge_count() == 5
        assert_consistent(G)

    def test_erase_after_range_whole_list(self, scenario_graph):
        G = scenario_graph
        end = G.edge_end(1)
        assert G.erase_after_edge_range(1, G.edge_before_begin(1), end) == end
        assert G.out_degree(1) == 0
        assert G.edge_count() == 3
        assert_consistent(G)

    def test_erase_after_range_partial(self, scenario_graph):
        G = scenario_graph
        first = G.edge_begin(1)  # 1->3
        last = first + 2  # 1->2
        G.erase_after_edge_range(1, first, last)
        assert [(e.head, e.weight) for e in G.out_edges(1)] == [(3, 4), (2, 2)]
        assert G.edge_count() == 5

    def test_unreachable_range_rejected(self, scenario_graph):
        G = scenario_graph
        with pytest.raises(ValueError):
            G.erase_after_edge_range(1, G.edge_begin(1) + 2, G.edge_begin(1))

    def test_find_edge_feeds_erase_after(self, scenario_graph):
        G = scenario_graph
        prev = G.find_edge(1, 2)
        removed_next = G.erase_after_edge(1, prev)
        assert removed_next.is_end
        assert not G.has_edge(1, 2)
        assert G.edge_count() == 5

    def test_find_missing_edge(self, scenario_graph):
        G = scenario_graph
        cur = G.find_edge(2, 0)
        assert cur == G.edge_end(2)
        with pytest.raises(InvalidHandleError):
            G.erase_after_edge(2, cur)

    def test_nothing_after_last_record(self, scenario_graph):
        G = scenario_graph
        last = G.edge_begin(0)
        with pytest.raises(InvalidHandleError):
            G.erase_after_edge(0, last)

    def test_detached_cursor_rejected(self, scenario_graph):
        G = scenario_graph
        stale = G.edge_begin(1)
        G.erase_after_edge(1, G.edge_before_begin(1))
        with pytest.raises(InvalidHandleError):
            G.erase_after_edge(1, stale)
        with pytest.raises(InvalidHandleError):
            stale.weight

    def test_foreign_cursor_rejected(self, scenario_graph):
        G = scenario_graph
        with pytest.raises(InvalidHandleError):
            G.erase_after_edge(0, G.edge_before_begin(1))
        with pytest.raises(TypeError):
            G.erase_after_edge(0, 0)

    def test_edge_cursor_forward_only(self, scenario_graph):
        with pytest.raises(ValueError):
            scenario_graph.edge_begin(1) + -1

    def test_vertex_cursor_exposes_edges(self, scenario_graph):
        cur = scenario_graph.get_vertex(1)
        assert len(cur.edges) == 3

    def test_cursor_cannot_change_edge_set(self, scenario_graph):
        G = scenario_graph
        edges = G.get_vertex(1).edges
        assert not hasattr(edges, "push_front")
        assert not hasattr(edges, "erase_after")
        assert not hasattr(edges, "remove_if")
        record = next(iter(edges))
        with pytest.raises(AttributeError):
            record.head = 99
        with pytest.raises(AttributeError):
            record.weight = 5.0
        assert G.edge_count() == 6
        assert_consistent(G)

    def test_set_weight(self, scenario_graph):
        G = scenario_graph
        cur = G.find_edge(1, 2).next()
        G.set_weight(1, cur, 7.5)
        assert cur.weight == 7.5
        assert (1, 2, 7.5) in _edge_set(G)
        assert G.edge_count() == 6

    def test_set_weight_rejects_non_records(self, scenario_graph):
        G = scenario_graph
        with pytest.raises(InvalidHandleError):
            G.set_weight(1, G.edge_before_begin(1), 2.0)
        with pytest.raises(InvalidHandleError):
            G.set_weight(1, G.edge_end(1), 2.0)
        with pytest.raises(InvalidHandleError):
            G.set_weight(0, G.edge_begin(1), 2.0)


class TestWholeGraph:
    def test_clear(self, scenario_graph):
        G = scenario_graph
        G.clear()
        assert G.empty()
        assert G.edge_count() == 0
        assert G.insert_vertex("again") == 0

    def test_copy_is_independent(self, scenario_graph):
        G = scenario_graph
        G.erase_vertex(0)
        c = G.copy()
        assert c.vertices() == G.vertices()
        assert list(c.edges()) == list(G.edges())
        assert c.edge_count() == G.edge_count()
        c.erase_vertex(1)
        assert G.vertex_count() == 4
        assert G.edge_count() == 5
        # the copy recycles the same free slots
        assert c.insert_vertex("n") == 1
        assert G.insert_vertex("n") == 0

    def test_memory_usage_positive(self, scenario_graph):
        assert scenario_graph.memory_usage() > 0

    def test_repr(self, scenario_graph):
        assert repr(scenario_graph) == "DirectedGraph(vertices=5, edges=6)"

    def test_capacity_preallocates(self):
        G = DirectedGraph(capacity=64)
        assert G._vertices.capacity >= 64
        assert G.empty()


@pytest.mark.slow
def test_grow_shrink_cycles_stay_consistent():
    G = DirectedGraph()
    live = []
    for rnd in range(20):
        for k in range(50):
            live.append(G.insert_vertex((rnd, k)))
        for i in range(0, len(live) - 1, 3):
            G.insert_edge(live[i], live[i + 1], float(i))
            G.insert_edge(live[i + 1], live[i], float(i))
        doomed = set(live[::4])
        G.erase_vertices(doomed)
        live = [v for v in live if v not in doomed]
        assert_consistent(G)
    assert G.vertex_count() == len(live)
    assert G._vertices.extent < 20 * 50
