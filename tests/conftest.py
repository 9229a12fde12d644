"""Shared fixtures and helpers for graph tests."""

import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]  # project root
sys.path.insert(0, str(ROOT))

from gngraph.core.graph import DirectedGraph  # noqa: E402
from gngraph.core.undirected import UndirectedGraph  # noqa: E402

# ======================================================================
# FIXTURES
# ======================================================================


@pytest.fixture
def scenario_graph():
    """Five vertices valued 0..4 and six edges, one of them duplicated.

    0->1 (1), 1->2 (2), 1->3 (4), 1->3 (4), 3->4 (1), 4->2 (1)
    """
    G = DirectedGraph()
    for v in range(5):
        G.insert_vertex(v)
    G.insert_edge(0, 1, 1)
    G.insert_edge(1, 2, 2)
    G.insert_edge(1, 3, 4)
    G.insert_edge(1, 3, 4)
    G.insert_edge(3, 4, 1)
    G.insert_edge(4, 2, 1)
    return G


@pytest.fixture
def ring_graph():
    """Undirected 4-cycle a-b-c-d-a plus a self-loop on c."""
    G = UndirectedGraph()
    a, b, c, d = (G.insert_vertex(x) for x in "abcd")
    G.insert_edge(a, b, 1.0)
    G.insert_edge(b, c, 2.0)
    G.insert_edge(c, d, 3.0)
    G.insert_edge(d, a, 4.0)
    G.insert_edge(c, c, 0.5)
    return G


# ======================================================================
# HELPERS
# ======================================================================


def assert_consistent(G):
    """No edge points at a dead slot and the counter matches a rescan."""
    assert G.dangling_edges() == []
    for _tail, head, _w in G.edges():
        assert G.has_vertex(head)
    assert G.edge_count() == G.count_edges()


def assert_mirrored(G):
    """Every record of an undirected graph has a twin in the head's list."""
    for tail in G.vertices():
        for e in G.out_edges(tail):
            twin = e._twin
            assert twin is not None
            assert twin._twin is e
            assert twin.head == tail
            assert twin in list(G.out_edges(e.head))
