from __future__ import annotations

try:
    import networkx as nx
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "Optional dependency 'networkx' is not installed. "
        "Install with: pip install gngraph[networkx]"
    ) from e

from typing import TYPE_CHECKING, Any

from ..core._helpers import EdgeType

if TYPE_CHECKING:
    from ..core.graph import DirectedGraph


def to_nx(graph: DirectedGraph, *, value_attr="value", weight_attr="weight"):
    """Export a graph to a NetworkX multigraph.

    Parameters
    ----------
    graph : DirectedGraph | UndirectedGraph
    value_attr : str
        Node attribute receiving the vertex value.
    weight_attr : str
        Edge attribute receiving the edge weight.

    Returns
    -------
    networkx.MultiDiGraph | networkx.MultiGraph
        Nodes are the vertex indices. Parallel edges stay parallel. An
        undirected graph exports as a ``MultiGraph`` with one edge per
        mirrored pair.

    """
    undirected = graph.edge_type is EdgeType.UNDIRECTED
    nxG = nx.MultiGraph() if undirected else nx.MultiDiGraph()
    for idx, value in graph.items():
        nxG.add_node(idx, **{value_attr: value})

    # Adjacency lists are newest first; replay oldest first so that a round
    # trip through from_nx restores the visiting order. NetworkX groups
    # parallel edges by head, so interleaved heads come back grouped.
    per_tail: dict[int, list[tuple[int, Any]]] = {}
    for tail, head, weight in graph.edges():
        per_tail.setdefault(tail, []).append((head, weight))
    for tail, out in per_tail.items():
        for head, weight in reversed(out):
            nxG.add_edge(tail, head, **{weight_attr: weight})
    return nxG


def from_nx(nxG, *, less=None, value_attr="value", weight_attr="weight", default_weight=1.0):
    """Build a graph from any NetworkX graph.

    Parameters
    ----------
    nxG : networkx.Graph
        Directed inputs give a :class:`DirectedGraph`, undirected ones an
        :class:`UndirectedGraph`.
    less : callable, optional
        Ordering for the new graph.
    value_attr : str
        Node attribute holding the vertex value; the node key is used when
        the attribute is missing.
    weight_attr : str
        Edge attribute holding the weight.
    default_weight : float
        Weight for edges without ``weight_attr``.

    Returns
    -------
    tuple[DirectedGraph, dict]
        ``(graph, mapping)`` with ``mapping[node] -> vertex index``.

    """
    from ..core.graph import DirectedGraph
    from ..core.undirected import UndirectedGraph

    cls = DirectedGraph if nxG.is_directed() else UndirectedGraph
    G = cls(less=less, capacity=nxG.number_of_nodes())

    mapping = {}
    for node, data in nxG.nodes(data=True):
        mapping[node] = G.insert_vertex(data.get(value_attr, node))

    for u, v, data in nxG.edges(data=True):
        G.insert_edge(mapping[u], mapping[v], data.get(weight_attr, default_weight))
    return G, mapping
