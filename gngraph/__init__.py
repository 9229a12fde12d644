# gngraph/__init__.py
"""gngraph: stable-handle graphs for growing-network learners."""

from __future__ import annotations

from importlib import import_module
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version
from typing import Any

# Lazily exposed submodules (imported on first attribute access)
_lazy_submodules = {
    # namespaces
    "core": "gngraph.core",
    "adapters": "gngraph.adapters",
    # adapter modules (direct convenience)
    "networkx": "gngraph.adapters.networkx_adapter",
}

# Curated top-level symbols (lazy). name -> (module, attribute)
_lazy_symbols: dict[str, tuple[str, str]] = {
    # Containers
    "SlotStore": ("gngraph.core.slot_store", "SlotStore"),
    "SlotCursor": ("gngraph.core.slot_store", "SlotCursor"),
    "Edge": ("gngraph.core._adjacency", "Edge"),
    "EdgeList": ("gngraph.core._adjacency", "EdgeList"),
    "EdgeCursor": ("gngraph.core._adjacency", "EdgeCursor"),
    # Graphs
    "DirectedGraph": ("gngraph.core.graph", "DirectedGraph"),
    "VertexCursor": ("gngraph.core.graph", "VertexCursor"),
    "UndirectedGraph": ("gngraph.core.undirected", "UndirectedGraph"),
    "GraphDiff": ("gngraph.core._GraphDiff", "GraphDiff"),
    # Errors / enums
    "InvalidHandleError": ("gngraph.core._helpers", "InvalidHandleError"),
    "EdgeType": ("gngraph.core._helpers", "EdgeType"),
    # NetworkX adapter (optional dependency)
    "to_nx": ("gngraph.adapters.networkx_adapter", "to_nx"),
    "from_nx": ("gngraph.adapters.networkx_adapter", "from_nx"),
}

__all__ = sorted(set(list(_lazy_submodules) + list(_lazy_symbols)))


def __getattr__(name: str) -> Any:  # PEP 562: lazy attribute resolution
    if name in _lazy_submodules:
        return import_module(_lazy_submodules[name])
    if name in _lazy_symbols:
        mod, attr = _lazy_symbols[name]
        return getattr(import_module(mod), attr)
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(__all__))


try:
    __version__ = _pkg_version("gngraph")
except PackageNotFoundError:
    __version__ = "0.0.0"
