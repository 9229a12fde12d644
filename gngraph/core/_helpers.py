from enum import Enum

import numpy as np


class EdgeType(Enum):
    DIRECTED = "DIRECTED"
    UNDIRECTED = "UNDIRECTED"


class InvalidHandleError(KeyError):
    """A handle or cursor that does not denote a live element.

    Raised for stale handles (slot already erased or recycled), positions
    outside the store, end sentinels, and edge cursors that belong to another
    adjacency list or whose record was already removed.
    """


NO_SLOT = -1  # free-list terminator


def _equivalent(less, a, b) -> bool:
    """Equivalence derived from a strict weak ordering: neither precedes the other."""
    return not less(a, b) and not less(b, a)


def _as_position(handle) -> int:
    """INTERNAL: Normalize an integer-like handle (``int`` or NumPy integer) to ``int``."""
    if isinstance(handle, (bool, np.bool_)):
        raise TypeError(f"handle must be an integer, got {type(handle).__name__}")
    if isinstance(handle, (int, np.integer)):
        return int(handle)
    raise TypeError(f"handle must be an integer or cursor, got {type(handle).__name__}")
