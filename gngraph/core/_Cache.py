from __future__ import annotations

import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .graph import DirectedGraph


class CacheManager:
    """Cache manager for materialized sparse adjacency (CSR/CSC)."""

    def __init__(self, graph):
        self._G = graph
        self._csr = None
        self._csc = None
        self._csr_version = None
        self._csc_version = None

    # ==================== CSR/CSC Properties ====================

    @property
    def csr(self):
        """Weighted adjacency in CSR (Compressed Sparse Row) format.
        Builds and caches on first access; rebuilt after any mutation.
        """
        if self._csr is None or self._csr_version != self._G._version:
            self._csr = self._G.adjacency_matrix(weighted=True)
            self._csr_version = self._G._version
        return self._csr

    @property
    def csc(self):
        """Weighted adjacency in CSC (Compressed Sparse Column) format."""
        if self._csc is None or self._csc_version != self._G._version:
            self._csc = self.csr.tocsc()
            self._csc_version = self._G._version
        return self._csc

    def has_csr(self) -> bool:
        """True if CSR cache exists and matches current graph version."""
        return self._csr is not None and self._csr_version == self._G._version

    def has_csc(self) -> bool:
        """True if CSC cache exists and matches current graph version."""
        return self._csc is not None and self._csc_version == self._G._version

    # ==================== Cache Management ====================

    def invalidate(self, formats=None):
        """Invalidate cached formats.

        Parameters
        --
        formats : list[str], optional
            Formats to invalidate ('csr', 'csc'). If None, invalidate all.

        """
        if formats is None:
            formats = ["csr", "csc"]

        for fmt in formats:
            if fmt == "csr":
                self._csr = None
                self._csr_version = None
            elif fmt == "csc":
                self._csc = None
                self._csc_version = None
            else:
                raise ValueError(f"unknown cache format {fmt!r}")

    def build(self, formats=None):
        """Pre-build specified formats (eager caching)."""
        if formats is None:
            formats = ["csr", "csc"]

        for fmt in formats:
            if fmt == "csr":
                _ = self.csr
            elif fmt == "csc":
                _ = self.csc
            else:
                raise ValueError(f"unknown cache format {fmt!r}")

    def clear(self):
        """Clear all caches."""
        self.invalidate()

    def info(self):
        """Get cache status and memory usage.

        Returns
        ---
        dict
            Status of each cached format

        """

        def _format_info(matrix, version):
            if matrix is None:
                return {"cached": False}
            size_bytes = matrix.data.nbytes + matrix.indices.nbytes + matrix.indptr.nbytes
            return {
                "cached": True,
                "version": version,
                "size_mb": size_bytes / (1024**2),
                "nnz": matrix.nnz,
                "shape": matrix.shape,
            }

        return {
            "csr": _format_info(self._csr, self._csr_version),
            "csc": _format_info(self._csc, self._csc_version),
        }


class Operations:
    # Copying / accounting / integrity

    @property
    def cache(self) -> CacheManager:
        return self._cache

    def copy(self, history: bool = False) -> DirectedGraph:
        """Deep copy of the graph structure with identical vertex indices.

        Vertex values are shared (not copied). The free list is carried over,
        so the copy recycles slots in the same order as the original.

        Parameters
        ----------
        history : bool
            If True, copy the mutation history and snapshot timeline.
            If False, the new graph starts with a clean history.

        """
        new = self.__class__(less=self._less, history=self._history_enabled)
        twins = {}

        def _copy_vertex(vertex):
            dup = type(vertex)(vertex.value)
            # _push_front reverses, so replay the records back to front
            for e in reversed(list(vertex.edges)):
                rec = dup.edges._push_front(e.weight, e.head)
                twins[id(e)] = rec
            return dup

        new._vertices = self._vertices.copy(copy_value=_copy_vertex)
        # relink mirrored records (undirected graphs)
        for vertex in self._vertices:
            for e in vertex.edges:
                if e._twin is not None:
                    twins[id(e)]._twin = twins[id(e._twin)]
        new._edge_cnt = self._edge_cnt

        if history:
            new._history = [dict(evt) for evt in self._history]
            new._version = self._version
            new._snapshots = list(self._snapshots)
        return new

    def count_edges(self) -> int:
        """Recount edges by iteration (checksum for the maintained counter)."""
        return sum(1 for _ in self.edges())

    def dangling_edges(self) -> list[tuple[int, int]]:
        """``(tail, head)`` pairs whose head is not a live vertex (always empty)."""
        live = self._vertices
        return [(t, h) for t, h, _w in self.edges() if not live.is_live(h)]

    def memory_usage(self):
        """Approximate total memory usage in bytes.

        Returns
        ---
        int
            Slot arrays (exact), plus per-object estimates for vertex and
            edge records.

        """
        store = self._vertices
        array_bytes = store._valid.nbytes + store._links.nbytes
        list_bytes = sys.getsizeof(store._values)
        record_bytes = 0
        for vertex in store:
            record_bytes += sys.getsizeof(vertex) + sys.getsizeof(vertex.edges)
            record_bytes += sum(sys.getsizeof(e) for e in vertex.edges)
        return array_bytes + list_bytes + record_bytes
