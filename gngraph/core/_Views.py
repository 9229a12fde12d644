import numpy as np
import polars as pl
import scipy.sparse as sp


def _numeric(w):
    try:
        return float(w)
    except (TypeError, ValueError):
        raise TypeError(f"edge weight {w!r} is not numeric; views need float weights") from None


class ViewsClass:
    # Materialized views

    def _records(self):
        """INTERNAL: ``(tail, head, weight)`` for every stored edge record.

        Unlike :meth:`edges`, an undirected edge shows up once per endpoint,
        which is what the adjacency matrix and degree counts need.
        """
        for pos, vertex in self._vertices.items():
            for e in vertex.edges:
                yield pos, e.head, e.weight

    def edges_view(self):
        """Build a Polars DF [DataFrame] view of edges.

        Returns
        ---
        polars.DataFrame
            Columns ``tail``, ``head`` (Int64) and ``weight`` (Float64), one row
            per edge in :meth:`edges` order. Parallel edges give repeated rows.

        Raises
        --
        TypeError
            If a weight cannot be converted with ``float()``. The graph itself
            stores any weight object; only the matrix and table views need
            numeric ones.

        """
        tails, heads, weights = [], [], []
        for t, h, w in self.edges():
            tails.append(t)
            heads.append(h)
            weights.append(_numeric(w))
        return pl.DataFrame(
            {"tail": tails, "head": heads, "weight": weights},
            schema={"tail": pl.Int64, "head": pl.Int64, "weight": pl.Float64},
        )

    def vertices_view(self):
        """Read-only vertex table.

        Returns
        ---
        polars.DataFrame
            Columns: ``index``, ``value`` (Object), ``out_degree``, ``in_degree``.
            Empty graphs give an empty frame with the same schema.

        """
        schema = {
            "index": pl.Int64,
            "value": pl.Object,
            "out_degree": pl.Int64,
            "in_degree": pl.Int64,
        }
        if self.empty():
            return pl.DataFrame(schema=schema)

        idx = self._vertices.indices()
        out_deg = self.degree_vector("out")[idx]
        in_deg = self.degree_vector("in")[idx]
        values = [self._vertices._values[i].value for i in idx]
        return pl.DataFrame(
            [
                pl.Series("index", idx, dtype=pl.Int64),
                pl.Series("value", values, dtype=pl.Object),
                pl.Series("out_degree", out_deg, dtype=pl.Int64),
                pl.Series("in_degree", in_deg, dtype=pl.Int64),
            ]
        )

    def adjacency_matrix(self, weighted=True):
        """Sparse adjacency over slot positions.

        Parameters
        --
        weighted : bool, optional
            Sum edge weights per ``(tail, head)``; otherwise count records.

        Returns
        ---
        scipy.sparse.csr_matrix
            Shape ``(extent, extent)``; rows and columns of dead slots are
            empty. Undirected graphs give a symmetric matrix with each
            self-loop counted once on the diagonal.

        Raises
        --
        TypeError
            If ``weighted`` and a weight cannot be converted with ``float()``.

        """
        n = self._vertices.extent
        rows, cols, data = [], [], []
        for t, h, w in self._records():
            rows.append(t)
            cols.append(h)
            data.append(_numeric(w) if weighted else 1.0)
        # COO -> CSR sums duplicate (parallel) entries
        rows = np.asarray(rows, dtype=np.int64)
        cols = np.asarray(cols, dtype=np.int64)
        A = sp.coo_matrix((np.asarray(data, dtype=float), (rows, cols)), shape=(n, n))
        return A.tocsr()

    def degree_vector(self, mode: str = "out"):
        """Per-slot degree counts (dead slots are 0).

        Parameters
        --
        mode : {"out", "in"}
            Count records leaving (``out``) or entering (``in``) each vertex.

        Returns
        ---
        numpy.ndarray
            ``int64`` array of length ``extent``.

        """
        n = self._vertices.extent
        if mode == "out":
            deg = np.zeros(n, dtype=np.int64)
            for pos, vertex in self._vertices.items():
                deg[pos] = len(vertex.edges)
            return deg
        if mode == "in":
            heads = [h for _t, h, _w in self._records()]
            return np.bincount(np.asarray(heads, dtype=np.int64), minlength=n).astype(np.int64)
        raise ValueError("mode must be 'out' or 'in'")
