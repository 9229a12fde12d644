import inspect
import json
import time
from collections import Counter
from datetime import UTC, datetime
from functools import wraps

import numpy as np
import polars as pl

from ._GraphDiff import GraphDiff


class History:
    # History and Timeline

    # Mutating methods to wrap. Add here if you add new mutators.
    _MUTATORS = (
        "insert_vertex",
        "erase_vertex",
        "erase_vertex_range",
        "erase_vertex_key",
        "erase_vertices",
        "set_value",
        "set_weight",
        "insert_edge",
        "erase_after_edge",
        "erase_after_edge_range",
        "clear",
    )

    def _init_history(self, enabled: bool):
        self._history_enabled = bool(enabled)
        self._history = []  # list[dict]
        self._version = 0
        self._history_clock0 = time.perf_counter_ns()
        self._snapshots = []
        self._install_history_hooks()  # wrap mutating methods

    def _utcnow_iso(self) -> str:
        return datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")

    def _jsonify(self, x):
        # Make args/return JSON-safe & compact.

        if x is None or isinstance(x, (bool, int, float, str)):
            return x
        # Cursors are logged by position
        position = getattr(x, "_pos", None)
        if isinstance(position, int):
            return position
        if isinstance(x, (set, frozenset)):
            return sorted(self._jsonify(v) for v in x)
        if isinstance(x, (list, tuple)):
            return [self._jsonify(v) for v in x]
        if isinstance(x, dict):
            return {str(k): self._jsonify(v) for k, v in x.items()}
        # NumPy scalars
        if isinstance(x, (np.generic,)):
            return x.item()
        # Arrays, edge cursors, or other heavy objects -> just a tag
        t = type(x).__name__
        return f"<<{t}>>"

    def _log_event(self, op: str, **fields):
        if not self._history_enabled:
            return
        evt = {
            "version": self._version,
            "ts_utc": self._utcnow_iso(),  # ISO-8601 with Z
            "mono_ns": time.perf_counter_ns() - self._history_clock0,
            "op": op,
        }
        # sanitize
        for k, v in fields.items():
            evt[k] = self._jsonify(v)
        self._history.append(evt)

    def _log_mutation(self, name=None):
        def deco(fn):
            op = name or fn.__name__
            sig = inspect.signature(fn)

            @wraps(fn)
            def wrapper(*args, **kwargs):
                result = fn(*args, **kwargs)
                # version moves even while logging is paused; caches key on it
                self._version += 1
                if not self._history_enabled:
                    return result
                bound = sig.bind(*args, **kwargs)
                bound.apply_defaults()
                payload = {}
                # record all call args except 'self'
                for k, v in bound.arguments.items():
                    if k != "self":
                        payload[k] = v
                payload["result"] = result
                self._log_event(op, **payload)
                return result

            return wrapper

        return deco

    def _install_history_hooks(self):
        for name in self._MUTATORS:
            if hasattr(self, name):
                fn = getattr(self, name)
                # Avoid double-wrapping
                if getattr(fn, "__wrapped__", None) is None:
                    setattr(self, name, self._log_mutation(name)(fn))

    @property
    def version(self) -> int:
        """Mutation counter; advances on every wrapped mutator call."""
        return self._version

    def history(self, as_df: bool = False):
        """Return the append-only mutation history.

        Parameters
        --
        as_df : bool, default False
            If True, return a Polars DF [DataFrame]; otherwise return a list of dicts.

        Returns
        ---
        list[dict] or polars.DataFrame
            Each event includes: 'version', 'ts_utc' (UTC ISO-8601), 'mono_ns'
            (monotonic nanoseconds since logger start), 'op', call snapshot fields,
            and 'result' when captured.

        Notes
        -
        Ordering is guaranteed by 'version' and 'mono_ns'. The log is in-memory until exported.

        """
        if as_df:
            return self._history_frame()
        return list(self._history)

    def _history_frame(self) -> pl.DataFrame:
        # Different ops carry different fields; a column mixing kinds (or holding
        # lists) is stored as JSON text so every event fits one schema.
        keys = {}
        for evt in self._history:
            keys.update(dict.fromkeys(evt))
        cols = {}
        for k in keys:
            vals = [evt.get(k) for evt in self._history]
            kinds = {type(v) for v in vals if v is not None}
            if kinds == {int, float}:
                vals = [None if v is None else float(v) for v in vals]
            elif len(kinds) > 1 or kinds & {list, dict}:
                vals = [None if v is None else json.dumps(v) for v in vals]
            cols[k] = vals
        return pl.DataFrame(cols)

    def export_history(self, path: str):
        """Write the mutation history to disk.

        Parameters
        --
        path : str
            Output path. Supported extensions: '.parquet', '.ndjson' (a.k.a. '.jsonl'),
            '.json', '.csv'. Unknown extensions default to Parquet by appending '.parquet'.

        Returns
        ---
        int
            Number of events written. Returns 0 if the history is empty.

        Raises
        --
        OSError
            If the file cannot be written.

        """
        if not self._history:
            return 0
        p = str(path).lower()
        if p.endswith(".ndjson") or p.endswith(".jsonl"):
            with open(path, "w", encoding="utf-8") as f:
                for r in self._history:
                    f.write(json.dumps(r, ensure_ascii=False) + "\n")
            return len(self._history)
        if p.endswith(".json"):
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self._history, f, ensure_ascii=False)
            return len(self._history)
        df = self._history_frame()
        if p.endswith(".parquet"):
            df.write_parquet(path)
            return len(df)
        if p.endswith(".csv"):
            df.write_csv(path)
            return len(df)
        # Default to Parquet if unknown
        df.write_parquet(str(path) + ".parquet")
        return len(df)

    def enable_history(self, flag: bool = True):
        """Enable or disable in-memory mutation logging."""
        self._history_enabled = bool(flag)

    def clear_history(self):
        """Clear the in-memory mutation log. Exported files are untouched."""
        self._history.clear()

    def mark(self, label: str):
        """Insert a manual marker into the mutation history.

        Parameters
        --
        label : str
            Human-readable tag for the marker event.

        Notes
        -
        The event is recorded with 'op'='mark'. Logging must be enabled for the
        marker to be recorded.

        """
        self._log_event("mark", label=label)

    # Snapshots

    def _current_snapshot(self, label="current"):
        return {
            "label": label,
            "version": self._version,
            "vertex_ids": set(int(i) for i in self._vertices.indices()),
            "edge_pairs": Counter((tail, head) for tail, head, _w in self.edges()),
        }

    def snapshot(self, label=None):
        """Create a named snapshot of current graph state.

        Parameters
        --
        label : str, optional
            Human-readable label for snapshot (auto-generated if None)

        Returns
        ---
        dict
            Snapshot metadata plus the live vertex indices and edge pair multiset.

        """
        if label is None:
            label = f"snapshot_{len(self._snapshots)}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        snap = self._current_snapshot(label)
        snap["timestamp"] = datetime.now(UTC).isoformat()
        snap["counts"] = {"vertices": self.vertex_count(), "edges": self.edge_count()}
        self._snapshots.append(snap)
        return snap

    def _resolve_snapshot(self, ref):
        """Resolve snapshot reference (label, dict, or graph)."""
        if isinstance(ref, dict):
            return ref
        if isinstance(ref, str):
            for snap in self._snapshots:
                if snap["label"] == ref:
                    return snap
            raise ValueError(f"Snapshot '{ref}' not found")
        if isinstance(ref, History):
            return ref._current_snapshot("external")
        raise TypeError(f"Invalid snapshot reference: {type(ref)}")

    def diff(self, a, b=None):
        """Compare two snapshots, or a snapshot with the current state.

        Parameters
        --
        a : str | dict | graph
            First snapshot (label, snapshot dict, or graph instance)
        b : str | dict | graph | None
            Second snapshot. If None, compare with current state.

        Returns
        ---
        GraphDiff

        """
        snap_a = self._resolve_snapshot(a)
        snap_b = self._resolve_snapshot(b) if b is not None else self._current_snapshot()
        return GraphDiff(snap_a, snap_b)

    def list_snapshots(self):
        return [
            {
                "label": snap["label"],
                "timestamp": snap["timestamp"],
                "version": snap["version"],
                "counts": snap["counts"],
            }
            for snap in self._snapshots
        ]
