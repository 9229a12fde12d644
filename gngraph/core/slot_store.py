from __future__ import annotations

import operator

import numpy as np

from ._helpers import NO_SLOT, InvalidHandleError, _as_position, _equivalent

_END = -1  # cursor position of the end sentinel


class SlotCursor:
    """Bidirectional position in a :class:`SlotStore`.

    A cursor is a (store, slot position) pair. Stepping skips dead slots; the
    end sentinel sits past the last live element and is never dereferenced.
    Cursors are immutable: ``next()``/``prev()`` return new cursors.
    """

    __slots__ = ("_store", "_pos")

    def __init__(self, store: SlotStore, position: int):
        self._store = store
        self._pos = position

    @property
    def store(self) -> SlotStore:
        return self._store

    @property
    def is_end(self) -> bool:
        return self._pos == _END

    @property
    def index(self) -> int:
        """Slot position of this cursor.

        Raises
        --
        InvalidHandleError
            For the end sentinel.

        """
        if self._pos == _END:
            raise InvalidHandleError("end cursor has no index")
        return self._pos

    @property
    def value(self):
        """The stored value (slot must be live)."""
        return self._store[self.index]

    def next(self):
        if self._pos == _END:
            raise InvalidHandleError("cannot advance past end")
        return self._store._cursor(self._store._next_live(self._pos))

    def prev(self):
        start = self._store._size if self._pos == _END else self._pos
        pos = self._store._prev_live(start)
        if pos == _END:
            raise InvalidHandleError("cannot step before the first element")
        return self._store._cursor(pos)

    def __add__(self, steps: int):
        if steps < 0:
            return self.__sub__(-steps)
        cur = self
        for _ in range(steps):
            cur = cur.next()
        return cur

    def __sub__(self, steps: int):
        if steps < 0:
            return self.__add__(-steps)
        cur = self
        for _ in range(steps):
            cur = cur.prev()
        return cur

    def __eq__(self, other):
        if not isinstance(other, SlotCursor):
            return NotImplemented
        return self._store is other._store and self._pos == other._pos

    def __hash__(self):
        return hash((id(self._store), self._pos))

    def __repr__(self):
        where = "end" if self._pos == _END else self._pos
        return f"{type(self).__name__}({where})"


class SlotStore:
    """Value store with stable, recyclable integer handles.

    Every inserted value lives in a slot whose position is its handle. Erased
    slots are threaded onto an intrusive free list and reused LIFO by later
    inserts, so a long-running store that grows and shrinks does not leak
    positions.

    Parameters
    --
    less : callable, optional
        Strict weak ordering ``less(a, b) -> bool`` over values. Only used to
        derive equivalence (``not less(a, b) and not less(b, a)``) for keyed
        lookups and erasure; iteration order is always slot order.
        Defaults to ``operator.lt``.
    capacity : int, optional
        Number of slots to preallocate.
    cursor_type : type, optional
        Cursor class handed out by ``begin``/``end``/``erase``. Must accept
        ``(store, position)``.

    Notes
    -
    - Slots are kept as parallel arrays: a list of values, a NumPy ``int64``
      array of free-list links and a NumPy ``bool`` validity mask.
    - A position is iterated iff its validity flag is set.
    - Handles are plain integers; once a slot is erased its handle is stale
      and may later denote a different value.

    """

    def __init__(self, less=None, capacity: int = 0, cursor_type=SlotCursor):
        self._less = less if less is not None else operator.lt
        self._cursor_type = cursor_type
        self._initial_capacity = int(capacity) if capacity and capacity > 0 else 0
        self._reset(self._initial_capacity)

    def _reset(self, capacity: int):
        self._values = []
        self._valid = np.zeros(capacity, dtype=bool)
        self._links = np.full(capacity, NO_SLOT, dtype=np.int64)
        self._size = 0  # slot high-water mark
        self._count = 0
        self._free_head = NO_SLOT

    # Growth

    def _grow_to(self, target: int):
        cap = self._valid.shape[0]
        if target <= cap:
            return
        # geometric bump keeps appends amortized O(1)
        new_cap = max(target, cap + max(8, cap >> 1))
        valid = np.zeros(new_cap, dtype=bool)
        valid[:cap] = self._valid
        links = np.full(new_cap, NO_SLOT, dtype=np.int64)
        links[:cap] = self._links
        self._valid = valid
        self._links = links

    def reserve(self, capacity: int):
        """Preallocate slot arrays for at least ``capacity`` positions."""
        self._grow_to(int(capacity))

    # Position helpers

    def _cursor(self, pos: int):
        return self._cursor_type(self, pos)

    def _next_live(self, pos: int) -> int:
        start = pos + 1
        if start >= self._size:
            return _END
        window = self._valid[start : self._size]
        k = int(window.argmax())
        return start + k if window[k] else _END

    def _prev_live(self, pos: int) -> int:
        start = min(pos, self._size) - 1
        if start < 0:
            return _END
        window = self._valid[start::-1]
        k = int(window.argmax())
        return start - k if window[k] else _END

    def _position(self, handle) -> int:
        if isinstance(handle, SlotCursor):
            if handle._store is not self:
                raise InvalidHandleError("cursor belongs to another store")
            if handle._pos == _END:
                raise InvalidHandleError("end cursor does not denote an element")
            return handle._pos
        return _as_position(handle)

    def _live_position(self, handle) -> int:
        pos = self._position(handle)
        if not 0 <= pos < self._size or not self._valid[pos]:
            raise InvalidHandleError(f"slot {pos} is not live")
        return pos

    def is_live(self, handle) -> bool:
        """True if ``handle`` currently denotes a live slot."""
        try:
            self._live_position(handle)
        except InvalidHandleError:
            return False
        return True

    def __contains__(self, handle):
        return self.is_live(handle)

    # Element access

    def __getitem__(self, handle):
        return self._values[self._live_position(handle)]

    def __setitem__(self, handle, value):
        self._values[self._live_position(handle)] = value

    # Modifiers

    def insert(self, value) -> int:
        """Store ``value`` and return its handle.

        Reuses the most recently freed slot if there is one, otherwise appends
        a new slot. Never invalidates other handles.

        Returns
        ---
        int
            Slot position of the new value.

        """
        if self._free_head == NO_SLOT:
            pos = self._size
            self._grow_to(pos + 1)
            self._values.append(value)
            self._size += 1
        else:
            pos = self._free_head
            self._free_head = int(self._links[pos])
            self._links[pos] = NO_SLOT
            self._values[pos] = value
        self._valid[pos] = True
        self._count += 1
        return pos

    def _release(self, pos: int):
        # caller guarantees ``pos`` is live
        self._valid[pos] = False
        self._values[pos] = None
        self._links[pos] = self._free_head
        self._free_head = pos
        self._count -= 1

    def erase(self, handle):
        """Erase the element at ``handle``.

        Parameters
        --
        handle : int | SlotCursor
            Must denote a live slot.

        Returns
        ---
        SlotCursor
            Cursor at the next live element, or ``end()``.

        Raises
        --
        InvalidHandleError
            If ``handle`` is stale, out of range, or the end sentinel.

        """
        pos = self._live_position(handle)
        self._release(pos)
        return self._cursor(self._next_live(pos))

    def _range_positions(self, first, last) -> list[int]:
        """INTERNAL: Live positions in the half-open cursor range ``[first, last)``."""
        for cur in (first, last):
            if not isinstance(cur, SlotCursor) or cur._store is not self:
                raise InvalidHandleError("range bounds must be cursors of this store")
        if not last.is_end and not self.is_live(last._pos):
            raise InvalidHandleError(f"range end {last._pos} is not live")
        if first == last:
            return []
        if first.is_end or (not last.is_end and first._pos > last._pos):
            raise ValueError("range end is not reachable from range start")
        pos = self._live_position(first)
        stop = last._pos
        out = []
        while pos != _END and pos != stop:
            out.append(pos)
            pos = self._next_live(pos)
        return out

    def erase_range(self, first, last):
        """Erase every live element in ``[first, last)``.

        Returns
        ---
        SlotCursor
            ``last``.

        """
        for pos in self._range_positions(first, last):
            self._release(pos)
        return last

    def erase_key(self, key) -> int:
        """Erase every element equivalent to ``key`` under the store ordering.

        Returns
        ---
        int
            Number of elements erased (0 if none matched).

        """
        doomed = [pos for pos, v in self.items() if _equivalent(self._less, v, key)]
        for pos in doomed:
            self._release(pos)
        return len(doomed)

    def clear(self):
        """Drop every slot and reset the free list."""
        self._reset(self._initial_capacity)

    # Lookup

    def find(self, key):
        """Cursor at the first element equivalent to ``key``, or ``end()``."""
        for pos, v in self.items():
            if _equivalent(self._less, v, key):
                return self._cursor(pos)
        return self.end()

    def count(self, key) -> int:
        """Number of elements equivalent to ``key``."""
        return sum(1 for v in self if _equivalent(self._less, v, key))

    # Capacity

    def size(self) -> int:
        return self._count

    def __len__(self):
        return self._count

    def empty(self) -> bool:
        return self._count == 0

    @property
    def capacity(self) -> int:
        """Allocated slot positions."""
        return int(self._valid.shape[0])

    @property
    def extent(self) -> int:
        """Slot positions ever handed out (live + free); all handles are below this."""
        return self._size

    @property
    def free_count(self) -> int:
        """Dead slots waiting on the free list."""
        return self._size - self._count

    @property
    def less(self):
        return self._less

    # Iteration

    def begin(self):
        return self._cursor(self._next_live(-1))

    def end(self):
        return self._cursor(_END)

    def __iter__(self):
        pos = self._next_live(-1)
        while pos != _END:
            yield self._values[pos]
            pos = self._next_live(pos)

    def __reversed__(self):
        pos = self._prev_live(self._size)
        while pos != _END:
            yield self._values[pos]
            pos = self._prev_live(pos)

    def items(self):
        """Yield ``(handle, value)`` pairs in ascending slot order."""
        pos = self._next_live(-1)
        while pos != _END:
            yield pos, self._values[pos]
            pos = self._next_live(pos)

    def indices(self) -> np.ndarray:
        """Live slot positions, ascending."""
        return np.flatnonzero(self._valid[: self._size])

    def validity_mask(self) -> np.ndarray:
        """Copy of the validity flags for positions ``[0, extent)``."""
        return self._valid[: self._size].copy()

    # Copying

    def copy(self, copy_value=None):
        """Copy of the store with identical handles and free list.

        Parameters
        --
        copy_value : callable, optional
            Applied to every live value; values are shared when omitted.

        """
        new = self.__class__(
            less=self._less,
            capacity=self._initial_capacity,
            cursor_type=self._cursor_type,
        )
        if copy_value is None:
            new._values = list(self._values)
        else:
            new._values = [
                copy_value(v) if self._valid[i] else None for i, v in enumerate(self._values)
            ]
        new._valid = self._valid.copy()
        new._links = self._links.copy()
        new._size = self._size
        new._count = self._count
        new._free_head = self._free_head
        return new

    def __repr__(self):
        return (
            f"{type(self).__name__}(size={self._count}, "
            f"extent={self._size}, free={self.free_count})"
        )
