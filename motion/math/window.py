from __future__ import annotations
import numpy as np

__all__ = ["BoundedWindow", "as_vector3"]


def as_vector3(v) -> np.ndarray:
    """Coerce a length-3 sequence to a float (3,) array."""
    a = np.asarray(v, dtype=float).reshape(-1)
    if a.shape[0] != 3:
        raise ValueError(f"Expected a 3-component vector, got shape {np.shape(v)}")
    return a


class BoundedWindow:
    """Fixed-capacity FIFO of float samples backed by a preallocated ring buffer.

    - capacity: maximum number of samples kept; the oldest is evicted on overflow
    - width: None for scalar samples, D for (D,) vector samples

    Storage never grows after construction. While the window is filling,
    slots [0, len) are occupied; once full, every slot is.
    """

    def __init__(self, capacity: int, width: int | None = None):
        if int(capacity) <= 0:
            raise ValueError(f"Window capacity must be > 0, got {capacity}")
        self.capacity = int(capacity)
        self.width = None if width is None else int(width)
        shape = (self.capacity,) if self.width is None else (self.capacity, self.width)
        self._buf = np.zeros(shape, dtype=float)
        self._head = 0  # next slot to write
        self._len = 0

    def __len__(self) -> int:
        return self._len

    @property
    def is_full(self) -> bool:
        return self._len == self.capacity

    def push(self, value) -> None:
        self._buf[self._head] = value
        self._head = (self._head + 1) % self.capacity
        if self._len < self.capacity:
            self._len += 1

    def mean(self):
        """Mean over the current samples; divisor is the current length."""
        if self._len == 0:
            raise ValueError("mean() of an empty window")
        m = self._buf[: self._len].mean(axis=0)
        return float(m) if self.width is None else m

    def values(self) -> np.ndarray:
        """Copy of the current samples, oldest first."""
        if not self.is_full:
            return self._buf[: self._len].copy()
        return np.concatenate((self._buf[self._head:], self._buf[: self._head]))

    def fill(self, out: np.ndarray) -> np.ndarray:
        """Copy current samples into a caller-owned buffer; returns the filled view.

        Order is storage order, not insertion order. `out` must hold at least
        len(self) samples.
        """
        view = out[: self._len]
        np.copyto(view, self._buf[: self._len])
        return view
