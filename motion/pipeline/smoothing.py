from __future__ import annotations
import numpy as np
from ..math.window import BoundedWindow, as_vector3

__all__ = ["SmoothingStage"]


class SmoothingStage:
    """Running-mean bias removal over a long window of raw vectors.

    Each sample is pushed first, then the window mean (including that sample)
    is subtracted from it. A constant input held for `window_size` ticks
    therefore comes out as the zero vector.
    """

    def __init__(self, window_size: int):
        self.window = BoundedWindow(window_size, width=3)

    @property
    def window_size(self) -> int:
        return self.window.capacity

    def filter(self, sample) -> np.ndarray:
        s = as_vector3(sample)
        self.window.push(s)
        return s - self.window.mean()
