from __future__ import annotations
from typing import Protocol

import numpy as np
from ..math.window import BoundedWindow
from ..config.constants import DETECTION_QUANTILE

__all__ = [
    "Denoiser",
    "MeanDenoiser",
    "QuantileDenoiser",
    "DENOISERS",
    "make_denoiser",
]


class Denoiser(Protocol):
    """Per-tick summary of the horizontal and vertical energy streams."""

    def denoise(self, h: float, v: float) -> tuple[float, float]:
        ...


class _WindowedDenoiser:
    """Two independent windows of equal capacity, one per energy stream."""

    def __init__(self, window_size: int):
        self.horizontal = BoundedWindow(window_size)
        self.vertical = BoundedWindow(window_size)

    @property
    def window_size(self) -> int:
        return self.horizontal.capacity

    def denoise(self, h: float, v: float) -> tuple[float, float]:
        self.horizontal.push(h)
        self.vertical.push(v)
        return self._summarize()

    def _summarize(self) -> tuple[float, float]:
        raise NotImplementedError


class MeanDenoiser(_WindowedDenoiser):
    """Window mean of each stream."""

    def _summarize(self) -> tuple[float, float]:
        return self.horizontal.mean(), self.vertical.mean()


class QuantileDenoiser(_WindowedDenoiser):
    """Windowed quantile of each stream (default 0.75).

    The window contents are copied into a scratch buffer sized once at
    construction, sorted in place, and the element at
    floor(len * quantile) is returned. The result is always a sample that is
    present in the window, so isolated spikes do not leak into it.
    """

    def __init__(self, window_size: int, quantile: float = DETECTION_QUANTILE):
        super().__init__(window_size)
        q = float(quantile)
        if not (0.0 <= q < 1.0):
            raise ValueError(f"quantile must be in [0, 1), got {quantile}")
        self.quantile = q
        self._scratch_h = np.zeros(self.window_size, dtype=float)
        self._scratch_v = np.zeros(self.window_size, dtype=float)

    def quantile_index(self, n: int) -> int:
        # Based on the current length so warm-up never indexes past the data
        return int(n * self.quantile)

    def _select(self, window: BoundedWindow, scratch: np.ndarray) -> float:
        view = window.fill(scratch)
        view.sort()
        return float(view[self.quantile_index(view.shape[0])])

    def _summarize(self) -> tuple[float, float]:
        return (
            self._select(self.horizontal, self._scratch_h),
            self._select(self.vertical, self._scratch_v),
        )


DENOISERS = {
    "quantile": QuantileDenoiser,
    "mean": MeanDenoiser,
}


def make_denoiser(name: str, window_size: int) -> Denoiser:
    """Build a denoising strategy by name ('quantile' or 'mean')."""
    key = str(name).strip().lower()
    if key not in DENOISERS:
        raise ValueError(f"Unknown denoiser '{name}'. Expected one of {sorted(DENOISERS)}")
    return DENOISERS[key](window_size)
