from __future__ import annotations
import numpy as np

__all__ = ["energy_split", "energy_split_batch"]


def energy_split(s) -> tuple[float, float]:
    """Split a smoothed vector into (horizontal, vertical) energy.

    horizontal = sx^2 + sy^2, vertical = sz^2. No square root is taken; any
    threshold compared against these values is in squared units.
    """
    sx, sy, sz = float(s[0]), float(s[1]), float(s[2])
    return sx * sx + sy * sy, sz * sz


def energy_split_batch(S: np.ndarray) -> np.ndarray:
    """Vectorised energy_split for a (T,3) series; returns (T,2) [h, v]."""
    X = np.asarray(S, dtype=float)
    if X.ndim != 2 or X.shape[1] != 3:
        raise ValueError(f"Expected (T,3) array, got shape {X.shape}")
    h = X[:, 0] ** 2 + X[:, 1] ** 2
    v = X[:, 2] ** 2
    return np.stack([h, v], axis=1)
