from __future__ import annotations
import numpy as np
import pytest
from motion.pipeline.smoothing import SmoothingStage
from motion.math.energy import energy_split, energy_split_batch


def test_first_sample_is_its_own_mean():
    s = SmoothingStage(100)
    out = s.filter([0.3, -1.2, 9.8])
    assert np.allclose(out, 0.0)


def test_subtracts_window_mean_including_new_sample():
    s = SmoothingStage(3)
    s.filter([1.0, 2.0, 3.0])
    out = s.filter([3.0, 2.0, 1.0])
    assert np.allclose(out, [1.0, 0.0, -1.0])


def test_constant_input_converges_to_zero():
    s = SmoothingStage(4)
    s.filter([5.0, 5.0, 5.0])  # warm-up with a different value
    for _ in range(4):
        out = s.filter([0.5, -0.25, 2.0])
    assert np.allclose(out, 0.0, atol=1e-12)


def test_energy_split_uses_squared_components():
    h, v = energy_split(np.array([1.0, 2.0, 3.0]))
    assert h == pytest.approx(5.0)
    assert v == pytest.approx(9.0)


def test_energy_split_batch_matches_scalar():
    rng = np.random.default_rng(3)
    S = rng.normal(size=(50, 3))
    E = energy_split_batch(S)
    assert E.shape == (50, 2)
    for i in (0, 17, 49):
        assert np.allclose(E[i], energy_split(S[i]))
    assert np.all(E >= 0.0)
    with pytest.raises(ValueError):
        energy_split_batch(np.zeros((4, 2)))
