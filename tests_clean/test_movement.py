from __future__ import annotations
import math
from dataclasses import replace
import numpy as np
import pytest
from motion.config.settings import settings
from motion.pipeline.movement import MovementPipeline, PipelineConfig
from motion.pipeline.denoise import MeanDenoiser, QuantileDenoiser
from motion.pipeline.classifier import Direction


def test_window_ordering_is_enforced():
    with pytest.raises(ValueError):
        MovementPipeline(10, 10, 0.14, 0.5, 1.0)
    with pytest.raises(ValueError):
        MovementPipeline(10, 0, 0.14, 0.5, 1.0)
    with pytest.raises(ValueError):
        MovementPipeline(0, 5, 0.14, 0.5, 1.0)
    pipe = MovementPipeline(10, 9, 0.14, 0.5, 1.0)
    assert pipe.config.detection_window_size == 9


def test_other_configuration_errors_fail_fast():
    with pytest.raises(ValueError):
        PipelineConfig(angle_low_threshold=1.0, angle_high_threshold=0.5)
    with pytest.raises(ValueError):
        PipelineConfig(hold_ticks=-1)
    with pytest.raises(ValueError):
        PipelineConfig(denoiser="median")


def test_default_matches_firmware_configuration():
    pipe = MovementPipeline.default()
    cfg = pipe.config
    assert (cfg.smoothing_window_size, cfg.detection_window_size) == (100, 30)
    assert cfg.acceleration_threshold == pytest.approx(0.14)
    assert cfg.angle_low_threshold == pytest.approx(0.6 * math.pi / 4)
    assert cfg.angle_high_threshold == pytest.approx(1.2 * math.pi / 4)
    assert isinstance(pipe.denoiser, QuantileDenoiser)
    assert isinstance(MovementPipeline(denoiser="mean").denoiser, MeanDenoiser)


def test_sustained_zero_input_is_no_movement():
    pipe = MovementPipeline.default()
    for _ in range(150):
        tr = pipe.trace([0.0, 0.0, 0.0])
        assert tr.direction is None
    assert np.allclose(tr.smoothed, 0.0)
    assert tr.h_denoised == 0.0 and tr.v_denoised == 0.0


def test_constant_input_end_to_end():
    pipe = MovementPipeline(4, 2, 0.05, 0.3, 1.2)
    outs = []
    for _ in range(5):
        tr = pipe.trace((1.0, 0.0, 0.0))
        outs.append(tr.direction)
    assert np.allclose(tr.smoothed, 0.0)
    assert tr.h_denoised < 0.05 and tr.v_denoised < 0.05
    assert outs == [None] * 5


def test_oscillation_is_classified_by_axis():
    pipe = MovementPipeline(20, 5, 0.05, 0.6 * math.pi / 4, 1.2 * math.pi / 4)
    labels = []
    for i in range(100):
        s = math.sin(2 * math.pi * i / 20)
        labels.append(pipe.process((s, 0.0, 0.0)))
    assert all(d is Direction.HORIZONTAL for d in labels[40:])

    pipe = MovementPipeline(20, 5, 0.05, 0.6 * math.pi / 4, 1.2 * math.pi / 4)
    labels = [pipe.process((0.0, 0.0, math.sin(2 * math.pi * i / 20))) for i in range(100)]
    assert all(d is Direction.VERTICAL for d in labels[40:])


def test_replay_is_deterministic():
    rng = np.random.default_rng(0)
    samples = rng.normal(scale=0.6, size=(400, 3))
    cfg = PipelineConfig(smoothing_window_size=50, detection_window_size=10)
    a = MovementPipeline.from_config(cfg)
    b = MovementPipeline.from_config(cfg)
    out_a = [a.process(s) for s in samples]
    out_b = [b.process(s) for s in samples]
    assert out_a == out_b
    assert any(d is not None for d in out_a)


def test_fractional_window_sizes_are_rejected_not_truncated():
    with pytest.raises(ValueError):
        MovementPipeline(10, 9.7, 0.14, 0.5, 1.0)
    with pytest.raises(ValueError):
        MovementPipeline(10, 0.5, 0.14, 0.5, 1.0)
    with pytest.raises(ValueError):
        PipelineConfig(smoothing_window_size=100.5)
    with pytest.raises(ValueError):
        MovementPipeline(hold_ticks=1.5)
    assert MovementPipeline(10.0, 9.0, 0.14, 0.5, 1.0).config.detection_window_size == 9


def test_from_settings_uses_settings_fields():
    s = replace(settings, smoothing_window_size=50, detection_window_size=10,
                denoiser="mean", hold_ticks=3)
    pipe = MovementPipeline.from_settings(s)
    cfg = pipe.config
    assert (cfg.smoothing_window_size, cfg.detection_window_size) == (50, 10)
    assert cfg.hold_ticks == 3
    assert isinstance(pipe.denoiser, MeanDenoiser)
    assert cfg.acceleration_threshold == pytest.approx(settings.acceleration_threshold)


def test_process_matches_trace_direction():
    a = MovementPipeline(4, 2, 0.05, 0.3, 1.2)
    b = MovementPipeline(4, 2, 0.05, 0.3, 1.2)
    for i in range(40):
        raw = (math.sin(i / 3.0), 0.0, 0.0)
        assert a.process(raw) == b.trace(raw).direction
