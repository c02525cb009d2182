from __future__ import annotations
import logging
from dataclasses import dataclass, asdict
from typing import Optional

import numpy as np
from ..config.constants import (
    SMOOTHING_WINDOW_SIZE, DETECTION_WINDOW_SIZE, ACCEL_THRESHOLD,
    ANGLE_LOW, ANGLE_HIGH, DEFAULT_DENOISER, HOLD_TICKS,
)
from ..math.energy import energy_split
from .smoothing import SmoothingStage
from .denoise import DENOISERS, make_denoiser
from .classifier import Direction, DirectionClassifier

__all__ = ["as_count", "PipelineConfig", "TickTrace", "MovementPipeline"]

log = logging.getLogger(__name__)


def as_count(name: str, value) -> int:
    """Integral tick count. 9.0 passes as 9; 9.7 is an error, never 9."""
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    try:
        f = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
    if not f.is_integer():
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return int(f)


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable pipeline configuration, validated on construction.

    acceleration_threshold is in squared acceleration units (it is compared
    with sx^2 + sy^2 and sz^2). Angles are radians in energy space.
    """
    smoothing_window_size: int = SMOOTHING_WINDOW_SIZE
    detection_window_size: int = DETECTION_WINDOW_SIZE
    acceleration_threshold: float = ACCEL_THRESHOLD
    angle_low_threshold: float = ANGLE_LOW
    angle_high_threshold: float = ANGLE_HIGH
    denoiser: str = DEFAULT_DENOISER
    hold_ticks: int = HOLD_TICKS

    def __post_init__(self):
        for name in ("smoothing_window_size", "detection_window_size", "hold_ticks"):
            as_count(name, getattr(self, name))
        if self.smoothing_window_size <= 0:
            raise ValueError(f"smoothing_window_size must be > 0, got {self.smoothing_window_size}")
        if self.detection_window_size <= 0:
            raise ValueError(f"detection_window_size must be > 0, got {self.detection_window_size}")
        if self.detection_window_size >= self.smoothing_window_size:
            raise ValueError(
                "detection_window_size must be smaller than smoothing_window_size "
                f"({self.detection_window_size} >= {self.smoothing_window_size})"
            )
        if not self.angle_low_threshold < self.angle_high_threshold:
            raise ValueError(
                "angle_low_threshold must be below angle_high_threshold "
                f"({self.angle_low_threshold} >= {self.angle_high_threshold})"
            )
        if self.hold_ticks < 0:
            raise ValueError(f"hold_ticks must be >= 0, got {self.hold_ticks}")
        if str(self.denoiser).strip().lower() not in DENOISERS:
            raise ValueError(f"Unknown denoiser '{self.denoiser}'. Expected one of {sorted(DENOISERS)}")

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class TickTrace:
    """Intermediate values of a single tick, for diagnostics."""
    smoothed: np.ndarray
    h_energy: float
    v_energy: float
    h_denoised: float
    v_denoised: float
    direction: Optional[Direction]


class MovementPipeline:
    """Raw linear acceleration in, optional movement direction out, once per tick.

    smoothing -> energy split -> denoising -> classification. All state is
    created here; there is no reset other than building a new instance.
    Not thread-safe: confine an instance to one thread.
    """

    def __init__(
        self,
        smoothing_window_size: int = SMOOTHING_WINDOW_SIZE,
        detection_window_size: int = DETECTION_WINDOW_SIZE,
        acceleration_threshold: float = ACCEL_THRESHOLD,
        angle_low_threshold: float = ANGLE_LOW,
        angle_high_threshold: float = ANGLE_HIGH,
        denoiser: str = DEFAULT_DENOISER,
        hold_ticks: int = HOLD_TICKS,
    ):
        self.config = PipelineConfig(
            smoothing_window_size=as_count("smoothing_window_size", smoothing_window_size),
            detection_window_size=as_count("detection_window_size", detection_window_size),
            acceleration_threshold=float(acceleration_threshold),
            angle_low_threshold=float(angle_low_threshold),
            angle_high_threshold=float(angle_high_threshold),
            denoiser=str(denoiser).strip().lower(),
            hold_ticks=as_count("hold_ticks", hold_ticks),
        )
        cfg = self.config
        self.smoothing = SmoothingStage(cfg.smoothing_window_size)
        self.denoiser = make_denoiser(cfg.denoiser, cfg.detection_window_size)
        self.classifier = DirectionClassifier(
            cfg.acceleration_threshold,
            cfg.angle_low_threshold,
            cfg.angle_high_threshold,
            hold_ticks=cfg.hold_ticks,
        )
        log.debug("MovementPipeline ready: %s", cfg)

    @classmethod
    def from_config(cls, cfg: PipelineConfig) -> "MovementPipeline":
        return cls(**cfg.as_dict())

    @classmethod
    def default(cls) -> "MovementPipeline":
        """Firmware defaults: windows 100/30, threshold 0.14, angles 0.6π/4..1.2π/4."""
        return cls()

    @classmethod
    def from_settings(cls, s) -> "MovementPipeline":
        return cls(
            smoothing_window_size=s.smoothing_window_size,
            detection_window_size=s.detection_window_size,
            acceleration_threshold=s.acceleration_threshold,
            angle_low_threshold=s.angle_low_threshold,
            angle_high_threshold=s.angle_high_threshold,
            denoiser=s.denoiser,
            hold_ticks=s.hold_ticks,
        )

    def process(self, raw) -> Optional[Direction]:
        return self.trace(raw).direction

    def trace(self, raw) -> TickTrace:
        """Advance one tick, keeping the intermediate values; process() returns only .direction."""
        smoothed = self.smoothing.filter(raw)
        h, v = energy_split(smoothed)
        h_d, v_d = self.denoiser.denoise(h, v)
        direction = self.classifier.transition(h_d, v_d)
        return TickTrace(smoothed, h, v, h_d, v_d, direction)
