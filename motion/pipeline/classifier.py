"""Angle-threshold classification of denoised energies into a movement direction.

The angle is taken in energy space, atan2(vertical, horizontal), so it is not
the physical elevation of the acceleration vector. Thresholds:

- both energies below `acceleration_threshold` -> None (no movement)
- angle <= angle_low                            -> HORIZONTAL
- angle_low < angle < angle_high                -> DIAGONAL
- angle >= angle_high                           -> VERTICAL
"""
from __future__ import annotations
import math
from enum import Enum
from typing import Optional

from ..config.constants import ACCEL_THRESHOLD, ANGLE_LOW, ANGLE_HIGH, HOLD_TICKS, DIRECTION_DIGITS

__all__ = ["Direction", "DirectionClassifier"]


class Direction(Enum):
    VERTICAL = "V"
    HORIZONTAL = "H"
    DIAGONAL = "D"

    @property
    def char(self) -> str:
        return self.value

    @property
    def digit(self) -> int:
        return DIRECTION_DIGITS[self.value]

    @property
    def payload(self) -> bytes:
        """Single ASCII digit, as published downstream."""
        return bytes([0x30 + self.digit])

    @classmethod
    def from_char(cls, c: str) -> "Direction":
        try:
            return cls(str(c).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown direction char {c!r}") from None

    @classmethod
    def from_digit(cls, d: int) -> "Direction":
        for member in cls:
            if member.digit == int(d):
                return member
        raise ValueError(f"Unknown direction digit {d!r}")

    @classmethod
    def from_payload(cls, b: bytes) -> "Direction":
        if len(b) != 1 or not (0x30 <= b[0] <= 0x39):
            raise ValueError(f"Invalid direction payload {b!r}")
        return cls.from_digit(b[0] - 0x30)


class DirectionClassifier:
    """Stateful classifier holding the last emitted label.

    hold_ticks: number of consecutive below-threshold ticks during which the
    previous label keeps being emitted before it is cleared. With 0 the stored
    label never influences the output.
    """

    def __init__(
        self,
        acceleration_threshold: float = ACCEL_THRESHOLD,
        angle_low_threshold: float = ANGLE_LOW,
        angle_high_threshold: float = ANGLE_HIGH,
        hold_ticks: int = HOLD_TICKS,
    ):
        self.acceleration_threshold = float(acceleration_threshold)
        self.angle_low_threshold = float(angle_low_threshold)
        self.angle_high_threshold = float(angle_high_threshold)
        self.hold_ticks = int(hold_ticks)
        self.previous: Optional[Direction] = None
        self._quiet_ticks = 0

    def below_threshold(self, h: float, v: float) -> bool:
        return h < self.acceleration_threshold and v < self.acceleration_threshold

    def classify_angle(self, angle: float) -> Direction:
        if self.angle_low_threshold < angle < self.angle_high_threshold:
            return Direction.DIAGONAL
        if angle <= self.angle_low_threshold:
            return Direction.HORIZONTAL
        return Direction.VERTICAL

    def transition(self, h: float, v: float) -> Optional[Direction]:
        if self.below_threshold(h, v):
            self._quiet_ticks += 1
            if self.previous is not None and self._quiet_ticks <= self.hold_ticks:
                nxt = self.previous
            else:
                nxt = None
        else:
            self._quiet_ticks = 0
            nxt = self.classify_angle(math.atan2(v, h))
        self.previous = nxt
        return nxt
