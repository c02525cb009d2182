"""Decimation of per-tick labels into downstream report events.

The sensor loop runs at SAMPLE_HZ and only every `stride`-th tick is a report
opportunity (stride = floor(SAMPLE_HZ / REPORT_HZ), 25 at 200/8 Hz). The tick
counter is incremented before the check, so the first opportunity is tick
`stride`. Ticks without a label produce no event.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Optional

from ..config.constants import SAMPLE_HZ, REPORT_HZ
from .classifier import Direction

__all__ = ["report_stride", "ReportEvent", "DirectionReporter"]


def report_stride(sample_hz: float = SAMPLE_HZ, report_hz: float = REPORT_HZ) -> int:
    if sample_hz <= 0 or report_hz <= 0:
        raise ValueError(f"Rates must be > 0 (sample_hz={sample_hz}, report_hz={report_hz})")
    return max(1, int(math.floor(float(sample_hz) / float(report_hz))))


@dataclass(frozen=True)
class ReportEvent:
    tick: int
    direction: Direction

    @property
    def payload(self) -> bytes:
        return self.direction.payload

    @property
    def console_line(self) -> str:
        return f"{self.tick % 100:02} {self.direction.char}"

    def as_dict(self) -> dict:
        return {
            "tick": self.tick,
            "direction": self.direction.char,
            "payload": self.payload.decode("ascii"),
        }


class DirectionReporter:
    def __init__(self, sample_hz: float = SAMPLE_HZ, report_hz: float = REPORT_HZ):
        self.stride = report_stride(sample_hz, report_hz)
        self.tick = 0

    def offer(self, direction: Optional[Direction]) -> Optional[ReportEvent]:
        self.tick += 1
        if self.tick % self.stride != 0 or direction is None:
            return None
        return ReportEvent(self.tick, direction)
