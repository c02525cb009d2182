from __future__ import annotations
import logging
from pathlib import Path

import numpy as np
import pandas as pd

from ..config.settings import settings
from ..math.energy import energy_split_batch
from .movement import PipelineConfig, MovementPipeline, as_count
from .report import DirectionReporter
from .io_utils import read_recording_bytes, extract_linear_accel, resample_to_rate

__all__ = ["config_from_options", "load_recording", "run_recording"]

log = logging.getLogger(__name__)

_CONFIG_FIELDS = (
    "smoothing_window_size",
    "detection_window_size",
    "acceleration_threshold",
    "angle_low_threshold",
    "angle_high_threshold",
    "denoiser",
    "hold_ticks",
)


def config_from_options(options: dict | None) -> PipelineConfig:
    """Settings defaults overridden by any PipelineConfig field present in options."""
    opts = options if isinstance(options, dict) else {}
    kw = {f: getattr(settings, f) for f in _CONFIG_FIELDS}
    for f in _CONFIG_FIELDS:
        if opts.get(f) is not None:
            kw[f] = opts[f]
    kw["smoothing_window_size"] = as_count("smoothing_window_size", kw["smoothing_window_size"])
    kw["detection_window_size"] = as_count("detection_window_size", kw["detection_window_size"])
    kw["acceleration_threshold"] = float(kw["acceleration_threshold"])
    kw["angle_low_threshold"] = float(kw["angle_low_threshold"])
    kw["angle_high_threshold"] = float(kw["angle_high_threshold"])
    kw["denoiser"] = str(kw["denoiser"]).strip().lower()
    kw["hold_ticks"] = as_count("hold_ticks", kw["hold_ticks"])
    return PipelineConfig(**kw)


def load_recording(data) -> pd.DataFrame:
    """Accept raw CSV bytes, a path, or an already-parsed DataFrame."""
    if isinstance(data, pd.DataFrame):
        return data
    if isinstance(data, (bytes, bytearray)):
        return read_recording_bytes(bytes(data))
    return read_recording_bytes(Path(data).read_bytes())


def run_recording(data, options: dict | None = None) -> dict:
    """Replay a recording tick by tick through a fresh MovementPipeline.

    options: any PipelineConfig field, plus
      - sample_hz: tick rate (default settings.sample_hz)
      - report_hz: report rate for decimated events (default settings.report_hz)
      - resample: interpolate onto a uniform sample_hz grid first (default False)
    """
    opts = options if isinstance(options, dict) else {}
    cfg = config_from_options(opts)
    sample_hz = float(opts.get("sample_hz") or settings.sample_hz)
    report_hz = float(opts.get("report_hz") or settings.report_hz)
    reporter = DirectionReporter(sample_hz, report_hz)

    df = load_recording(data)
    t, acc, meta = extract_linear_accel(df, sample_hz=sample_hz)
    if bool(opts.get("resample", False)):
        t, acc = resample_to_rate(t, acc, sample_hz)

    pipe = MovementPipeline.from_config(cfg)
    n = acc.shape[0]
    smoothed = np.zeros((n, 3), dtype=float)
    denoised = np.zeros((n, 2), dtype=float)
    directions: list = []
    events: list = []
    for i in range(n):
        tr = pipe.trace(acc[i])
        smoothed[i] = tr.smoothed
        denoised[i] = (tr.h_denoised, tr.v_denoised)
        directions.append(tr.direction)
        ev = reporter.offer(tr.direction)
        if ev is not None:
            events.append(ev.as_dict())

    energy = energy_split_batch(smoothed)

    chars = [d.char if d is not None else None for d in directions]
    summary = {"H": 0, "V": 0, "D": 0, "none": 0}
    for c in chars:
        summary[c if c is not None else "none"] += 1

    trace = pd.DataFrame({
        "time_s": t,
        "smoothed_x": smoothed[:, 0],
        "smoothed_y": smoothed[:, 1],
        "smoothed_z": smoothed[:, 2],
        "h_energy": energy[:, 0],
        "v_energy": energy[:, 1],
        "h_denoised": denoised[:, 0],
        "v_denoised": denoised[:, 1],
        "direction": [c or "" for c in chars],
    })

    meta = dict(meta)
    meta.update({
        "config": cfg.as_dict(),
        "sample_hz": sample_hz,
        "report_hz": report_hz,
        "report_stride": reporter.stride,
        "n_ticks": int(n),
        "resampled": bool(opts.get("resample", False)),
    })
    log.info(
        "Replayed %d ticks (%s denoiser): H=%d V=%d D=%d none=%d, %d report events",
        n, cfg.denoiser, summary["H"], summary["V"], summary["D"], summary["none"], len(events),
    )
    return {
        "directions": chars,
        "digits": [d.digit if d is not None else None for d in directions],
        "events": events,
        "summary": summary,
        "h_denoised": denoised[:, 0],
        "v_denoised": denoised[:, 1],
        "trace_csv": trace.to_csv(index=False),
        "meta": meta,
    }
