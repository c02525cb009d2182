from __future__ import annotations
import io, re
import numpy as np
import pandas as pd
from ..config.constants import (
    TIME_CANDS, TIME_UNIT_SUFFIXES, ACC, SAMPLE_HZ, RESAMPLE_MAX_FACTOR,
)

__all__ = [
    "read_recording_bytes",
    "sanitize_cols",
    "pick_col",
    "pick_time_col",
    "estimate_fs",
    "extract_linear_accel",
    "resample_to_rate",
]

_DELIMS = [",", ";", "\t", "|"]


def sanitize_cols(cols):
    sc = []
    for c in cols:
        s = str(c).strip()
        s = re.sub(r"[^0-9A-Za-z]+", "_", s)
        s = re.sub(r"_+", "_", s)
        sc.append(s.strip("_").lower())
    return sc


def read_recording_bytes(b: bytes) -> pd.DataFrame:
    """Parse a recorded acceleration CSV, skipping any preamble before the header."""
    text = b.decode("utf-8", errors="ignore")
    lines = text.splitlines()
    if not any(line.strip() for line in lines):
        raise ValueError("Empty CSV payload")

    def _looks_like_header(s: str) -> bool:
        s0 = s.strip()
        if not s0 or ":" in s0:
            return False
        if not any(d in s0 for d in _DELIMS):
            return False
        low = s0.lower()
        hits = 0
        for kw in ("acc", "time", "sampletimefine", "packetcounter"):
            if kw in low:
                hits += 1
        return hits >= 2 or low.count("acc") >= 3

    header_i = 0
    for i, line in enumerate(lines[:400]):
        if _looks_like_header(line):
            header_i = i
            break

    payload = "\n".join(lines[header_i:])

    df = None
    try:
        df = pd.read_csv(io.StringIO(payload), low_memory=False)
    except (pd.errors.ParserError, ValueError):
        df = None
    if df is None or df.shape[1] < 3:
        for sep in _DELIMS:
            try:
                cand = pd.read_csv(io.StringIO(payload), engine="python", sep=sep, on_bad_lines="skip")
            except (pd.errors.ParserError, ValueError):
                continue
            if cand.shape[1] >= 3:
                df = cand
                break
    if df is None:
        raise ValueError("Could not parse CSV payload")

    df.columns = sanitize_cols(df.columns)
    return df


def pick_col(df: pd.DataFrame, candidates: list[str]) -> str:
    for c in candidates:
        if c in df.columns:
            return c
    base = ["".join(filter(str.isalpha, c)) for c in df.columns]
    for c in candidates:
        token = "".join(filter(str.isalpha, c))
        for bidx, b in enumerate(base):
            if token and token in b:
                return df.columns[bidx]
    raise KeyError(f"Missing any of {candidates}")


def _time_scale(col: str) -> float | None:
    if col == "sampletimefine":
        return 1e-6
    if col in TIME_CANDS:
        return 1.0
    if "time" in col:
        for suffix, scale in TIME_UNIT_SUFFIXES.items():
            if col.endswith(suffix):
                return scale
    return None


def pick_time_col(df: pd.DataFrame) -> tuple[str | None, float]:
    """Time column and its seconds-per-unit scale, or (None, 1.0).

    Exact TIME_CANDS names win. Otherwise only a 'time' column with a unit
    suffix (timestamp_ms, time_us, ...) is accepted; a bare 'sample_time'
    has no known unit and is ignored.
    """
    for c in TIME_CANDS:
        if c in df.columns:
            return c, _time_scale(c)
    for c in df.columns:
        scale = _time_scale(str(c))
        if scale is not None:
            return c, scale
    return None, 1.0


def estimate_fs(t: np.ndarray, default: float = SAMPLE_HZ) -> float:
    t = np.asarray(t, dtype=float)
    if t.size < 2:
        return float(default)
    dt = np.diff(t)
    dt = dt[np.isfinite(dt) & (dt > 0)]
    if dt.size == 0:
        return float(default)
    return float(1.0 / np.median(dt))


def extract_linear_accel(df: pd.DataFrame, sample_hz: float = SAMPLE_HZ):
    """Pull time and linear acceleration out of a parsed recording.

    Returns: t (T,) seconds from zero, acc (T,3), meta with keys
      - acc_cols: selected (x, y, z) column names
      - time_col: selected time column, or None when synthesised from sample_hz
      - fs_hz: estimated sampling rate
    """
    ax_col = pick_col(df, ACC["x"])
    ay_col = pick_col(df, ACC["y"])
    az_col = pick_col(df, ACC["z"])
    acc = np.stack(
        [df[c].to_numpy(dtype=float) for c in (ax_col, ay_col, az_col)], axis=1
    )
    finite = np.all(np.isfinite(acc), axis=1)

    t_col, t_scale = pick_time_col(df)
    if t_col is None:
        acc = acc[finite]
        t = np.arange(acc.shape[0], dtype=float) / float(sample_hz)
    else:
        t_raw = df[t_col].to_numpy(dtype=float)
        finite &= np.isfinite(t_raw)
        acc = acc[finite]
        t_raw = t_raw[finite]
        t = (t_raw - t_raw[0]) * t_scale if t_raw.size else t_raw

    meta = {
        "acc_cols": (ax_col, ay_col, az_col),
        "time_col": t_col,
        "fs_hz": estimate_fs(t, default=sample_hz),
    }
    return t, acc, meta


def resample_to_rate(
    t: np.ndarray,
    acc: np.ndarray,
    sample_hz: float,
    max_factor: float = RESAMPLE_MAX_FACTOR,
) -> tuple[np.ndarray, np.ndarray]:
    """Linearly interpolate (T,3) acceleration onto a uniform grid at sample_hz.

    The grid may hold at most max_factor * T points; a longer grid means the
    time column's unit is wrong and raises ValueError.
    """
    t = np.asarray(t, dtype=float)
    A = np.asarray(acc, dtype=float)
    if sample_hz <= 0:
        raise ValueError(f"sample_hz must be > 0, got {sample_hz}")
    if t.size < 2:
        return t.copy(), A.copy()
    span = float(t[-1] - t[0])
    limit = int(max(t.size * float(max_factor), 2))
    if not np.isfinite(span) or span < 0 or span * sample_hz + 1 > limit:
        raise ValueError(
            f"Resampling {t.size} samples spanning {span:.3f} s at {sample_hz} Hz "
            f"exceeds {limit} ticks; check the time column units"
        )
    n = int(np.floor(span * sample_hz + 1e-9)) + 1
    tn = t[0] + np.arange(n, dtype=float) / float(sample_hz)
    out = np.vstack([np.interp(tn, t, A[:, j]) for j in range(A.shape[1])]).T
    return tn, out
