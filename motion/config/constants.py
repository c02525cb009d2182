"""Centralized constants, thresholds, and column aliases for the movement classifier."""
from __future__ import annotations

import numpy as np

# Windows (ticks)
SMOOTHING_WINDOW_SIZE = 100   # bias/drift removal, ~0.5 s at 200 Hz
DETECTION_WINDOW_SIZE = 30    # must stay below SMOOTHING_WINDOW_SIZE

# Denoising
DETECTION_QUANTILE = 0.75
DEFAULT_DENOISER = "quantile"  # "quantile" | "mean"

# Classification. ACCEL_THRESHOLD is compared against squared magnitudes
# (sx^2 + sy^2, sz^2), never against |a|. Recalibrate in the same units.
ACCEL_THRESHOLD = 0.14
ANGLE_LOW = 0.6 * np.pi / 4.0    # rad, energy-space angle
ANGLE_HIGH = 1.2 * np.pi / 4.0   # rad
HOLD_TICKS = 0                   # 0 = clear label on the first quiet tick

# Timing
SAMPLE_HZ = 200.0   # IMU tick rate
REPORT_HZ = 8.0     # label reporting rate downstream
RESAMPLE_MAX_FACTOR = 4.0  # resampled ticks allowed per raw row

# Telemetry encodings
DIRECTION_DIGITS = {"V": 0, "H": 1, "D": 2}

# CSV column aliases
TIME_CANDS = [
    "sampletimefine", "time_s", "time", "timestamp_s", "timestamps_s", "seconds", "sec"
]
# Seconds per unit for time columns outside TIME_CANDS, by name suffix
TIME_UNIT_SUFFIXES = {"_ms": 1e-3, "_us": 1e-6, "_ns": 1e-9, "_s": 1.0}
ACC = {
    "x": ["linacc_x", "lin_acc_x", "linear_acc_x", "linear_acceleration_x",
          "freeacc_x", "acc_free_x", "free_acc_x", "acc_x"],
    "y": ["linacc_y", "lin_acc_y", "linear_acc_y", "linear_acceleration_y",
          "freeacc_y", "acc_free_y", "free_acc_y", "acc_y"],
    "z": ["linacc_z", "lin_acc_z", "linear_acc_z", "linear_acceleration_z",
          "freeacc_z", "acc_free_z", "free_acc_z", "acc_z"],
}
