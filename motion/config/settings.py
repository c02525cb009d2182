from __future__ import annotations
import os
from dataclasses import dataclass
from typing import List

from .constants import (
    SMOOTHING_WINDOW_SIZE, DETECTION_WINDOW_SIZE, ACCEL_THRESHOLD,
    ANGLE_LOW, ANGLE_HIGH, DEFAULT_DENOISER, HOLD_TICKS, SAMPLE_HZ, REPORT_HZ,
)


def _get_bool(env: str, default: bool) -> bool:
    val = os.getenv(env, "").strip().lower()
    if val in {"1", "true", "yes", "y", "on"}:
        return True
    if val in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _get_list(env: str, default: List[str]) -> List[str]:
    raw = os.getenv(env)
    if not raw:
        return default
    parts = [p.strip() for p in raw.split(",")]
    return [p for p in parts if p]


@dataclass(frozen=True)
class Settings:
    # General
    app_name: str = os.getenv("APP_NAME", "Movement Direction API")
    environment: str = os.getenv("ENV", os.getenv("ENVIRONMENT", "production"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    debug: bool = _get_bool("DEBUG", False)

    # CORS
    allowed_origins: List[str] = tuple(_get_list("ALLOWED_ORIGINS", ["*"]))  # type: ignore[assignment]
    allow_credentials: bool = _get_bool("ALLOW_CREDENTIALS", True)
    allowed_methods: List[str] = tuple(_get_list("ALLOWED_METHODS", ["GET", "POST", "OPTIONS"]))  # type: ignore[assignment]
    allowed_headers: List[str] = tuple(_get_list("ALLOWED_HEADERS", ["*"]))  # type: ignore[assignment]
    # Host header protection
    allowed_hosts: List[str] = tuple(_get_list("ALLOWED_HOSTS", ["*"]))  # type: ignore[assignment]

    # Performance / limits
    gzip_min_size: int = int(os.getenv("GZIP_MIN_SIZE", "1024"))  # bytes
    max_upload_mb: int = int(os.getenv("MAX_UPLOAD_MB", "20"))

    # API surface
    openapi_enabled: bool = _get_bool("OPENAPI_ENABLED", False)
    docs_enabled: bool = _get_bool("DOCS_ENABLED", False)

    # Pipeline defaults (thresholds in squared acceleration units)
    smoothing_window_size: int = int(os.getenv("MOTION_SMOOTHING_WINDOW", str(SMOOTHING_WINDOW_SIZE)))
    detection_window_size: int = int(os.getenv("MOTION_DETECTION_WINDOW", str(DETECTION_WINDOW_SIZE)))
    acceleration_threshold: float = float(os.getenv("MOTION_ACCEL_THRESHOLD", str(ACCEL_THRESHOLD)))
    angle_low_threshold: float = float(os.getenv("MOTION_ANGLE_LOW", str(ANGLE_LOW)))
    angle_high_threshold: float = float(os.getenv("MOTION_ANGLE_HIGH", str(ANGLE_HIGH)))
    denoiser: str = os.getenv("MOTION_DENOISER", DEFAULT_DENOISER).strip().lower()
    hold_ticks: int = int(os.getenv("MOTION_HOLD_TICKS", str(HOLD_TICKS)))

    # Timing
    sample_hz: float = float(os.getenv("MOTION_SAMPLE_HZ", str(SAMPLE_HZ)))
    report_hz: float = float(os.getenv("MOTION_REPORT_HZ", str(REPORT_HZ)))


settings = Settings()
