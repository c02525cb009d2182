from __future__ import annotations
from typing import Optional, Any
from pathlib import Path
import logging
from fastapi import FastAPI, File, UploadFile, Form, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
import numpy as np
from motion.pipeline.pipeline import run_recording
from motion.config.settings import settings

log = logging.getLogger(__name__)

root_dir = Path(__file__).resolve().parent
sample_dir = root_dir / 'sample data'

app = FastAPI(
    title=settings.app_name,
    docs_url=("/docs" if settings.docs_enabled else None),
    redoc_url=("/redoc" if settings.docs_enabled else None),
    openapi_url=("/openapi.json" if settings.openapi_enabled else None),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_credentials=settings.allow_credentials,
    allow_methods=list(settings.allowed_methods),
    allow_headers=list(settings.allowed_headers),
)

# Compression for large JSON responses and trace CSV strings
app.add_middleware(GZipMiddleware, minimum_size=settings.gzip_min_size)

# Restrict Host headers when ALLOWED_HOSTS is set to specific values
if settings.allowed_hosts and settings.allowed_hosts != ("*",):
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=list(settings.allowed_hosts))


def pick(pattern: str) -> str:
    matches = sorted(sample_dir.glob(pattern))
    if not matches:
        raise FileNotFoundError(f"No sample file for pattern: {pattern}")
    return str(matches[0])


def to_json_safe(obj: Any):
    """JSON-safe converter (numpy arrays, scalars, nested)."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, (np.generic,)):
        return obj.item()
    if isinstance(obj, dict):
        return {k: to_json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_json_safe(x) for x in obj]
    return obj


@app.post("/api/classify/")
async def classify_recording(
    file: Optional[UploadFile] = File(None),
    denoiser: Optional[str] = Form(None),
    hold_ticks: Optional[int] = Form(None),
    acceleration_threshold: Optional[float] = Form(None),
    sample_hz: Optional[float] = Form(None),
    report_hz: Optional[float] = Form(None),
    resample: bool = Form(False),
    include_trace: bool = Form(False),
):
    """Classify an uploaded recording, or the bundled sample when none is given."""
    if file is not None and getattr(file, 'filename', ''):
        data = await file.read()
        if len(data) > int(settings.max_upload_mb) * 1024 * 1024:
            raise HTTPException(status_code=413, detail=f"Upload exceeds limit of {settings.max_upload_mb} MB")
        source = file.filename
    else:
        path = pick('DEMO_*.csv')
        data = Path(path).read_bytes()
        source = Path(path).name

    options: dict = {
        'denoiser': denoiser,
        'hold_ticks': hold_ticks,
        'acceleration_threshold': acceleration_threshold,
        'sample_hz': sample_hz,
        'report_hz': report_hz,
        'resample': resample,
    }
    try:
        results = run_recording(data, options)
    except (ValueError, KeyError) as e:
        log.warning("Rejected recording %s: %s", source, e)
        detail = e.args[0] if isinstance(e, KeyError) and e.args else str(e)
        raise HTTPException(status_code=400, detail=str(detail))

    results['meta']['source'] = source
    # Raw arrays are already summarised by the trace CSV
    results.pop('h_denoised', None)
    results.pop('v_denoised', None)
    if not include_trace:
        results.pop('trace_csv', None)
    return JSONResponse(content=to_json_safe(results))


@app.get("/")
async def read_index():
    return JSONResponse({"status": "ok", "app": settings.app_name})


# Simple health check endpoint for local probes
@app.get("/health")
async def health():
    return JSONResponse({"status": "ok"})
