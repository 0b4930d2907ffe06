"""Health module routes."""

import time

from fastapi import APIRouter, Request

from pdfrender import __version__
from pdfrender.shared.time import utcnow_iso

router = APIRouter(tags=["health"])

_started_at = time.monotonic()


@router.get("/health")
async def health(request: Request) -> dict:
    """Health check. Does not launch the browser."""
    pool = request.app.state.engine_pool
    return {
        "status": "healthy",
        "service": "pdf-service",
        "version": __version__,
        "timestamp": utcnow_iso(),
        "uptime": round(time.monotonic() - _started_at, 3),
        "engine": pool.state.value,
    }
