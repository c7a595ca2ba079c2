"""Health check endpoint — public, no auth required."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from tidesync import __version__

router = APIRouter(tags=["system"])
logger = logging.getLogger("tidesync.health")


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Liveness probe. Returns 200 if the API process is up.

    Reports ``degraded`` until the lifespan has wired the syncer.
    """
    ready = getattr(request.app.state, "syncer", None) is not None
    return {
        "status": "healthy" if ready else "degraded",
        "version": __version__,
        "syncer": "ready" if ready else "not_initialized",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
