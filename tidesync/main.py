"""tidesync API — FastAPI application entry point.

Run locally:
    uvicorn tidesync.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI

from tidesync import __version__
from tidesync.config import get_settings
from tidesync.routers import health, sync
from tidesync.sync import Syncer

# ---------- Logging ----------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("tidesync")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks: one shared HTTP client for both services."""
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    logger.info("Starting tidesync API v%s [%s]", __version__, settings.environment)

    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as http_client:
        app.state.syncer = Syncer.from_settings(settings, http_client=http_client)
        yield
        app.state.syncer = None

    logger.info("tidesync API shut down")


# ---------- App factory ----------

def create_app() -> FastAPI:
    app = FastAPI(
        title="tidesync API",
        description="Sync Tidepool pump settings and treatments into Nightscout.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.syncer = None

    # Health check (outside v1 prefix — always at /health)
    app.include_router(health.router)

    app.include_router(sync.router, prefix="/api/v1")

    return app


app = create_app()
