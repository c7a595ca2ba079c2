"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from tidesync.sync import Syncer


async def get_syncer(request: Request) -> Syncer:
    """Return the Syncer built during app startup."""
    syncer: Syncer | None = getattr(request.app.state, "syncer", None)
    if syncer is None:
        raise HTTPException(status_code=503, detail="Syncer not initialized")
    return syncer


# Annotated shortcut for route signatures
AppSyncer = Annotated[Syncer, Depends(get_syncer)]
