"""Endpoints that trigger a Tidepool → Nightscout sync run."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx
from fastapi import APIRouter, HTTPException, Query

from tidesync.clients import TidepoolAuthError
from tidesync.dependencies import AppSyncer

router = APIRouter(prefix="/sync", tags=["sync"])
logger = logging.getLogger("tidesync.routers.sync")

# Collaborator failures surface as 502; anything else is a bug and stays a 500.
_UPSTREAM_ERRORS = (httpx.HTTPError, TidepoolAuthError)


@router.post("/profile")
async def sync_profile(
    syncer: AppSyncer,
    since: datetime | None = Query(default=None),
    till: datetime | None = Query(default=None),
) -> Any:
    try:
        profile = await syncer.sync_profiles(since, till)
    except _UPSTREAM_ERRORS as exc:
        logger.error("Profile sync failed: %s", exc)
        raise HTTPException(status_code=502, detail=f"Profile sync failed: {exc}") from exc

    if profile is None:
        return {"status": "nothing_to_sync"}
    return profile.to_wire()


@router.post("/treatments")
async def sync_treatments(
    syncer: AppSyncer,
    since: datetime | None = Query(default=None),
    till: datetime | None = Query(default=None),
) -> Any:
    try:
        treatments = await syncer.sync_treatments(since, till)
    except _UPSTREAM_ERRORS as exc:
        logger.error("Treatment sync failed: %s", exc)
        raise HTTPException(status_code=502, detail=f"Treatment sync failed: {exc}") from exc

    return [t.to_wire() for t in treatments]
