"""One-shot command line sync.

Usage::

    python -m tidesync --since 2024-05-01 --till 2024-05-02
    python -m tidesync --profiles-only

Credentials and defaults come from the environment (see ``tidesync.config``).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime

import httpx

from tidesync.config import Settings, get_settings
from tidesync.sync import Syncer, SyncResult

logger = logging.getLogger("tidesync.runner")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tidesync",
        description="Sync Tidepool pump settings and treatments into Nightscout.",
    )
    parser.add_argument(
        "--since",
        type=datetime.fromisoformat,
        help="Window start, ISO 8601 (default: SYNC_SINCE or today 00:00)",
    )
    parser.add_argument(
        "--till",
        type=datetime.fromisoformat,
        help="Window end, ISO 8601 (default: SYNC_TILL or open-ended)",
    )
    only = parser.add_mutually_exclusive_group()
    only.add_argument("--profiles-only", action="store_true", help="Sync the profile only")
    only.add_argument("--treatments-only", action="store_true", help="Sync treatments only")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace, settings: Settings) -> SyncResult:
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as http_client:
        syncer = Syncer.from_settings(settings, http_client=http_client)
        return await syncer.sync_all(
            since=args.since,
            till=args.till,
            profiles=not args.treatments_only,
            treatments=not args.profiles_only,
        )


def cli(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )

    try:
        result = asyncio.run(run(args, settings))
    except Exception:
        logger.exception("Sync failed")
        return 1

    logger.info(
        "Sync complete: window %s → %s, profile %s, %d treatment(s) accepted",
        result.since,
        result.till or "now",
        result.profile.id if result.profile else "not synced",
        len(result.treatments),
    )
    return 0
