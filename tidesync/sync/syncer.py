"""Tidepool → Nightscout sync orchestration.

Two independent pipelines share one Syncer:

Profile sync:
1. Fetch pump settings for the window
2. Build a profile from the latest snapshot (stop if there is none)
3. Fetch stored profiles and reuse the id of one with the same fingerprint
4. Create or update the profile

Treatment sync:
1. Fetch boluses, food and physical activity for the window
2. Build the merged treatment list
3. Submit it (even when empty)

Nothing is written until the full in-memory result exists.  Collaborator
errors are not caught: they fail the invocation they occur in.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone

import httpx

from tidesync.clients.base import SourceClient, TargetClient
from tidesync.clients.nightscout import NightscoutClient
from tidesync.clients.tidepool import TidepoolClient
from tidesync.config import Settings
from tidesync.models.nightscout import Profile, Treatment
from tidesync.sync.dedup import find_matching_profile_id
from tidesync.sync.profile_builder import build_profile
from tidesync.sync.treatment_builder import build_treatments

logger = logging.getLogger("tidesync.sync.syncer")


@dataclass
class SyncResult:
    """Outcome of one run of both pipelines.

    Attributes:
        since:      Inclusive window start used.
        till:       Exclusive window end used (None = open-ended).
        profile:    Stored profile, or None if there was nothing to sync.
        treatments: Treatments the target accepted.
        synced_at:  UTC timestamp of completion.
    """

    since: datetime
    till: datetime | None
    profile: Profile | None = None
    treatments: list[Treatment] = field(default_factory=list)
    synced_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Syncer:
    """Run profile and treatment sync between a source and a target."""

    def __init__(
        self,
        source: SourceClient,
        target: TargetClient,
        target_low: float,
        since: datetime | None = None,
        till: datetime | None = None,
    ) -> None:
        """Initialize the syncer.

        Args:
            source:     Device-data client (Tidepool).
            target:     Dashboard client (Nightscout).
            target_low: Lower bound of the glucose target range.
            since:      Default window start (None = today 00:00).
            till:       Default window end (None = open-ended).
        """
        self._source = source
        self._target = target
        self._target_low = target_low
        self._since = since
        self._till = till

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        source: SourceClient | None = None,
        target: TargetClient | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> "Syncer":
        """Build a syncer from settings.

        Clients not supplied are the Tidepool and Nightscout adapters,
        sharing ``http_client`` when one is given.
        """
        return cls(
            source=source or TidepoolClient.from_settings(settings, http_client=http_client),
            target=target or NightscoutClient.from_settings(settings, http_client=http_client),
            target_low=settings.target_low,
            since=settings.sync_since,
            till=settings.sync_till,
        )

    def window(
        self, since: datetime | None = None, till: datetime | None = None
    ) -> tuple[datetime, datetime | None]:
        """Resolve the effective window: explicit argument, then configured default."""
        start = since or self._since or datetime.combine(date.today(), time.min)
        return start, till or self._till

    async def sync_profiles(
        self, since: datetime | None = None, till: datetime | None = None
    ) -> Profile | None:
        """Build the profile for the window and upsert it.

        Returns:
            The stored profile, or None when the window has no pump settings
            (in which case nothing is written).
        """
        since, till = self.window(since, till)
        logger.info("Profile sync: window %s → %s", since, till or "now")

        settings = await self._source.get_pump_settings(since, till)
        profile = build_profile(settings, self._target_low)
        if profile is None:
            logger.info("Profile sync: nothing to sync")
            return None

        existing = await self._target.get_profiles()
        profile.id = find_matching_profile_id(profile, existing)
        if profile.id:
            logger.info("Profile sync: matched stored profile %s", profile.id)

        return await self._target.set_profile(profile)

    async def sync_treatments(
        self, since: datetime | None = None, till: datetime | None = None
    ) -> list[Treatment]:
        """Build the treatment list for the window and submit it.

        Returns:
            Treatments accepted by the target.
        """
        since, till = self.window(since, till)
        logger.info("Treatment sync: window %s → %s", since, till or "now")

        boluses = await self._source.get_boluses(since, till)
        food = await self._source.get_food(since, till)
        activity = await self._source.get_physical_activity(since, till)

        treatments = build_treatments(
            boluses, food, activity, entered_by=self._source.SOURCE_NAME
        )
        return await self._target.add_treatments(treatments)

    async def sync_all(
        self,
        since: datetime | None = None,
        till: datetime | None = None,
        profiles: bool = True,
        treatments: bool = True,
    ) -> SyncResult:
        """Run the selected pipelines concurrently.

        They write disjoint Nightscout collections and share no state.  Both
        are always awaited to completion; if either failed, the first failure
        (profiles before treatments) is raised afterwards.
        """
        since, till = self.window(since, till)
        result = SyncResult(since=since, till=till)

        jobs = []
        if profiles:
            jobs.append(self.sync_profiles(since, till))
        if treatments:
            jobs.append(self.sync_treatments(since, till))
        outcomes = await asyncio.gather(*jobs, return_exceptions=True)

        failures = [o for o in outcomes if isinstance(o, BaseException)]
        for failure in failures[1:]:
            logger.error("Sync pipeline also failed: %r", failure)
        if failures:
            raise failures[0]

        if profiles:
            result.profile = outcomes[0]
        if treatments:
            result.treatments = outcomes[-1]
        result.synced_at = datetime.now(timezone.utc)
        return result
