"""Collaborator contracts for the sync pipelines.

The Syncer only ever talks to these two interfaces.  ``TidepoolClient`` and
``NightscoutClient`` are the production implementations; tests substitute
mocks.  Failures are never caught here: an exception from any method fails
the whole sync invocation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Sequence

from tidesync.models.nightscout import Profile, StoredProfile, Treatment
from tidesync.models.tidepool import Bolus, Food, PhysicalActivity, PumpSettings


class SourceClient(ABC):
    """Read side: device events over a time window.

    Every method takes an inclusive ``since`` and an optional exclusive
    ``till`` and may return an empty list.
    """

    #: Attribution written to ``enteredBy`` on every treatment.
    SOURCE_NAME: str = "unknown"

    @abstractmethod
    async def get_pump_settings(
        self, since: datetime, till: datetime | None = None
    ) -> list[PumpSettings]:
        """Fetch pump-settings snapshots recorded in the window."""

    @abstractmethod
    async def get_boluses(
        self, since: datetime, till: datetime | None = None
    ) -> list[Bolus]:
        """Fetch bolus events in the window."""

    @abstractmethod
    async def get_food(self, since: datetime, till: datetime | None = None) -> list[Food]:
        """Fetch food (carb entry) events in the window."""

    @abstractmethod
    async def get_physical_activity(
        self, since: datetime, till: datetime | None = None
    ) -> list[PhysicalActivity]:
        """Fetch physical-activity events in the window."""


class TargetClient(ABC):
    """Write side: profiles and treatments."""

    @abstractmethod
    async def get_profiles(self) -> list[StoredProfile]:
        """Fetch the id and fingerprint of every stored profile."""

    @abstractmethod
    async def set_profile(self, profile: Profile) -> Profile:
        """Create the profile, or update it in place when ``profile.id`` is set."""

    @abstractmethod
    async def add_treatments(self, treatments: Sequence[Treatment]) -> list[Treatment]:
        """Submit treatments; returns what the target accepted."""
