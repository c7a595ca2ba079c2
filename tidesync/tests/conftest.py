"""Shared fixtures, sample Tidepool documents and in-memory service fakes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

import pytest

from tidesync.clients.base import SourceClient, TargetClient
from tidesync.config import Settings
from tidesync.models.nightscout import Profile, StoredProfile, Treatment
from tidesync.models.tidepool import Bolus, Food, PhysicalActivity, PumpSettings

TEST_TARGET_LOW = 4.0


def at(seconds: int) -> datetime:
    """UTC timestamp ``seconds`` after the epoch."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def bolus(seconds: int, normal: float) -> Bolus:
    return Bolus(time=at(seconds), normal=normal)


def food(seconds: int, net: float) -> Food:
    return Food.model_validate(
        {"time": at(seconds), "nutrition": {"carbohydrate": {"net": net, "units": "grams"}}}
    )


def activity(seconds: int, name: str, duration_s: float) -> PhysicalActivity:
    return PhysicalActivity.model_validate(
        {"time": at(seconds), "name": name, "duration": {"units": "seconds", "value": duration_s}}
    )


# ---------------------------------------------------------------------------
# Raw Tidepool documents
# ---------------------------------------------------------------------------


@pytest.fixture
def pump_settings_raw() -> dict:
    """A realistic Tidepool pumpSettings document (mmol/L pump)."""
    return {
        "type": "pumpSettings",
        "id": "8c1b6a5e2f",
        "activeSchedule": "Standard",
        "automatedDelivery": True,
        "deviceTime": "2024-05-01T08:00:00",
        "time": "2024-05-01T08:00:00.000Z",
        "units": {"bg": "mmol/L", "carb": "grams"},
        "basalSchedules": {
            "Standard": [
                {"start": 0, "rate": 0.85},
                {"start": 21600000, "rate": 1.0},
            ],
            "Weekend": [{"start": 0, "rate": 0.7}],
        },
        "bgTargets": {
            "Standard": [
                {"start": 0, "target": 2.5},
                {"start": 5400000, "target": 1.5},
            ],
        },
        "carbRatios": {
            "Standard": [
                {"start": 0, "amount": 10.0},
                {"start": 43200000, "amount": 12.5},
            ],
        },
        "insulinSensitivities": {
            "Standard": [{"start": 0, "amount": 2.5}],
            "Exercise": [{"start": 5400000, "amount": 3.0}],
        },
    }


@pytest.fixture
def pump_settings(pump_settings_raw: dict) -> PumpSettings:
    return PumpSettings.model_validate(pump_settings_raw)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        tidepool_email="pump@example.com",
        tidepool_password="secret",
        nightscout_url="https://ns.example.com",
        nightscout_api_secret="ns-secret",
        target_low=TEST_TARGET_LOW,
        _env_file=None,
    )


# ---------------------------------------------------------------------------
# Service fakes
# ---------------------------------------------------------------------------


class FakeTidepool(SourceClient):
    """Source returning canned data and recording the windows it was asked for."""

    SOURCE_NAME = "Tidepool"

    def __init__(
        self,
        settings: list[PumpSettings] | None = None,
        boluses: list[Bolus] | None = None,
        food: list[Food] | None = None,
        activity: list[PhysicalActivity] | None = None,
    ) -> None:
        self.settings = settings or []
        self.boluses = boluses or []
        self.food = food or []
        self.activity = activity or []
        self.windows: list[tuple[datetime, datetime | None]] = []

    async def get_pump_settings(self, since, till=None):
        self.windows.append((since, till))
        return list(self.settings)

    async def get_boluses(self, since, till=None):
        self.windows.append((since, till))
        return list(self.boluses)

    async def get_food(self, since, till=None):
        self.windows.append((since, till))
        return list(self.food)

    async def get_physical_activity(self, since, till=None):
        self.windows.append((since, till))
        return list(self.activity)


class FakeNightscout(TargetClient):
    """In-memory Nightscout: assigns ids on create, replaces on update."""

    def __init__(self, profiles: list[Profile] | None = None) -> None:
        self.profiles = profiles or []
        self.treatments: list[Treatment] = []
        self.profile_writes: list[Profile] = []
        self.treatment_batches: list[list[Treatment]] = []
        self._next_id = 1

    async def get_profiles(self) -> list[StoredProfile]:
        return [p.model_copy(deep=True) for p in self.profiles]

    async def set_profile(self, profile: Profile) -> Profile:
        self.profile_writes.append(profile)
        stored = profile.model_copy(deep=True)
        if stored.id is None:
            stored.id = f"profile-{self._next_id}"
            self._next_id += 1
            self.profiles.append(stored)
        else:
            self.profiles = [stored if p.id == stored.id else p for p in self.profiles]
        return stored

    async def add_treatments(self, treatments: Sequence[Treatment]) -> list[Treatment]:
        batch = list(treatments)
        self.treatment_batches.append(batch)
        self.treatments.extend(batch)
        return batch


@pytest.fixture
def nightscout() -> FakeNightscout:
    return FakeNightscout()
