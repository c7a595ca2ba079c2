"""Pydantic models for the Tidepool data documents we read.

Only the fields the sync consumes are declared.  Field names follow the
Tidepool data model (``/data/{userid}`` responses).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from tidesync.models.base import TideSyncBase


# ---------- Pump settings ----------

class BasalScheduleEntry(TideSyncBase):
    start: int  # ms from midnight
    rate: float


class BgTargetEntry(TideSyncBase):
    start: int
    target: float


class CarbRatioEntry(TideSyncBase):
    start: int
    amount: float


class InsulinSensitivityEntry(TideSyncBase):
    start: int
    amount: float


class SettingsUnits(TideSyncBase):
    bg: str | None = None
    carb: str | None = None


class PumpSettings(TideSyncBase):
    """One pump-settings snapshot, valid as of ``device_time``."""

    active_schedule: str | None = Field(default=None, alias="activeSchedule")
    automated_delivery: bool = Field(default=False, alias="automatedDelivery")
    device_time: datetime | None = Field(default=None, alias="deviceTime")
    units: SettingsUnits = Field(default_factory=SettingsUnits)
    basal_schedules: dict[str, list[BasalScheduleEntry]] = Field(
        default_factory=dict, alias="basalSchedules"
    )
    bg_targets: dict[str, list[BgTargetEntry]] = Field(
        default_factory=dict, alias="bgTargets"
    )
    carb_ratios: dict[str, list[CarbRatioEntry]] = Field(
        default_factory=dict, alias="carbRatios"
    )
    insulin_sensitivities: dict[str, list[InsulinSensitivityEntry]] = Field(
        default_factory=dict, alias="insulinSensitivities"
    )


# ---------- Events ----------

class Bolus(TideSyncBase):
    time: datetime
    normal: float | None = None  # delivered amount, units of insulin


class Carbohydrate(TideSyncBase):
    net: float | None = None
    units: str | None = None


class Nutrition(TideSyncBase):
    carbohydrate: Carbohydrate | None = None


class Food(TideSyncBase):
    time: datetime
    nutrition: Nutrition | None = None

    @property
    def net_carbs(self) -> float | None:
        if self.nutrition is None or self.nutrition.carbohydrate is None:
            return None
        return self.nutrition.carbohydrate.net


class ActivityDuration(TideSyncBase):
    units: str = "seconds"
    value: float | None = None


class PhysicalActivity(TideSyncBase):
    time: datetime
    name: str | None = None
    duration: ActivityDuration | None = None
