"""Pydantic models for the Nightscout profile and treatment documents we write."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from tidesync.models.base import TideSyncBase


# ---------- Profile ----------

class ScheduleEntry(TideSyncBase):
    """One time-indexed value of a profile schedule.

    We write all three fields as strings.  Profiles saved by the Nightscout
    editor or AndroidAPS carry numbers for ``timeAsSeconds`` and ``value``.
    """

    time: str  # "HH:MM"
    time_as_seconds: str = Field(alias="timeAsSeconds")
    value: str

    @field_validator("time_as_seconds", "value", mode="before")
    @classmethod
    def _number_as_string(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ProfileInfo(TideSyncBase):
    """A named sub-schedule inside a profile's ``store``."""

    basal: list[ScheduleEntry] = Field(default_factory=list)
    target_low: list[ScheduleEntry] = Field(default_factory=list)
    target_high: list[ScheduleEntry] = Field(default_factory=list)
    carbratio: list[ScheduleEntry] = Field(default_factory=list)
    sens: list[ScheduleEntry] = Field(default_factory=list)


class StoredProfile(TideSyncBase):
    """The identity of a profile already on the site.

    ``mills`` is the content fingerprint used to recognise a profile we have
    already written; ``id`` is the storage key Nightscout assigned.  The two
    are never interchanged.  Nothing else of a stored document is read, so
    profiles written by other uploaders parse whatever their schedules hold.
    """

    id: str | None = Field(default=None, alias="_id")
    mills: str | None = None

    @field_validator("mills", mode="before")
    @classmethod
    def _mills_as_string(cls, value: object) -> object:
        # Profiles written by other uploaders store mills as a number.
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return str(int(value))
        return value

    @property
    def fingerprint(self) -> str | None:
        return self.mills


class Profile(StoredProfile):
    """A Nightscout profile document as we build and write it."""

    default_profile: str | None = Field(default=None, alias="defaultProfile")
    start_date: datetime | None = Field(default=None, alias="startDate")
    units: str | None = None
    store: dict[str, ProfileInfo] = Field(default_factory=dict)

    def get_or_create_info(self, name: str) -> ProfileInfo:
        """Return the ProfileInfo for ``name``, adding an empty one if absent.

        The store keeps first-reference order.
        """
        info = self.store.get(name)
        if info is None:
            info = ProfileInfo()
            self.store[name] = info
        return info


# ---------- Treatments ----------

class Treatment(TideSyncBase):
    """A Nightscout treatment.

    A bolus and a food entry sharing a timestamp become one treatment carrying
    both ``insulin`` and ``carbs``.
    """

    id: str | None = Field(default=None, alias="_id")
    carbs: float | None = None
    insulin: float | None = None
    notes: str | None = None
    duration: float | None = None  # minutes
    event_type: str | None = Field(default=None, alias="eventType")
    created_at: datetime
    entered_by: str | None = Field(default=None, alias="enteredBy")
