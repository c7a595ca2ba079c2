"""Wire models for the two services tidesync talks to.

    tidepool   — source documents (pump settings, bolus, food, physical activity)
    nightscout — target documents (profile, treatment)
"""

from tidesync.models.nightscout import (
    Profile,
    ProfileInfo,
    ScheduleEntry,
    StoredProfile,
    Treatment,
)
from tidesync.models.tidepool import Bolus, Food, PhysicalActivity, PumpSettings

__all__ = [
    "PumpSettings",
    "Bolus",
    "Food",
    "PhysicalActivity",
    "Profile",
    "ProfileInfo",
    "ScheduleEntry",
    "StoredProfile",
    "Treatment",
]
