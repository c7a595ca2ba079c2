"""Build Nightscout treatments from Tidepool bolus, food and activity events.

Output groups, concatenated in this order:
    1. one treatment per bolus, carrying the carbs of a food entry at the
       identical timestamp when there is one
    2. one carbs-only treatment per food entry with no bolus at its timestamp
    3. one "Exercise" treatment per physical activity

Boluses and food are deduplicated by timestamp first.  Activities are taken
as-is.  Source timestamps are copied verbatim into ``created_at``.
"""

from __future__ import annotations

import logging
from typing import Iterable

from tidesync.models.nightscout import Treatment
from tidesync.models.tidepool import ActivityDuration, Bolus, Food, PhysicalActivity
from tidesync.sync.dedup import dedup_by_timestamp

logger = logging.getLogger("tidesync.sync.treatment_builder")

EXERCISE_EVENT_TYPE = "Exercise"
DEFAULT_ENTERED_BY = "Tidepool"

_SECONDS_PER_UNIT: dict[str, int] = {
    "seconds": 1,
    "minutes": 60,
    "hours": 3600,
}


def duration_minutes(duration: ActivityDuration | None) -> float | None:
    """Convert an activity duration to (fractional) minutes.

    Unknown units are treated as seconds.
    """
    if duration is None or duration.value is None:
        return None
    factor = _SECONDS_PER_UNIT.get(duration.units)
    if factor is None:
        logger.warning("Unknown activity duration units %r, assuming seconds", duration.units)
        factor = 1
    return duration.value * factor / 60


def build_treatments(
    boluses: Iterable[Bolus],
    food: Iterable[Food],
    activity: Iterable[PhysicalActivity],
    entered_by: str = DEFAULT_ENTERED_BY,
) -> list[Treatment]:
    """Merge the three event streams into one treatment list.

    Args:
        boluses:    Bolus events in fetch order.
        food:       Food events in fetch order.
        activity:   Physical-activity events in fetch order.
        entered_by: Source attribution for ``enteredBy``.

    Returns:
        Bolus-derived treatments, then food-only, then activity.  May be empty.
    """
    bolus_by_time = dedup_by_timestamp(boluses)
    food_by_time = dedup_by_timestamp(food)

    with_bolus = []
    for ts, bolus in bolus_by_time.items():
        meal = food_by_time.get(ts)
        with_bolus.append(
            Treatment(
                carbs=meal.net_carbs if meal is not None else None,
                insulin=bolus.normal,
                created_at=ts,
                entered_by=entered_by,
            )
        )

    food_only = [
        Treatment(carbs=meal.net_carbs, created_at=ts, entered_by=entered_by)
        for ts, meal in food_by_time.items()
        if ts not in bolus_by_time
    ]

    exercise = [
        Treatment(
            notes=event.name,
            duration=duration_minutes(event.duration),
            event_type=EXERCISE_EVENT_TYPE,
            created_at=event.time,
            entered_by=entered_by,
        )
        for event in activity
    ]

    logger.info(
        "Built %d treatment(s): %d bolus, %d food-only, %d exercise",
        len(with_bolus) + len(food_only) + len(exercise),
        len(with_bolus),
        len(food_only),
        len(exercise),
    )
    return with_bolus + food_only + exercise
