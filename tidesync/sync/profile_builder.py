"""Build a Nightscout profile from Tidepool pump settings.

The latest pump-settings snapshot in the window becomes one Profile.  Each of
its four named-schedule mappings (basal rates, glucose targets, carb ratios,
insulin sensitivities) is copied into the ProfileInfo of the same name.

Time offsets arrive as milliseconds from midnight and leave as an ``HH:MM``
clock string plus the whole-second count.  Values leave as locale-invariant
decimal strings so the fingerprint and Nightscout's parsing never depend on
the host locale.

Tidepool stores a single glucose target per entry while Nightscout wants a
range, so every target expands to ``target_low = L`` and
``target_high = L + target`` where ``L`` is the configured low bound.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

from tidesync.models.nightscout import Profile, ScheduleEntry
from tidesync.models.tidepool import PumpSettings
from tidesync.sync.dedup import profile_fingerprint

logger = logging.getLogger("tidesync.sync.profile_builder")


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_seconds(offset_ms: int) -> str:
    """Whole seconds since midnight, as a string (``5400000`` → ``"5400"``)."""
    return str(offset_ms // 1000)


def format_clock(offset_ms: int) -> str:
    """Clock time of an offset, zero padded, no day component (``5400000`` → ``"01:30"``)."""
    seconds = offset_ms // 1000
    hours = (seconds // 3600) % 24
    minutes = (seconds % 3600) // 60
    return f"{hours:02d}:{minutes:02d}"


def format_decimal(value: float) -> str:
    """Render a number with a period separator, no grouping and no exponent.

    Trailing zeros are dropped: ``1.0`` → ``"1"``, ``0.85`` → ``"0.85"``.
    """
    rendered = format(Decimal(repr(float(value))).normalize(), "f")
    return "0" if rendered == "-0" else rendered


def schedule_entry(offset_ms: int, value: float) -> ScheduleEntry:
    """One profile entry; clock and seconds both derive from the same offset."""
    return ScheduleEntry(
        time=format_clock(offset_ms),
        time_as_seconds=format_seconds(offset_ms),
        value=format_decimal(value),
    )


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


def select_latest_settings(snapshots: Iterable[PumpSettings]) -> PumpSettings | None:
    """Pick the snapshot with the latest device time.

    Snapshots without a device time rank below every dated snapshot.  Among
    equal device times the first in fetch order wins.
    """
    latest: PumpSettings | None = None
    for snapshot in snapshots:
        if latest is None:
            latest = snapshot
        elif snapshot.device_time is not None and (
            latest.device_time is None or snapshot.device_time > latest.device_time
        ):
            latest = snapshot
    return latest


def build_profile(snapshots: Iterable[PumpSettings], target_low: float) -> Profile | None:
    """Build the profile for the latest pump-settings snapshot.

    Args:
        snapshots:  Pump-settings snapshots fetched for the window.
        target_low: Lower bound of the glucose target range.

    Returns:
        A Profile with ``id`` unset, or None when there is no snapshot.
    """
    setting = select_latest_settings(snapshots)
    if setting is None:
        logger.info("No pump settings in window, nothing to build")
        return None

    profile = Profile(
        default_profile=setting.active_schedule,
        start_date=setting.device_time,
        units=setting.units.bg,
        mills=profile_fingerprint(setting.device_time),
    )

    for name, basal in setting.basal_schedules.items():
        profile.get_or_create_info(name).basal.extend(
            schedule_entry(entry.start, entry.rate) for entry in basal
        )

    for name, targets in setting.bg_targets.items():
        info = profile.get_or_create_info(name)
        for target in targets:
            info.target_low.append(schedule_entry(target.start, target_low))
            info.target_high.append(schedule_entry(target.start, target_low + target.target))

    for name, ratios in setting.carb_ratios.items():
        profile.get_or_create_info(name).carbratio.extend(
            schedule_entry(entry.start, entry.amount) for entry in ratios
        )

    for name, sensitivities in setting.insulin_sensitivities.items():
        profile.get_or_create_info(name).sens.extend(
            schedule_entry(entry.start, entry.amount) for entry in sensitivities
        )

    logger.info(
        "Built profile mills=%s default=%s with %d schedule(s)",
        profile.mills,
        profile.default_profile,
        len(profile.store),
    )
    return profile
