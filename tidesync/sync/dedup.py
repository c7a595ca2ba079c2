"""Deduplication and fingerprint matching for Tidepool → Nightscout sync.

Tidepool sometimes returns several documents for one logical event.  Both
bolus and food streams are collapsed to one record per timestamp before
treatments are built.

Dedup keys:
    - bolus:   time — first record in fetch order wins
    - food:    time — first record in fetch order wins
    - profile: mills fingerprint (epoch ms of the settings' device time)

The tie-break is fetch order only.  If Tidepool does not return duplicates in
a stable order, which duplicate survives is not stable either.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, TypeVar

from tidesync.models.nightscout import Profile, StoredProfile

logger = logging.getLogger("tidesync.sync.dedup")

RecordT = TypeVar("RecordT")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def dedup_by_timestamp(
    records: Iterable[RecordT],
    key: Callable[[RecordT], datetime] = lambda r: r.time,  # type: ignore[attr-defined]
) -> dict[datetime, RecordT]:
    """Collapse records sharing a timestamp, keeping the first encountered.

    Args:
        records: Records in fetch order.
        key:     Timestamp accessor (defaults to ``record.time``).

    Returns:
        Insertion-ordered mapping timestamp → surviving record.
    """
    kept: dict[datetime, RecordT] = {}
    dropped = 0
    for record in records:
        ts = key(record)
        if ts in kept:
            dropped += 1
            continue
        kept[ts] = record

    if dropped:
        logger.debug("Dropped %d duplicate record(s) sharing a timestamp", dropped)
    return kept


def profile_fingerprint(device_time: datetime | None) -> str:
    """Derive a profile's identity fingerprint from its settings' device time.

    The fingerprint is the epoch-millisecond rendering of the device time.
    Naive datetimes are taken as UTC.  Without a device time the current
    instant is used, so such a profile never matches a stored one.

    Args:
        device_time: ``deviceTime`` of the pump-settings snapshot.

    Returns:
        Epoch milliseconds as a decimal string.
    """
    if device_time is None:
        device_time = datetime.now(timezone.utc)
    elif device_time.tzinfo is None:
        device_time = device_time.replace(tzinfo=timezone.utc)
    return str((device_time - _EPOCH) // timedelta(milliseconds=1))


def find_matching_profile_id(profile: Profile, existing: Iterable[StoredProfile]) -> str | None:
    """Return the stored id of the first existing profile with the same fingerprint.

    Args:
        profile:  Newly built profile.
        existing: Profiles already stored on the target.

    Returns:
        The stored ``_id`` to update in place, or None to create a new document.
    """
    if profile.fingerprint is None:
        return None
    for candidate in existing:
        if candidate.fingerprint == profile.fingerprint:
            return candidate.id
    return None
