"""Tests for timestamp dedup and profile fingerprint matching."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from tidesync.models.nightscout import Profile
from tidesync.sync.dedup import (
    dedup_by_timestamp,
    find_matching_profile_id,
    profile_fingerprint,
)
from tidesync.tests.conftest import at, bolus


class TestDedupByTimestamp:
    def test_first_record_wins(self) -> None:
        first, second = bolus(100, 2.0), bolus(100, 3.0)
        kept = dedup_by_timestamp([first, second])
        assert kept == {at(100): first}
        assert kept[at(100)] is first

    def test_fetch_order_preserved(self) -> None:
        records = [bolus(300, 1.0), bolus(100, 1.0), bolus(300, 5.0), bolus(200, 1.0)]
        assert list(dedup_by_timestamp(records)) == [at(300), at(100), at(200)]

    def test_same_input_order_same_result(self) -> None:
        records = [bolus(100, 2.0), bolus(100, 3.0), bolus(100, 4.0)]
        assert dedup_by_timestamp(records) == dedup_by_timestamp(list(records))

    def test_equal_instants_in_different_zones_collapse(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        records = [bolus(7200, 1.0), bolus(7200, 2.0)]
        records[1].time = records[1].time.astimezone(plus_two)
        assert len(dedup_by_timestamp(records)) == 1

    def test_custom_key(self) -> None:
        kept = dedup_by_timestamp(["a1", "b1", "a2"], key=lambda s: s[0])
        assert kept == {"a": "a1", "b": "b1"}

    def test_empty(self) -> None:
        assert dedup_by_timestamp([]) == {}


class TestProfileFingerprint:
    def test_epoch_milliseconds(self) -> None:
        assert profile_fingerprint(datetime(2021, 1, 1, tzinfo=timezone.utc)) == "1609459200000"

    def test_naive_taken_as_utc(self) -> None:
        assert profile_fingerprint(datetime(2021, 1, 1)) == "1609459200000"

    def test_milliseconds_kept(self) -> None:
        value = datetime(2021, 1, 1, 0, 0, 1, 234000, tzinfo=timezone.utc)
        assert profile_fingerprint(value) == "1609459201234"

    def test_stable_across_calls(self) -> None:
        value = datetime(2024, 5, 1, 8)
        assert profile_fingerprint(value) == profile_fingerprint(value)


class TestFindMatchingProfileId:
    def test_match_by_fingerprint(self) -> None:
        built = Profile(mills="1609459200000")
        existing = [
            Profile(id="aaa", mills="1600000000000"),
            Profile(id="bbb", mills="1609459200000"),
        ]
        assert find_matching_profile_id(built, existing) == "bbb"

    def test_first_match_wins(self) -> None:
        built = Profile(mills="1609459200000")
        existing = [Profile(id="one", mills="1609459200000"), Profile(id="two", mills="1609459200000")]
        assert find_matching_profile_id(built, existing) == "one"

    def test_no_match(self) -> None:
        built = Profile(mills="1609459200000")
        assert find_matching_profile_id(built, [Profile(id="aaa", mills="1")]) is None
        assert find_matching_profile_id(built, []) is None

    def test_numeric_stored_mills_match(self) -> None:
        stored = Profile.model_validate({"_id": "ccc", "mills": 1609459200000})
        assert find_matching_profile_id(Profile(mills="1609459200000"), [stored]) == "ccc"

    def test_storage_id_is_not_the_fingerprint(self) -> None:
        built = Profile(mills="1609459200000")
        assert find_matching_profile_id(built, [Profile(id="1609459200000", mills=None)]) is None
