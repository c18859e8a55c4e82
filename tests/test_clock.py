"""Tests for the clock and slot normalization."""
from datetime import datetime, timedelta, timezone

import pytz

from core.clock import SystemClock, normalize_to_hour_start


def test_normalize_truncates_to_hour_start():
    instant = datetime(2024, 6, 1, 14, 45, 12, 345678, tzinfo=timezone.utc)
    assert normalize_to_hour_start(instant) == datetime(2024, 6, 1, 14, 0, tzinfo=timezone.utc)


def test_normalize_keeps_hour_start():
    instant = datetime(2024, 6, 1, 14, 0, tzinfo=timezone.utc)
    assert normalize_to_hour_start(instant) == instant


def test_normalize_converts_to_utc():
    # 14:45 in Kolkata (+05:30) is 09:15 UTC
    local = pytz.timezone("Asia/Kolkata").localize(datetime(2024, 6, 1, 14, 45))
    slot = normalize_to_hour_start(local)
    assert slot == datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)
    assert slot.tzinfo == timezone.utc


def test_normalize_treats_naive_as_utc():
    assert normalize_to_hour_start(datetime(2024, 6, 1, 14, 59)) == datetime(2024, 6, 1, 14, 0, tzinfo=timezone.utc)


def test_normalize_preserves_order():
    base = datetime(2024, 6, 1, 13, 0, tzinfo=timezone.utc)
    instants = [base + timedelta(minutes=7 * i) for i in range(40)]
    slots = [normalize_to_hour_start(i) for i in instants]
    assert slots == sorted(slots)


def test_system_clock_is_aware_utc_and_not_cached():
    clock = SystemClock()
    first = clock.now()
    second = clock.now()
    assert first.tzinfo == timezone.utc
    assert second >= first
