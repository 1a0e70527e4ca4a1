"""Tests for nearest-date resolution and date parsing."""
import os
import random
import time
from datetime import datetime, timedelta, timezone

import pytest

from date_resolver import parse_target_date, resolve_nearest
from weather_data import ForecastEntry, ForecastSeries
from weather_errors import EmptySeries, InvalidDateFormat

UTC = timezone.utc
KYIV = timezone(timedelta(hours=3))


def entry(hour, minute=0, **params):
    return ForecastEntry(timestamp=datetime(2023, 5, 11, hour, minute, tzinfo=UTC), **params)


@pytest.fixture
def afternoon_series():
    return ForecastSeries([entry(14, temperature=19.7), entry(17, temperature=21.0)])


def test_resolve_picks_closest_entry(afternoon_series):
    target = datetime(2023, 5, 11, 15, 29, tzinfo=UTC)

    chosen = resolve_nearest(afternoon_series, target)

    assert chosen.timestamp.hour == 14
    assert chosen.temperature == 19.7


def test_resolve_after_midpoint_picks_later_entry(afternoon_series):
    target = datetime(2023, 5, 11, 15, 31, tzinfo=UTC)

    assert resolve_nearest(afternoon_series, target).temperature == 21.0


def test_resolve_tie_prefers_earlier_entry(afternoon_series):
    target = datetime(2023, 5, 11, 15, 30, tzinfo=UTC)

    for _ in range(20):
        assert resolve_nearest(afternoon_series, target).temperature == 19.7


def test_resolve_tie_ignores_input_order():
    late, early = entry(17), entry(14)
    target = datetime(2023, 5, 11, 15, 30, tzinfo=UTC)

    assert resolve_nearest([late, early], target) is early
    assert resolve_nearest([early, late], target) is early


def test_resolve_compares_across_offsets():
    """Timestamps in different zones are compared as instants."""
    utc_entry = entry(12)
    kyiv_entry = ForecastEntry(timestamp=datetime(2023, 5, 11, 17, 0, tzinfo=KYIV))  # 14:00 UTC
    target = datetime(2023, 5, 11, 16, 30, tzinfo=KYIV)  # 13:30 UTC

    assert resolve_nearest([utc_entry, kyiv_entry], target) is kyiv_entry


def test_resolve_outside_range_clamps_to_edges(afternoon_series):
    assert resolve_nearest(afternoon_series, datetime(2020, 1, 1, tzinfo=UTC)).temperature == 19.7
    assert resolve_nearest(afternoon_series, datetime(2030, 1, 1, tzinfo=UTC)).temperature == 21.0


def test_resolve_result_is_minimal_and_member():
    """The chosen entry is never farther from target than any other entry."""
    rng = random.Random(1234)
    base = datetime(2023, 5, 1, tzinfo=UTC)
    for _ in range(200):
        entries = [
            ForecastEntry(timestamp=base + timedelta(minutes=rng.randrange(0, 20000)))
            for _ in range(rng.randrange(1, 40))
        ]
        target = base + timedelta(minutes=rng.randrange(-2000, 22000))

        chosen = resolve_nearest(ForecastSeries(entries), target)

        assert any(chosen is e for e in entries)
        distance = abs(chosen.timestamp - target)
        assert all(distance <= abs(e.timestamp - target) for e in entries)


def test_resolve_empty_series():
    with pytest.raises(EmptySeries):
        resolve_nearest([], datetime(2023, 5, 11, tzinfo=UTC))


@pytest.fixture
def now():
    return datetime(2024, 2, 3, 8, 15, 42, tzinfo=KYIV)


@pytest.mark.parametrize("text", [None, "", "  ", "now", "NOW", "Now"])
def test_parse_now(text, now):
    assert parse_target_date(text, now=now) == now


def test_parse_date_only_keeps_current_time_of_day(now):
    parsed = parse_target_date("2023-05-11", now=now)

    assert (parsed.year, parsed.month, parsed.day) == (2023, 5, 11)
    assert (parsed.hour, parsed.minute, parsed.second) == (8, 15, 42)
    assert parsed.tzinfo is not None


def test_parse_full_timestamp(now):
    parsed = parse_target_date("2023-05-11T11:00:20", now=now)

    assert parsed.replace(tzinfo=None) == datetime(2023, 5, 11, 11, 0, 20)
    assert parsed.tzinfo is not None


@pytest.mark.parametrize("text", [
    "2023-13-40",
    "2023-02-30",
    "2023-05-11T25:00:00",
    "2023-5-11",
    "11.05.2023",
    "2023-05-11 11:00:20",
    "2023-05-11T11:00",
    "tomorrow",
])
def test_parse_rejects_other_shapes(text, now):
    with pytest.raises(InvalidDateFormat) as exc_info:
        parse_target_date(text, now=now)

    assert text in str(exc_info.value)


@pytest.fixture
def berlin_local_time():
    """Pin the process-local time zone to Europe/Berlin for the duration of a test."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "Europe/Berlin"
    time.tzset()
    yield
    if previous is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = previous
    time.tzset()


@pytest.mark.parametrize("text", [
    "2023-03-26T02:30:00",  # skipped by the spring-forward jump
    "2023-10-29T02:30:00",  # repeated by the fall-back change
])
def test_parse_rejects_local_times_around_dst_change(berlin_local_time, text):
    with pytest.raises(InvalidDateFormat):
        parse_target_date(text)


def test_parse_date_only_rejects_current_time_inside_dst_gap(berlin_local_time):
    now = datetime(2023, 3, 20, 2, 30, tzinfo=timezone(timedelta(hours=1)))

    with pytest.raises(InvalidDateFormat):
        parse_target_date("2023-03-26", now=now)


def test_parse_uses_local_offset_for_the_requested_date(berlin_local_time):
    summer = parse_target_date("2023-07-01T12:00:00")
    winter = parse_target_date("2023-01-15T12:00:00")
    just_after_jump = parse_target_date("2023-03-26T03:30:00")

    assert summer.utcoffset() == timedelta(hours=2)
    assert winter.utcoffset() == timedelta(hours=1)
    assert just_after_jump.replace(tzinfo=None) == datetime(2023, 3, 26, 3, 30)
    assert just_after_jump.utcoffset() == timedelta(hours=2)
