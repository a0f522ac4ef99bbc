from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from transport_pricing.services.pricing.surcharges import (
    compute_duration_days,
    evaluate_surcharges,
    is_peak_hour,
    is_weekend,
    to_local,
)

MANILA = ZoneInfo("Asia/Manila")
MONDAY = datetime(2025, 10, 6, 10, 0)
SATURDAY = datetime(2025, 10, 4, 10, 0)


@pytest.mark.parametrize(
    "hours, expected",
    [
        (0, 1),
        (6, 1),
        (24, 1),
        (24.01, 2),
        (48, 2),
        (50, 3),
    ],
)
def test_duration_days(hours, expected):
    assert compute_duration_days(MONDAY, MONDAY + timedelta(hours=hours)) == expected


def test_duration_defaults_to_one_day_without_both_timestamps():
    assert compute_duration_days(None, None) == 1
    assert compute_duration_days(MONDAY, None) == 1
    assert compute_duration_days(None, MONDAY) == 1


@pytest.mark.parametrize(
    "hour, minute, expected",
    [
        (6, 59, False),
        (7, 0, True),
        (8, 59, True),
        (9, 0, False),
        (12, 0, False),
        (17, 0, True),
        (18, 30, True),
        (19, 0, False),
    ],
)
def test_peak_hour_windows(hour, minute, expected):
    assert is_peak_hour(datetime(2025, 10, 6, hour, minute)) is expected


def test_to_local_converts_aware_and_tags_naive():
    aware = datetime(2025, 10, 6, 0, 30, tzinfo=timezone.utc)
    local = to_local(aware, MANILA)
    assert local.hour == 8 and local.minute == 30
    assert is_peak_hour(local)

    naive = to_local(datetime(2025, 10, 6, 0, 30), MANILA)
    assert naive.hour == 0 and naive.tzinfo is MANILA
    assert to_local(None, MANILA) is None


def test_weekend_checks_either_timestamp():
    assert is_weekend(SATURDAY, None)
    assert is_weekend(MONDAY - timedelta(days=2), MONDAY)   # 周六提货，周一送达
    assert not is_weekend(MONDAY, MONDAY + timedelta(days=1))
    assert not is_weekend(None, None)


def test_evaluate_surcharges_flags():
    holidays = {date(2025, 10, 7)}
    flags = evaluate_surcharges(
        datetime(2025, 10, 6, 8, 0),
        datetime(2025, 10, 7, 12, 0),
        duration_days=2,
        holiday_predicate=holidays.__contains__,
    )
    assert flags.peak_hour
    assert not flags.weekend
    assert flags.holiday            # 送达日是节假日
    assert flags.overtime


def test_evaluate_surcharges_without_timestamps():
    flags = evaluate_surcharges(None, None, duration_days=1, holiday_predicate=lambda d: True)
    assert not (flags.peak_hour or flags.weekend or flags.holiday or flags.overtime)


NEW_YORK = ZoneInfo("America/New_York")


def test_duration_counts_elapsed_time_across_fall_back():
    # 2025-11-02 纽约回拨 1 小时：墙钟 24h，实际经过 25h
    pickup = to_local(datetime(2025, 11, 1, 12, 0), NEW_YORK)
    delivery = to_local(datetime(2025, 11, 2, 12, 0), NEW_YORK)
    assert compute_duration_days(pickup, delivery) == 2


def test_duration_counts_elapsed_time_across_spring_forward():
    # 2025-03-09 拨快 1 小时：墙钟 24.5h，实际 23.5h
    pickup = to_local(datetime(2025, 3, 8, 12, 0), NEW_YORK)
    delivery = to_local(datetime(2025, 3, 9, 12, 30), NEW_YORK)
    assert compute_duration_days(pickup, delivery) == 1
