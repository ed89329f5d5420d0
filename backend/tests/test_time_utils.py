from datetime import date

import pytest

from app.core.exceptions import ValidationError
from app.models.timetable_slot import DayOfWeek
from app.services.time_utils import (
    DAY_ORDER,
    day_of_week_for,
    format_calendar_date,
    is_valid_time,
    overlaps,
    parse_calendar_date,
    parse_day_of_week,
    to_minutes,
)


@pytest.mark.parametrize("value", ["00:00", "09:05", "13:30", "23:59"])
def test_is_valid_time_accepts_24_hour_clock(value):
    assert is_valid_time(value)


@pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "12:5", "noon", "", None, "09:00\n", "0\u0669:3\u0660", " 09:00"])
def test_is_valid_time_rejects_malformed_values(value):
    assert not is_valid_time(value)


def test_to_minutes():
    assert to_minutes("00:00") == 0
    assert to_minutes("01:30") == 90
    assert to_minutes("23:59") == 1439

    with pytest.raises(ValueError):
        to_minutes("25:00")


def test_overlaps_uses_half_open_intervals():
    assert overlaps("09:00", "10:00", "09:30", "10:30")
    assert overlaps("09:00", "12:00", "10:00", "11:00")
    assert overlaps("09:00", "10:00", "09:00", "10:00")
    assert not overlaps("09:00", "10:00", "10:00", "11:00")
    assert not overlaps("11:00", "12:00", "09:00", "10:00")


@pytest.mark.parametrize(
    ("first", "second"),
    [
        (("09:00", "10:00"), ("09:30", "10:30")),
        (("08:00", "08:45"), ("08:45", "09:30")),
        (("13:00", "15:00"), ("13:30", "14:00")),
    ],
)
def test_overlaps_is_symmetric(first, second):
    assert overlaps(*first, *second) == overlaps(*second, *first)


def test_day_of_week_for_calendar_dates():
    assert day_of_week_for(date(2024, 7, 15)) == DayOfWeek.MONDAY
    assert day_of_week_for(date(2024, 7, 19)) == DayOfWeek.FRIDAY
    assert day_of_week_for(date(2024, 7, 21)) == DayOfWeek.SUNDAY


def test_day_order_runs_monday_to_sunday():
    assert DAY_ORDER[DayOfWeek.MONDAY] == 1
    assert DAY_ORDER[DayOfWeek.SUNDAY] == 7
    assert sorted(DAY_ORDER, key=DAY_ORDER.get)[2] == DayOfWeek.WEDNESDAY


def test_parse_day_of_week():
    assert parse_day_of_week("MONDAY") == DayOfWeek.MONDAY
    assert parse_day_of_week(" tuesday ") == DayOfWeek.TUESDAY
    assert parse_day_of_week(DayOfWeek.FRIDAY) == DayOfWeek.FRIDAY
    assert parse_day_of_week("Funday") is None
    assert parse_day_of_week(None) is None


def test_parse_calendar_date():
    assert parse_calendar_date("2024-07-15") == date(2024, 7, 15)
    assert parse_calendar_date(date(2024, 7, 15)) == date(2024, 7, 15)

    for bad_value in ("2024/07/15", "15-07-2024", "2024-02-30", "tomorrow", "2024-07-15\n1", "\u0662024-07-15"):
        with pytest.raises(ValidationError) as exc_info:
            parse_calendar_date(bad_value)
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid date format. Please use YYYY-MM-DD."


def test_format_calendar_date():
    assert format_calendar_date(date(2024, 7, 15)) == "2024-07-15"
    assert format_calendar_date(None) is None


def test_to_minutes_rejects_non_ascii_digits():
    with pytest.raises(ValueError):
        to_minutes("0٩:3٠")
