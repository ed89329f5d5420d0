from __future__ import annotations

from datetime import date
import re

from app.core.exceptions import ValidationError
from app.models.timetable_slot import DayOfWeek

TIME_PATTERN = re.compile(r"([01][0-9]|2[0-3]):[0-5][0-9]")
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# date.weekday(): Monday == 0
WEEKDAY_TO_DAY = (
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
    DayOfWeek.SATURDAY,
    DayOfWeek.SUNDAY,
)
DAY_ORDER: dict[DayOfWeek, int] = {day: index + 1 for index, day in enumerate(WEEKDAY_TO_DAY)}


def is_valid_time(value: str | None) -> bool:
    return isinstance(value, str) and TIME_PATTERN.fullmatch(value) is not None


def to_minutes(value: str) -> int:
    if not is_valid_time(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def overlaps(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """Half-open interval overlap: a slot ending at 10:00 does not clash with one starting at 10:00."""
    return max(to_minutes(a_start), to_minutes(b_start)) < min(to_minutes(a_end), to_minutes(b_end))


def day_of_week_for(value: date) -> DayOfWeek:
    return WEEKDAY_TO_DAY[value.weekday()]


def parse_day_of_week(value: str | DayOfWeek | None) -> DayOfWeek | None:
    if value is None or isinstance(value, DayOfWeek):
        return value
    try:
        return DayOfWeek(value.strip().upper())
    except ValueError:
        return None


def parse_calendar_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value.strip()):
        raise ValidationError("Invalid date format. Please use YYYY-MM-DD.")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValidationError("Invalid date format. Please use YYYY-MM-DD.") from exc


def format_calendar_date(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None
