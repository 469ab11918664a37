"""
Interval arithmetic for scheduling.

Pure functions only. Every helper returns a new value; nothing mutates a
datetime in place.

Conventions:
- Intervals are half-open [start, end): an interval ending exactly when
  another begins does not overlap it.
- Times of day are expressed as minutes since midnight or "HH:mm" strings.
- Instants are naive local datetimes.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import TypeVar, Union

from court_scheduler.exceptions import ValidationError

MINUTES_PER_DAY = 24 * 60

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

T = TypeVar("T", int, datetime)

TimeOfDay = Union[str, time, datetime]


def overlaps(a_start: T, a_end: T, b_start: T, b_end: T) -> bool:
    """
    Check whether two half-open intervals intersect.

    Covers the candidate starting inside the other interval, ending inside
    it, and fully containing it, as one symmetric test.

    Args:
        a_start: Start of the first interval (inclusive)
        a_end: End of the first interval (exclusive)
        b_start: Start of the second interval (inclusive)
        b_end: End of the second interval (exclusive)

    Returns:
        True if [a_start, a_end) and [b_start, b_end) share any point
    """
    return a_start < b_end and b_start < a_end


def parse_hhmm(value: str) -> time:
    """
    Parse an "HH:mm" string.

    Args:
        value: 24-hour time such as "06:00" or "23:30"

    Returns:
        datetime.time for the value

    Raises:
        ValidationError: If the string is not a valid HH:mm time
    """
    match = HHMM_PATTERN.match(value or "")
    if not match:
        raise ValidationError(f"'{value}' is not a valid HH:mm time")
    return time(int(match.group(1)), int(match.group(2)))


def to_minutes_since_midnight(value: TimeOfDay) -> int:
    """
    Convert a time of day to minutes since midnight.

    Args:
        value: "HH:mm" string, datetime.time, or datetime (date part ignored)

    Returns:
        Minutes in the range [0, 1440)
    """
    if isinstance(value, str):
        value = parse_hhmm(value)
    return value.hour * 60 + value.minute


def format_minutes(minutes: int) -> str:
    """
    Format minutes since midnight as "HH:mm".

    1440 is rendered as "24:00" so a window ending at midnight stays readable.
    """
    if minutes < 0 or minutes > MINUTES_PER_DAY:
        raise ValidationError(f"{minutes} is outside a single day")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def day_start(day: date) -> datetime:
    """Midnight at the start of a day."""
    return datetime(day.year, day.month, day.day)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """
    Get the half-open bounds of a calendar day.

    Returns:
        (midnight, next midnight)
    """
    start = day_start(day)
    return start, start + timedelta(days=1)


def combine(day: date, time_of_day: Union[str, int, time]) -> datetime:
    """
    Build a naive instant from a day and a time of day.

    Args:
        day: Calendar day
        time_of_day: "HH:mm" string, minutes since midnight, or datetime.time

    Returns:
        New datetime on that day
    """
    if isinstance(time_of_day, int):
        minutes = time_of_day
    else:
        minutes = to_minutes_since_midnight(time_of_day)
    return day_start(day) + timedelta(minutes=minutes)


def minutes_from_midnight(day: date, instant: datetime) -> int:
    """
    Offset of an instant relative to a day's midnight, in whole minutes.

    Unlike to_minutes_since_midnight this is not wrapped to a single day:
    an instant on the previous day is negative, one on the next day is >= 1440.
    """
    delta = instant - day_start(day)
    return int(delta.total_seconds() // 60)


def duration_minutes(start: datetime, end: datetime) -> int:
    """Length of [start, end) in whole minutes."""
    return int((end - start).total_seconds() // 60)


def validate_window(start: T, end: T) -> None:
    """
    Ensure an interval has positive length.

    Raises:
        ValidationError: If end is not after start
    """
    if end <= start:
        raise ValidationError("End time must be after start time")


def tile_window(
    window_start: int,
    window_end: int,
    granularity: int,
) -> list[tuple[int, int]]:
    """
    Split [window_start, window_end) into contiguous cells.

    The window must be an exact multiple of the granularity, so the last cell
    ends exactly at window_end and no cell extends past it.

    Args:
        window_start: Window start in minutes since midnight
        window_end: Window end in minutes since midnight
        granularity: Cell length in minutes

    Returns:
        List of (start_minute, end_minute) pairs in order

    Raises:
        ValidationError: If the grid configuration is invalid
    """
    if granularity <= 0:
        raise ValidationError(f"Slot granularity must be positive, got {granularity}")
    if window_end <= window_start:
        raise ValidationError("Slot window end must be after its start")
    if (window_end - window_start) % granularity != 0:
        raise ValidationError(
            f"Slot window of {window_end - window_start} minutes is not a multiple "
            f"of {granularity}"
        )

    return [
        (start, start + granularity)
        for start in range(window_start, window_end, granularity)
    ]
