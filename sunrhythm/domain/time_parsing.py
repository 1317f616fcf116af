"""
Parsing of time-of-day strings such as ``07:30`` or ``06:45:30``.
"""

import re
from datetime import date as Date, time

import pendulum
from pendulum import DateTime

from .exceptions import MalformedTimeStringError

_TIME_OF_DAY_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")


def parse_time_of_day(time_string: str) -> time:
    """
    Parse an ``HH:MM[:SS]`` string into a time object.

    Seconds default to 0 when omitted.

    Raises:
        MalformedTimeStringError: If the string does not match the format or
            any component is out of range.
    """
    match = _TIME_OF_DAY_PATTERN.match(time_string) if isinstance(time_string, str) else None
    if match is None:
        raise MalformedTimeStringError(
            f"Invalid time of day {time_string!r}, expected HH:MM or HH:MM:SS"
        )

    hours, minutes, seconds = match.groups()
    try:
        return time(hour=int(hours), minute=int(minutes), second=int(seconds or 0))
    except ValueError as exc:
        raise MalformedTimeStringError(f"Invalid time of day {time_string!r}: {exc}") from exc


def date_from_time_string(date: Date, time_string: str, timezone: str = "UTC") -> DateTime:
    """
    Anchor a time-of-day string on a calendar date in ``timezone``.

    The result is returned as a UTC instant.
    """
    time_of_day = parse_time_of_day(time_string)
    local = pendulum.datetime(
        date.year,
        date.month,
        date.day,
        time_of_day.hour,
        time_of_day.minute,
        time_of_day.second,
        tz=timezone,
    )
    return local.in_timezone("UTC")
