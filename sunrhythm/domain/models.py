"""
Domain models for solar times, schedule configuration and derived schedules.

All instants are timezone-aware ``pendulum.DateTime`` values in UTC. Local
time only comes into play when parsing time-of-day strings and when
formatting for display or export.
"""

from dataclasses import dataclass
from datetime import date as Date, datetime
from typing import Dict, List, Optional, Tuple

import pendulum
from pendulum import DateTime

from .exceptions import ConfigurationError
from .time_parsing import parse_time_of_day

UTC = "UTC"


def to_instant(value: datetime) -> DateTime:
    """Normalize an aware datetime to a UTC pendulum instant."""
    return pendulum.from_timestamp(value.timestamp(), tz=UTC)


def shift_minutes(instant: DateTime, minutes: float) -> DateTime:
    """Move an instant by a (possibly fractional or negative) number of minutes."""
    return pendulum.from_timestamp(instant.timestamp() + minutes * 60, tz=UTC)


def midpoint(first: DateTime, second: DateTime) -> DateTime:
    """Arithmetic mean of two instants."""
    return pendulum.from_timestamp((first.timestamp() + second.timestamp()) / 2, tz=UTC)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must not be after end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Start time {self.start} must not be after end time {self.end}")

    @classmethod
    def spanning(cls, first: DateTime, second: DateTime) -> "TimeRange":
        """Range covering two instants given in either order."""
        return cls(start=min(first, second), end=max(first, second))

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def contains(self, instant: DateTime) -> bool:
        """Check if an instant falls inside the range (both ends inclusive)."""
        return self.start <= instant <= self.end

    def format_in(self, timezone: str) -> str:
        """Format the range in a local timezone."""
        start = self.start.in_timezone(timezone)
        end = self.end.in_timezone(timezone)
        return f"{start.format('YYYY-MM-DD HH:mm')} - {end.format('YYYY-MM-DD HH:mm')}"


@dataclass(frozen=True)
class SolarTimes:
    """
    Sun positions for one calendar date at one location.

    Expected ordering away from polar latitudes:
    dawn <= sunrise <= solar_noon <= sunset <= dusk.
    """
    date: Date
    dawn: DateTime
    sunrise: DateTime
    solar_noon: DateTime
    sunset: DateTime
    dusk: DateTime

    @property
    def day_length_hours(self) -> float:
        """Hours between sunrise and sunset."""
        return (self.sunset - self.sunrise).total_seconds() / 3600

    def is_ordered(self) -> bool:
        return self.dawn <= self.sunrise <= self.solar_noon <= self.sunset <= self.dusk

    def labelled(self) -> List[Tuple[str, DateTime]]:
        """Instants paired with display labels, in chronological order."""
        return [
            ("Dawn (civil)", self.dawn),
            ("Sunrise", self.sunrise),
            ("Solar noon", self.solar_noon),
            ("Sunset", self.sunset),
            ("Dusk (civil)", self.dusk),
        ]


@dataclass(frozen=True)
class ScheduleConfig:
    """
    Offsets and bounds for one schedule derivation.

    Time-of-day strings are interpreted in ``timezone``. Construction fails
    when any of them is malformed or when the earliest next wake-up bound is
    later than the latest one.
    """
    current_wake_up_time: str
    bad_sleep_minutes: float = 0
    wind_down_before_sleep_minutes: float = 60
    breakfast_after_wake_up_minutes: float = 45
    dinner_before_sleep_minutes: float = 180
    working_hours: float = 8
    next_wake_up_earliest_time: Optional[str] = None
    next_wake_up_latest_time: Optional[str] = None
    timezone: str = UTC

    def __post_init__(self):
        parse_time_of_day(self.current_wake_up_time)

        earliest = (
            parse_time_of_day(self.next_wake_up_earliest_time)
            if self.next_wake_up_earliest_time
            else None
        )
        latest = (
            parse_time_of_day(self.next_wake_up_latest_time)
            if self.next_wake_up_latest_time
            else None
        )
        if earliest is not None and latest is not None and earliest > latest:
            raise ConfigurationError(
                f"next_wake_up_earliest_time ({self.next_wake_up_earliest_time}) is later than "
                f"next_wake_up_latest_time ({self.next_wake_up_latest_time})"
            )


@dataclass(frozen=True)
class SleepWindow:
    """
    Candidate sleep interval passed through the clamp chain.

    ``applied`` lists the constraints that moved the window, in order.
    """
    sleep_start: DateTime
    wake_up: DateTime
    applied: Tuple[str, ...] = ()

    @classmethod
    def ending_at(
        cls, wake_up: DateTime, required_minutes: float, applied: Tuple[str, ...] = ()
    ) -> "SleepWindow":
        return cls(
            sleep_start=shift_minutes(wake_up, -required_minutes),
            wake_up=wake_up,
            applied=applied,
        )

    @classmethod
    def starting_at(
        cls, sleep_start: DateTime, required_minutes: float, applied: Tuple[str, ...] = ()
    ) -> "SleepWindow":
        return cls(
            sleep_start=sleep_start,
            wake_up=shift_minutes(sleep_start, required_minutes),
            applied=applied,
        )

    def duration_minutes(self) -> float:
        return (self.wake_up.timestamp() - self.sleep_start.timestamp()) / 60


SCHEDULE_POINTS = (
    "wake_up_time",
    "next_wake_up_time",
    "sleep_start_time",
    "wind_down_time",
    "breakfast_time",
    "mid_morning_snack_time",
    "lunch_time",
    "afternoon_snack_time",
    "dinner_time",
    "morning_peak",
    "power_nap_time",
    "afternoon_peak",
    "morning_work_start",
    "morning_work_end",
    "afternoon_work_start",
    "afternoon_work_end",
)


@dataclass(frozen=True)
class DerivedSchedule:
    """Fully resolved schedule for one day."""
    wake_up_time: DateTime
    next_wake_up_time: DateTime
    sleep_start_time: DateTime
    wind_down_time: DateTime
    breakfast_time: DateTime
    mid_morning_snack_time: DateTime
    lunch_time: DateTime
    afternoon_snack_time: DateTime
    dinner_time: DateTime
    morning_peak: DateTime
    power_nap_time: DateTime
    afternoon_peak: DateTime
    morning_work_start: DateTime
    morning_work_end: DateTime
    afternoon_work_start: DateTime
    afternoon_work_end: DateTime
    required_sleep_minutes: float
    constraints_applied: Tuple[str, ...] = ()

    def points(self) -> Dict[str, DateTime]:
        """Named schedule instants in a stable order."""
        return {name: getattr(self, name) for name in SCHEDULE_POINTS}

    @property
    def wind_down_window(self) -> TimeRange:
        return TimeRange.spanning(self.wind_down_time, self.sleep_start_time)

    @property
    def morning_work_window(self) -> TimeRange:
        return TimeRange.spanning(self.morning_work_start, self.morning_work_end)

    @property
    def afternoon_work_window(self) -> TimeRange:
        return TimeRange.spanning(self.afternoon_work_start, self.afternoon_work_end)


@dataclass(frozen=True)
class CalendarEvent:
    """
    An exportable calendar entry.

    ``alarm_minutes_before`` is None when the event carries no reminder.
    """
    title: str
    time_range: TimeRange
    alarm_minutes_before: Optional[int] = None
    alarm_description: Optional[str] = None

    def format_display(self, timezone: str) -> str:
        """
        Format the event for display.
        Format: Title | YYYY-MM-DD HH:mm – HH:mm (N min)
        """
        start = self.time_range.start.in_timezone(timezone)
        end = self.time_range.end.in_timezone(timezone)
        duration = self.time_range.duration_minutes()
        return (
            f"{self.title} | {start.format('YYYY-MM-DD HH:mm')} – {end.format('HH:mm')} "
            f"({duration} min)"
        )
