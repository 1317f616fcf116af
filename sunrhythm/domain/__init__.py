"""
Domain layer - Pure schedule computation without external services.
"""

from .calendar_events import build_calendar_events
from .models import CalendarEvent, DerivedSchedule, ScheduleConfig, SolarTimes, TimeRange
from .schedule_engine import ScheduleEngine, derive_schedule
from .sleep_duration import SleepDurationEstimator, SolarTimeProviderProtocol, estimate_sleep_hours

__all__ = [
    "CalendarEvent",
    "DerivedSchedule",
    "ScheduleConfig",
    "SolarTimes",
    "TimeRange",
    "ScheduleEngine",
    "derive_schedule",
    "SleepDurationEstimator",
    "SolarTimeProviderProtocol",
    "estimate_sleep_hours",
    "build_calendar_events",
]
