"""
Domain-specific exception hierarchy for the schedule planner.
"""


class ScheduleError(Exception):
    """Base class for all application-level errors."""


class ConfigurationError(ScheduleError, ValueError):
    """Raised when the schedule configuration is invalid or contradictory."""


class MissingCoordinatesError(ConfigurationError):
    """Raised when latitude or longitude is absent or cannot be parsed."""


class ParseError(ScheduleError, ValueError):
    """Raised when user-supplied input cannot be parsed."""


class MalformedTimeStringError(ParseError):
    """Raised when a time-of-day string does not match HH:MM[:SS]."""


class SolarTimesUnavailableError(ScheduleError):
    """Raised when dawn, sunrise, sunset or dusk does not occur on a date."""
