"""
Builders shared by the schedule tests.
"""

from datetime import date as Date

import pendulum

from sunrhythm.domain.models import SolarTimes, shift_minutes

DAY = Date(2025, 3, 20)
NEXT_DAY = Date(2025, 3, 21)


def at(day: Date, hour: int, minute: int = 0, second: int = 0, microsecond: int = 0):
    """UTC instant on ``day``."""
    return pendulum.datetime(
        day.year, day.month, day.day, hour, minute, second, microsecond, tz="UTC"
    )


def solar_times(
    day: Date,
    dawn=(5, 30),
    sunrise=(6, 0),
    noon=(12, 10),
    sunset=(20, 30),
    dusk=(21, 0),
) -> SolarTimes:
    return SolarTimes(
        date=day,
        dawn=at(day, *dawn),
        sunrise=at(day, *sunrise),
        solar_noon=at(day, *noon),
        sunset=at(day, *sunset),
        dusk=at(day, *dusk),
    )


def assert_close(actual, expected, seconds: float = 0.01):
    """Instants equal up to float rounding."""
    difference = abs(actual.timestamp() - expected.timestamp())
    assert difference <= seconds, f"{actual} != {expected} (off by {difference:.6f}s)"


class StubSolarTimeProvider:
    """
    Provider returning days centred on 12:00 UTC.

    ``day_lengths`` maps (month, day) to a day length in hours.
    """

    def __init__(self, day_lengths=None, default_length: float = 12.0):
        self.day_lengths = day_lengths or {}
        self.default_length = default_length
        self.calls = []

    def get_solar_times(self, date, latitude, longitude):
        day = Date(date.year, date.month, date.day)
        self.calls.append((day, latitude, longitude))
        half_day_minutes = self.day_lengths.get((date.month, date.day), self.default_length) * 30
        noon = at(day, 12)
        return SolarTimes(
            date=day,
            dawn=shift_minutes(noon, -half_day_minutes - 30),
            sunrise=shift_minutes(noon, -half_day_minutes),
            solar_noon=noon,
            sunset=shift_minutes(noon, half_day_minutes),
            dusk=shift_minutes(noon, half_day_minutes + 30),
        )


class FailingSolarTimeProvider:
    """Provider that always fails, e.g. for polar dates."""

    def __init__(self, error: Exception):
        self.error = error

    def get_solar_times(self, date, latitude, longitude):
        raise self.error
