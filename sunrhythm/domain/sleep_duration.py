"""
Seasonal sleep duration model.

Sleep need is interpolated linearly between the two solstices: the longest
day of the year maps to the shortest recommended sleep and the shortest day
to the longest.
"""

import logging
from datetime import date as Date
from typing import Protocol

from .models import SolarTimes

logger = logging.getLogger(__name__)

DEFAULT_SLEEP_LENGTH_HOURS = 8.0
DEFAULT_SEASONAL_ADJUSTMENT_HOURS = 0.5


class SolarTimeProviderProtocol(Protocol):
    """Protocol describing the solar time source needed by the pipeline."""

    def get_solar_times(self, date: Date, latitude: float, longitude: float) -> SolarTimes:
        """Return dawn, sunrise, solar noon, sunset and dusk for a date."""


class SleepDurationEstimator:
    """
    Estimates the recommended sleep duration for a date and location.

    Algorithm:
    1. Measure day length on June 21, December 21 and the requested date
    2. Normalize the requested day length between the shortest (0) and
       longest (1) solstice day
    3. Map the normalized value inversely onto
       [sleep_length - adjustment, sleep_length + adjustment]
    """

    def __init__(
        self,
        solar_time_provider: SolarTimeProviderProtocol,
        sleep_length: float = DEFAULT_SLEEP_LENGTH_HOURS,
        seasonal_adjustment: float = DEFAULT_SEASONAL_ADJUSTMENT_HOURS,
    ):
        self.solar_time_provider = solar_time_provider
        self.sleep_length = sleep_length
        self.seasonal_adjustment = seasonal_adjustment

    @property
    def min_sleep(self) -> float:
        return self.sleep_length - self.seasonal_adjustment

    @property
    def max_sleep(self) -> float:
        return self.sleep_length + self.seasonal_adjustment

    def estimate_sleep_hours(
        self,
        date: Date,
        latitude: float,
        longitude: float,
        bad_sleep_minutes: float = 0,
    ) -> float:
        """
        Estimate the recommended sleep in hours.

        Args:
            date: Calendar date to estimate for
            latitude: Geographic latitude in degrees
            longitude: Geographic longitude in degrees
            bad_sleep_minutes: Accepted for interface compatibility and not added;
                the schedule engine adds bad-sleep compensation to the required minutes

        Returns:
            Recommended sleep duration in hours

        Raises:
            SolarTimesUnavailableError: If the provider fails for any probe date
        """
        summer_length = self._day_length(Date(date.year, 6, 21), latitude, longitude)
        winter_length = self._day_length(Date(date.year, 12, 21), latitude, longitude)
        current_length = self._day_length(date, latitude, longitude)

        return self._interpolate(current_length, summer_length, winter_length)

    def _day_length(self, date: Date, latitude: float, longitude: float) -> float:
        times = self.solar_time_provider.get_solar_times(date, latitude, longitude)
        return times.day_length_hours

    def _interpolate(self, current: float, summer: float, winter: float) -> float:
        # Southern hemisphere swaps which solstice is longest.
        longest = max(summer, winter)
        shortest = min(summer, winter)
        day_length_range = longest - shortest

        if day_length_range == 0:
            logger.warning(
                "Solstice day lengths are equal (%.4f h); using midpoint sleep length", longest
            )
            return self.sleep_length

        normalized = (current - shortest) / day_length_range
        normalized = min(max(normalized, 0.0), 1.0)

        return self.max_sleep - normalized * (self.max_sleep - self.min_sleep)


def estimate_sleep_hours(
    solar_time_provider: SolarTimeProviderProtocol,
    date: Date,
    latitude: float,
    longitude: float,
    bad_sleep_minutes: float = 0,
) -> float:
    """Shortcut for a default-parameter estimator."""
    return SleepDurationEstimator(solar_time_provider).estimate_sleep_hours(
        date, latitude, longitude, bad_sleep_minutes=bad_sleep_minutes
    )
