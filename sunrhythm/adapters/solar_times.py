"""
Solar time provider backed by the astral library.
"""

from __future__ import annotations

import logging
from datetime import date as Date

from astral import LocationInfo
from astral.sun import sun

from ..domain.exceptions import SolarTimesUnavailableError
from ..domain.models import SolarTimes, to_instant

logger = logging.getLogger(__name__)


class AstralSolarTimeProvider:
    """
    Computes civil dawn, sunrise, solar noon, sunset and civil dusk.

    ``date`` is interpreted as a local calendar date in ``timezone`` so that
    events are taken from the right day for locations far from UTC. Results
    are returned as UTC instants.
    """

    def __init__(self, timezone: str = "UTC"):
        self.timezone = timezone

    def get_solar_times(self, date: Date, latitude: float, longitude: float) -> SolarTimes:
        """
        Raises:
            SolarTimesUnavailableError: If the sun does not reach the civil
                twilight depression or does not rise/set on that date.
        """
        location = LocationInfo(
            name="observer",
            region="",
            timezone=self.timezone,
            latitude=latitude,
            longitude=longitude,
        )
        calendar_date = Date(date.year, date.month, date.day)

        try:
            events = sun(location.observer, date=calendar_date, tzinfo=self.timezone)
        except ValueError as exc:
            raise SolarTimesUnavailableError(
                f"No civil twilight or sunrise/sunset on {calendar_date} at "
                f"({latitude}, {longitude}): {exc}"
            ) from exc

        logger.debug("Solar events for %s at (%s, %s): %s", calendar_date, latitude, longitude, events)

        times = SolarTimes(
            date=calendar_date,
            dawn=to_instant(events["dawn"]),
            sunrise=to_instant(events["sunrise"]),
            solar_noon=to_instant(events["noon"]),
            sunset=to_instant(events["sunset"]),
            dusk=to_instant(events["dusk"]),
        )
        if not times.is_ordered():
            logger.warning(
                "Solar events on %s at (%s, %s) are out of order: %s",
                calendar_date,
                latitude,
                longitude,
                times.labelled(),
            )
        return times
