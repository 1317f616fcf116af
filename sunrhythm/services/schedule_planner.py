"""
Application service for planning a single day.

The service fetches solar times via a provider adapter and delegates the
actual computation to the domain-level ``SleepDurationEstimator`` and
``ScheduleEngine``. This keeps the CLI thin and lets tests swap in a stub
provider through a simple protocol.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date as Date, timedelta
from typing import List, Optional

from ..domain.calendar_events import build_calendar_events
from ..domain.models import CalendarEvent, DerivedSchedule, ScheduleConfig, SolarTimes
from ..domain.schedule_engine import ScheduleEngine
from ..domain.sleep_duration import SleepDurationEstimator, SolarTimeProviderProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyPlan:
    """Everything computed for one date, kept together for display and export."""
    date: Date
    latitude: float
    longitude: float
    today: SolarTimes
    tomorrow: SolarTimes
    sleep_hours: float
    config: ScheduleConfig
    schedule: DerivedSchedule

    def calendar_events(self) -> List[CalendarEvent]:
        return build_calendar_events(self.schedule)


class SchedulePlannerService:
    """
    Orchestrates solar time lookup, sleep estimation and schedule derivation.
    """

    def __init__(
        self,
        solar_time_provider: SolarTimeProviderProtocol,
        sleep_estimator: Optional[SleepDurationEstimator] = None,
        schedule_engine: Optional[ScheduleEngine] = None,
    ) -> None:
        self._solar_time_provider = solar_time_provider
        self._sleep_estimator = sleep_estimator or SleepDurationEstimator(solar_time_provider)
        self._schedule_engine = schedule_engine or ScheduleEngine()

    def plan_day(
        self,
        *,
        date: Date,
        latitude: float,
        longitude: float,
        config: ScheduleConfig,
    ) -> DailyPlan:
        """
        Compute the plan for ``date``.

        Raises:
            SolarTimesUnavailableError: If solar times cannot be computed
            MalformedTimeStringError: If a configured time string is invalid
        """
        today = self._solar_time_provider.get_solar_times(date, latitude, longitude)
        tomorrow = self._solar_time_provider.get_solar_times(
            date + timedelta(days=1), latitude, longitude
        )

        sleep_hours = self._sleep_estimator.estimate_sleep_hours(date, latitude, longitude)
        logger.debug("Estimated %.3f h of sleep for %s", sleep_hours, date)

        schedule = self._schedule_engine.derive_schedule(today, tomorrow, sleep_hours, config)

        return DailyPlan(
            date=date,
            latitude=latitude,
            longitude=longitude,
            today=today,
            tomorrow=tomorrow,
            sleep_hours=sleep_hours,
            config=config,
            schedule=schedule,
        )
