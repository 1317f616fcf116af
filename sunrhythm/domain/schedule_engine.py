"""
Core business logic for deriving a daily schedule from solar times.

Pure domain logic: no I/O, no clock access, no shared state. Every step
consumes only the inputs or the immutable records produced by earlier steps.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional, Protocol, Tuple

from pendulum import DateTime

from .models import (
    DerivedSchedule,
    ScheduleConfig,
    SleepWindow,
    SolarTimes,
    midpoint,
    shift_minutes,
)
from .time_parsing import date_from_time_string

logger = logging.getLogger(__name__)

POWER_NAP_AFTER_LUNCH_MINUTES = 30


class SleepConstraint(Protocol):
    """A single step of the sleep window clamp chain."""

    name: str

    def apply(self, window: SleepWindow, required_minutes: float) -> SleepWindow:
        """Return the window unchanged or moved to satisfy the constraint."""


@dataclass(frozen=True)
class DuskFloor:
    """Sleep cannot begin before civil dusk; the window shifts later."""
    dusk: DateTime
    name: str = "dusk_floor"

    def apply(self, window: SleepWindow, required_minutes: float) -> SleepWindow:
        if window.sleep_start < self.dusk:
            return SleepWindow.starting_at(
                self.dusk, required_minutes, window.applied + (self.name,)
            )
        return window


@dataclass(frozen=True)
class EarliestWakeUp:
    """Wake-up is snapped up to a lower bound on the following day."""
    bound: DateTime
    name: str = "earliest_wake_up"

    def apply(self, window: SleepWindow, required_minutes: float) -> SleepWindow:
        if window.wake_up < self.bound:
            return SleepWindow.ending_at(
                self.bound, required_minutes, window.applied + (self.name,)
            )
        return window


@dataclass(frozen=True)
class LatestWakeUp:
    """Wake-up is snapped down to an upper bound on the following day."""
    bound: DateTime
    name: str = "latest_wake_up"

    def apply(self, window: SleepWindow, required_minutes: float) -> SleepWindow:
        if window.wake_up > self.bound:
            return SleepWindow.ending_at(
                self.bound, required_minutes, window.applied + (self.name,)
            )
        return window


@dataclass(frozen=True)
class MealTimes:
    breakfast: DateTime
    mid_morning_snack: DateTime
    lunch: DateTime
    afternoon_snack: DateTime
    dinner: DateTime


@dataclass(frozen=True)
class PeakTimes:
    morning_peak: DateTime
    power_nap: DateTime
    afternoon_peak: DateTime


@dataclass(frozen=True)
class WorkWindows:
    morning_start: DateTime
    morning_end: DateTime
    afternoon_start: DateTime
    afternoon_end: DateTime


def build_sleep_constraints(today: SolarTimes, config: ScheduleConfig) -> List[SleepConstraint]:
    """
    Build the ordered clamp chain: dusk floor, earliest wake-up, latest wake-up.

    Later constraints may override earlier ones.
    """
    constraints: List[SleepConstraint] = [DuskFloor(dusk=today.dusk)]
    next_day = today.date + timedelta(days=1)

    if config.next_wake_up_earliest_time:
        constraints.append(
            EarliestWakeUp(
                bound=date_from_time_string(
                    next_day, config.next_wake_up_earliest_time, config.timezone
                )
            )
        )

    if config.next_wake_up_latest_time:
        constraints.append(
            LatestWakeUp(
                bound=date_from_time_string(
                    next_day, config.next_wake_up_latest_time, config.timezone
                )
            )
        )

    return constraints


class ScheduleEngine:
    """
    Derives the schedule for one day.

    Steps:
    1. Anchor today's wake-up time
    2. Place the sleep window before tomorrow's dawn, then run the clamp chain
    3. Wind-down, meals, peaks and work windows follow from the sleep window
    """

    def derive_schedule(
        self,
        today: SolarTimes,
        tomorrow: SolarTimes,
        sleep_hours: float,
        config: ScheduleConfig,
    ) -> DerivedSchedule:
        """
        Derive the full schedule.

        Raises:
            MalformedTimeStringError: If a configured time string is invalid
        """
        wake_up = date_from_time_string(today.date, config.current_wake_up_time, config.timezone)
        required_minutes = sleep_hours * 60 + config.bad_sleep_minutes

        window = self.resolve_sleep_window(today, tomorrow, required_minutes, config)
        wind_down = shift_minutes(window.sleep_start, -config.wind_down_before_sleep_minutes)

        meals = self._derive_meals(today, wake_up, window.sleep_start, config)
        peaks = self._derive_peaks(wake_up, meals.lunch, wind_down)
        work = self._derive_work_windows(wake_up, peaks, wind_down, config.working_hours)

        return DerivedSchedule(
            wake_up_time=wake_up,
            next_wake_up_time=window.wake_up,
            sleep_start_time=window.sleep_start,
            wind_down_time=wind_down,
            breakfast_time=meals.breakfast,
            mid_morning_snack_time=meals.mid_morning_snack,
            lunch_time=meals.lunch,
            afternoon_snack_time=meals.afternoon_snack,
            dinner_time=meals.dinner,
            morning_peak=peaks.morning_peak,
            power_nap_time=peaks.power_nap,
            afternoon_peak=peaks.afternoon_peak,
            morning_work_start=work.morning_start,
            morning_work_end=work.morning_end,
            afternoon_work_start=work.afternoon_start,
            afternoon_work_end=work.afternoon_end,
            required_sleep_minutes=required_minutes,
            constraints_applied=window.applied,
        )

    def resolve_sleep_window(
        self,
        today: SolarTimes,
        tomorrow: SolarTimes,
        required_minutes: float,
        config: ScheduleConfig,
        constraints: Optional[List[SleepConstraint]] = None,
    ) -> SleepWindow:
        """Place the sleep window ending at tomorrow's dawn and apply each constraint in order."""
        window = SleepWindow.ending_at(tomorrow.dawn, required_minutes)

        if constraints is None:
            constraints = build_sleep_constraints(today, config)

        for constraint in constraints:
            clamped = constraint.apply(window, required_minutes)
            if clamped is not window:
                logger.debug(
                    "%s moved sleep window to %s - %s",
                    constraint.name,
                    clamped.sleep_start,
                    clamped.wake_up,
                )
            window = clamped

        return window

    def _derive_meals(
        self,
        today: SolarTimes,
        wake_up: DateTime,
        sleep_start: DateTime,
        config: ScheduleConfig,
    ) -> MealTimes:
        breakfast = shift_minutes(wake_up, config.breakfast_after_wake_up_minutes)
        dinner = shift_minutes(sleep_start, -config.dinner_before_sleep_minutes)
        # Pulled toward solar noon while still respecting meal spacing.
        lunch = midpoint(today.solar_noon, midpoint(breakfast, dinner))

        return MealTimes(
            breakfast=breakfast,
            mid_morning_snack=midpoint(breakfast, lunch),
            lunch=lunch,
            afternoon_snack=midpoint(lunch, dinner),
            dinner=dinner,
        )

    def _derive_peaks(self, wake_up: DateTime, lunch: DateTime, wind_down: DateTime) -> PeakTimes:
        power_nap = shift_minutes(lunch, POWER_NAP_AFTER_LUNCH_MINUTES)
        return PeakTimes(
            morning_peak=midpoint(wake_up, power_nap),
            power_nap=power_nap,
            afternoon_peak=midpoint(power_nap, wind_down),
        )

    def _derive_work_windows(
        self,
        wake_up: DateTime,
        peaks: PeakTimes,
        wind_down: DateTime,
        working_hours: float,
    ) -> WorkWindows:
        morning_hours, afternoon_hours = self.split_working_hours(
            morning_span=peaks.power_nap.timestamp() - wake_up.timestamp(),
            afternoon_span=wind_down.timestamp() - peaks.power_nap.timestamp(),
            working_hours=working_hours,
        )

        morning_half = morning_hours / 2 * 60
        afternoon_half = afternoon_hours / 2 * 60

        return WorkWindows(
            morning_start=shift_minutes(peaks.morning_peak, -morning_half),
            morning_end=shift_minutes(peaks.morning_peak, morning_half),
            afternoon_start=shift_minutes(peaks.afternoon_peak, -afternoon_half),
            afternoon_end=shift_minutes(peaks.afternoon_peak, afternoon_half),
        )

    @staticmethod
    def split_working_hours(
        morning_span: float, afternoon_span: float, working_hours: float
    ) -> Tuple[float, float]:
        """
        Split working hours proportionally to the available morning and afternoon spans.

        Falls back to an even split when the combined span is not positive.
        """
        total_span = morning_span + afternoon_span
        if total_span <= 0:
            logger.warning(
                "Combined work span is %.0f s; splitting %.2f working hours evenly",
                total_span,
                working_hours,
            )
            morning_hours = working_hours / 2
        else:
            morning_hours = working_hours * morning_span / total_span

        return morning_hours, working_hours - morning_hours


def derive_schedule(
    today: SolarTimes,
    tomorrow: SolarTimes,
    sleep_hours: float,
    config: ScheduleConfig,
) -> DerivedSchedule:
    """Derive a schedule with the default engine."""
    return ScheduleEngine().derive_schedule(today, tomorrow, sleep_hours, config)
