"""
Mapping of a derived schedule onto exportable calendar events.

The table is fixed so exported calendars stay comparable between runs.
"""

from typing import List

from .models import CalendarEvent, DerivedSchedule, TimeRange, shift_minutes

MEAL_REMINDER_MINUTES = 30
DINNER_REMINDER_TEXT = "Stop the work and relax!"
PEAK_HOUR_MINUTES = 60


def _block(title: str, start, minutes: float, **alarm) -> CalendarEvent:
    return CalendarEvent(
        title=title,
        time_range=TimeRange(start=start, end=shift_minutes(start, minutes)),
        **alarm,
    )


def build_calendar_events(schedule: DerivedSchedule) -> List[CalendarEvent]:
    """
    Build the calendar events for a schedule.

    | Title               | Start                 | Length            | Reminder   |
    | Breakfast           | breakfast             | 30 min            | -          |
    | Lunch               | lunch                 | 60 min            | 30 min     |
    | Dinner              | dinner                | 30 min            | 30 min     |
    | Wind Down           | wind-down             | until sleep start | -          |
    | Morning peak hour   | morning peak - 30 min | 60 min            | -          |
    | Afternoon peak hour | afternoon peak - 30   | 60 min            | -          |
    """
    half_peak = PEAK_HOUR_MINUTES / 2

    return [
        _block("Breakfast", schedule.breakfast_time, 30),
        _block(
            "Lunch",
            schedule.lunch_time,
            60,
            alarm_minutes_before=MEAL_REMINDER_MINUTES,
        ),
        _block(
            "Dinner",
            schedule.dinner_time,
            30,
            alarm_minutes_before=MEAL_REMINDER_MINUTES,
            alarm_description=DINNER_REMINDER_TEXT,
        ),
        CalendarEvent(title="Wind Down", time_range=schedule.wind_down_window),
        _block(
            "Morning peak hour",
            shift_minutes(schedule.morning_peak, -half_peak),
            PEAK_HOUR_MINUTES,
        ),
        _block(
            "Afternoon peak hour",
            shift_minutes(schedule.afternoon_peak, -half_peak),
            PEAK_HOUR_MINUTES,
        ),
    ]
