"""
Tests for the calendar event table and iCalendar export.
"""

from datetime import datetime, timedelta, timezone

import pytest
from icalendar import Calendar

from helpers import DAY, at
from sunrhythm.adapters.ics_exporter import IcsExporter, export_file_name
from sunrhythm.domain.calendar_events import build_calendar_events
from sunrhythm.domain.models import ScheduleConfig
from sunrhythm.domain.schedule_engine import derive_schedule


@pytest.fixture
def schedule(today, tomorrow):
    return derive_schedule(today, tomorrow, 7.8, ScheduleConfig(current_wake_up_time="06:00"))


@pytest.fixture
def events(schedule):
    return build_calendar_events(schedule)


class TestCalendarEvents:
    """The fixed export table."""

    def test_titles_in_order(self, events):
        assert [event.title for event in events] == [
            "Breakfast",
            "Lunch",
            "Dinner",
            "Wind Down",
            "Morning peak hour",
            "Afternoon peak hour",
        ]

    def test_durations(self, events):
        assert [event.time_range.duration_minutes() for event in events] == [30, 60, 30, 60, 60, 60]

    def test_meal_starts(self, events, schedule):
        breakfast, lunch, dinner = events[:3]

        assert breakfast.time_range.start == schedule.breakfast_time
        assert lunch.time_range.start == schedule.lunch_time
        assert dinner.time_range.start == schedule.dinner_time

    def test_reminders(self, events):
        breakfast, lunch, dinner = events[:3]

        assert breakfast.alarm_minutes_before is None
        assert lunch.alarm_minutes_before == 30
        assert lunch.alarm_description is None
        assert dinner.alarm_minutes_before == 30
        assert dinner.alarm_description == "Stop the work and relax!"
        assert all(event.alarm_minutes_before is None for event in events[3:])

    def test_wind_down_runs_until_sleep(self, events, schedule):
        wind_down = events[3]

        assert wind_down.time_range.start == schedule.wind_down_time
        assert wind_down.time_range.end == schedule.sleep_start_time

    def test_peak_hours_centred_on_peaks(self, events, schedule):
        morning, afternoon = events[4:]

        assert morning.time_range.start == schedule.morning_peak.subtract(minutes=30)
        assert afternoon.time_range.end == schedule.afternoon_peak.add(minutes=30)

    def test_format_display(self, events):
        assert events[0].format_display("UTC") == "Breakfast | 2025-03-20 06:45 – 07:15 (30 min)"


class TestIcsExporter:
    """iCalendar serialization."""

    STAMP = datetime(2025, 3, 19, 12, 0, tzinfo=timezone.utc)

    def test_one_vevent_per_event(self, events):
        calendar = Calendar.from_ical(IcsExporter(generated_at=self.STAMP).to_ics(events))

        vevents = calendar.walk("VEVENT")

        assert [str(event["SUMMARY"]) for event in vevents] == [event.title for event in events]

    def test_instants_written_in_utc(self, events):
        calendar = Calendar.from_ical(IcsExporter(generated_at=self.STAMP).to_ics(events))

        breakfast = calendar.walk("VEVENT")[0]

        assert breakfast.decoded("DTSTART") == datetime(2025, 3, 20, 6, 45, tzinfo=timezone.utc)
        assert breakfast.decoded("DTEND") == datetime(2025, 3, 20, 7, 15, tzinfo=timezone.utc)

    def test_alarms(self, events):
        calendar = Calendar.from_ical(IcsExporter(generated_at=self.STAMP).to_ics(events))
        vevents = {str(event["SUMMARY"]): event for event in calendar.walk("VEVENT")}

        assert vevents["Breakfast"].walk("VALARM") == []

        lunch_alarm = vevents["Lunch"].walk("VALARM")[0]
        assert str(lunch_alarm["ACTION"]) == "DISPLAY"
        assert lunch_alarm.decoded("TRIGGER") == timedelta(minutes=-30)

        dinner_alarm = vevents["Dinner"].walk("VALARM")[0]
        assert str(dinner_alarm["DESCRIPTION"]) == "Stop the work and relax!"

    def test_uids_are_unique_and_stable(self, events):
        exporter = IcsExporter(generated_at=self.STAMP)

        assert exporter.to_ics(events) == exporter.to_ics(events)
        uids = [str(event["UID"]) for event in Calendar.from_ical(exporter.to_ics(events)).walk("VEVENT")]
        assert len(set(uids)) == len(uids)
        assert uids[0] == "breakfast-20250320T064500Z@sunrhythm"

    def test_export_writes_file(self, events, tmp_path):
        target = tmp_path / "nested" / export_file_name(DAY)

        written = IcsExporter(generated_at=self.STAMP).export(events, target)

        assert written == target
        assert target.name == "schedule-2025-03-20.ics"
        assert target.read_bytes().startswith(b"BEGIN:VCALENDAR")
