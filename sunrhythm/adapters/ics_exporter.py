"""
iCalendar export of schedule events.
"""

from __future__ import annotations

import logging
import re
from datetime import date as Date, datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Sequence

from icalendar import Alarm, Calendar, Event
from pendulum import DateTime

from ..domain.models import CalendarEvent

logger = logging.getLogger(__name__)

PRODUCT_ID = "-//sunrhythm//daily schedule//EN"


def _utc(instant: DateTime) -> datetime:
    return datetime.fromtimestamp(instant.timestamp(), tz=timezone.utc)


def _uid(event: CalendarEvent) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", event.title.lower()).strip("-")
    return f"{slug}-{_utc(event.time_range.start):%Y%m%dT%H%M%SZ}@sunrhythm"


def export_file_name(schedule_date: Date) -> str:
    """File name used for a day's export, e.g. ``schedule-2025-03-20.ics``."""
    return f"schedule-{schedule_date.isoformat()}.ics"


class IcsExporter:
    """
    Serializes calendar events into an iCalendar document.

    Instants are written in UTC; calendar clients render them locally.
    """

    def __init__(self, generated_at: Optional[datetime] = None):
        """
        Args:
            generated_at: DTSTAMP for every event; defaults to the time of export
        """
        self.generated_at = generated_at

    def build_calendar(self, events: Sequence[CalendarEvent]) -> Calendar:
        calendar = Calendar()
        calendar.add("prodid", PRODUCT_ID)
        calendar.add("version", "2.0")

        stamp = self.generated_at or datetime.now(timezone.utc)

        for item in events:
            event = Event()
            event.add("uid", _uid(item))
            event.add("dtstamp", stamp)
            event.add("summary", item.title)
            event.add("dtstart", _utc(item.time_range.start))
            event.add("dtend", _utc(item.time_range.end))

            if item.alarm_minutes_before is not None:
                alarm = Alarm()
                alarm.add("action", "DISPLAY")
                alarm.add("trigger", timedelta(minutes=-item.alarm_minutes_before))
                alarm.add("description", item.alarm_description or item.title)
                event.add_component(alarm)

            calendar.add_component(event)

        return calendar

    def to_ics(self, events: Sequence[CalendarEvent]) -> bytes:
        return self.build_calendar(events).to_ical()

    def export(self, events: Sequence[CalendarEvent], target: Path) -> Path:
        """
        Write events to ``target``, creating parent directories as needed.

        Returns:
            The written path
        """
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as file_handle:
            file_handle.write(self.to_ics(events))

        logger.info("Wrote %d events to %s", len(events), target)
        return target
