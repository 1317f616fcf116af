"""
Adapters layer - External integrations (astral solar times, iCalendar export).
"""

from .ics_exporter import IcsExporter, export_file_name
from .solar_times import AstralSolarTimeProvider

__all__ = ["AstralSolarTimeProvider", "IcsExporter", "export_file_name"]
