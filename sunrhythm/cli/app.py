"""
Main CLI application using Typer.
"""

import logging
import os
from pathlib import Path
from typing import Annotated, List, Optional, Tuple

import pendulum
import typer
from pendulum import DateTime
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.ics_exporter import IcsExporter, export_file_name
from ..adapters.solar_times import AstralSolarTimeProvider
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import ScheduleError
from ..domain.models import SolarTimes
from ..services.schedule_planner import DailyPlan, SchedulePlannerService

app = typer.Typer(
    name="sunrhythm",
    help="Derive a daily schedule from sunrise, sunset and your sleep needs",
    add_completion=False
)

console = Console()

DISPLAY_FORMAT = "YYYY-MM-DD HH:mm"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    if config_file is not None and not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")
    return AppConfig.load(config_path, os.environ)


def _resolve_date(date_option: Optional[str], tz: str):
    """Parse --date or fall back to today in the configured timezone."""
    if not date_option:
        return pendulum.today(tz).date()
    try:
        return pendulum.from_format(date_option, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Invalid date {escape(repr(date_option))}: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _fmt(instant: DateTime, tz: str) -> str:
    return instant.in_timezone(tz).format(DISPLAY_FORMAT)


def format_sleep_duration(hours: float) -> str:
    """Render fractional hours as 'H hours M minutes'."""
    whole_hours, minutes = divmod(round(hours * 60), 60)
    return f"{whole_hours} hours {minutes} minutes"


def _section(title: str, rows: List[Tuple[str, str]]) -> Table:
    table = Table(title=title, show_header=False, title_justify="left", title_style="bold cyan")
    table.add_column("What", style="bold yellow")
    table.add_column("When")
    for label, value in rows:
        table.add_row(label, value)
    return table


def _solar_rows(times: SolarTimes, tz: str, labels: Optional[List[str]] = None) -> List[Tuple[str, str]]:
    return [
        (label, _fmt(instant, tz))
        for label, instant in times.labelled()
        if labels is None or label in labels
    ]


def _render_plan(plan: DailyPlan, tz: str) -> None:
    schedule = plan.schedule
    config = plan.config

    console.print(_section("☀️  Sun", _solar_rows(plan.today, tz)))
    console.print(_section("🌅 Next day", _solar_rows(plan.tomorrow, tz, ["Dawn (civil)", "Sunrise"])))

    sleep_rows = [("Current wake-up time", _fmt(schedule.wake_up_time, tz))]
    if config.bad_sleep_minutes:
        sleep_rows.append(("Bad sleep compensation", f"{config.bad_sleep_minutes:g} minutes"))
    sleep_rows += [
        ("Required sleep today", format_sleep_duration(schedule.required_sleep_minutes / 60)),
        ("Wind down", _fmt(schedule.wind_down_time, tz)),
        ("Sleep start", _fmt(schedule.sleep_start_time, tz)),
        ("Next wake-up", _fmt(schedule.next_wake_up_time, tz)),
    ]
    console.print(_section("😴 Sleep", sleep_rows))

    console.print(_section("🍽️  Meals", [
        ("Breakfast", _fmt(schedule.breakfast_time, tz)),
        ("Mid-morning snack", _fmt(schedule.mid_morning_snack_time, tz)),
        ("Lunch", _fmt(schedule.lunch_time, tz)),
        ("Afternoon snack", _fmt(schedule.afternoon_snack_time, tz)),
        ("Dinner", _fmt(schedule.dinner_time, tz)),
    ]))

    console.print(_section("🧠 Peaks", [
        ("Morning peak", _fmt(schedule.morning_peak, tz)),
        ("Power nap", _fmt(schedule.power_nap_time, tz)),
        ("Afternoon peak", _fmt(schedule.afternoon_peak, tz)),
    ]))

    console.print(_section(f"💼 Work windows ({config.working_hours:g} h)", [
        ("Morning", schedule.morning_work_window.format_in(tz)),
        ("Afternoon", schedule.afternoon_work_window.format_in(tz)),
    ]))

    if schedule.constraints_applied:
        console.print(f"[dim]Sleep window adjusted by: {', '.join(schedule.constraints_applied)}[/dim]")


@app.command()
def plan(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    date: Annotated[Optional[str], typer.Option("--date", help="Date to plan (YYYY-MM-DD). Defaults to today.")] = None,
    export: Annotated[bool, typer.Option("--export/--no-export", help="Write the schedule as an .ics file.")] = True,
    export_dir: Annotated[Optional[Path], typer.Option("--export-dir", help="Directory for the .ics file.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Derive today's schedule and optionally export it as iCalendar.

    Examples:

        sunrhythm plan
        sunrhythm plan --date 2025-03-20 --no-export
        sunrhythm plan -c ~/sunrhythm.yaml --export-dir ~/calendars
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        tz = config.timezone
        plan_date = _resolve_date(date, tz)

        console.print("\n" + "="*60)
        console.print(f"[bold cyan]🗓️  sunrhythm - schedule for {plan_date.isoformat()}[/bold cyan]")
        console.print("="*60 + "\n")

        service = SchedulePlannerService(AstralSolarTimeProvider(timezone=tz))
        daily_plan = service.plan_day(
            date=plan_date,
            latitude=config.latitude,
            longitude=config.longitude,
            config=config.to_schedule_config(),
        )

        _render_plan(daily_plan, tz)

        if export:
            events = daily_plan.calendar_events()
            target = (export_dir or config.export_dir) / export_file_name(plan_date)
            IcsExporter().export(events, target)
            console.print(f"\n[bold green]✓ {target} saved with {len(events)} events[/bold green]")

        console.print()

    except (ScheduleError, ValidationError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def sun(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
    date: Annotated[Optional[str], typer.Option("--date", help="Date (YYYY-MM-DD). Defaults to today.")] = None,
):
    """
    Show civil dawn, sunrise, solar noon, sunset and civil dusk.
    """
    try:
        config = _load_config(config_file)
        tz = config.timezone
        day = _resolve_date(date, tz)

        times = AstralSolarTimeProvider(timezone=tz).get_solar_times(
            day, config.latitude, config.longitude
        )

        table = Table(
            title=f"Sun times {day.isoformat()} ({tz})",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Event", style="bold yellow")
        table.add_column("Time", style="dim")
        for label, value in _solar_rows(times, tz):
            table.add_row(label, value)

        console.print()
        console.print(table)
        console.print(f"Day length: {times.day_length_hours:.2f} h\n")

    except (ScheduleError, ValidationError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]sunrhythm[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
