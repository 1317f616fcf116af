"""
Tests for the Typer command-line interface.
"""

import pytest
import yaml
from typer.testing import CliRunner

from sunrhythm import __version__
from sunrhythm.cli.app import app, format_sleep_duration
from sunrhythm.config import ENVIRONMENT_VARIABLES

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's environment out of the configuration."""
    for variable in ENVIRONMENT_VARIABLES:
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "latitude": 48.2349,
                "longitude": 16.3240,
                "timezone": "Europe/Vienna",
                "export_dir": str(tmp_path / "exports"),
                "schedule": {"current_wake_up_time": "06:30"},
            }
        ),
        encoding="utf-8",
    )
    return path


def test_plan_prints_schedule_and_exports(config_path, tmp_path):
    result = runner.invoke(app, ["plan", "--config", str(config_path), "--date", "2025-03-20"])

    assert result.exit_code == 0, result.output
    assert "Breakfast" in result.output
    assert "Afternoon peak" in result.output
    assert (tmp_path / "exports" / "schedule-2025-03-20.ics").exists()


def test_plan_with_afternoon_wake_up(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "latitude": 48.2349,
                "longitude": 16.3240,
                "timezone": "Europe/Vienna",
                "export_dir": str(tmp_path / "exports"),
                "schedule": {"current_wake_up_time": "16:00"},
            }
        ),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["plan", "--config", str(path), "--date", "2025-03-20"])

    assert result.exit_code == 0, result.output
    assert "Work windows" in result.output
    assert (tmp_path / "exports" / "schedule-2025-03-20.ics").exists()


def test_plan_without_export(config_path, tmp_path):
    result = runner.invoke(
        app, ["plan", "--config", str(config_path), "--date", "2025-03-20", "--no-export"]
    )

    assert result.exit_code == 0, result.output
    assert not (tmp_path / "exports").exists()


def test_plan_export_dir_option(config_path, tmp_path):
    target_dir = tmp_path / "calendars"

    result = runner.invoke(
        app,
        ["plan", "--config", str(config_path), "--date", "2025-03-20", "--export-dir", str(target_dir)],
    )

    assert result.exit_code == 0, result.output
    assert (target_dir / "schedule-2025-03-20.ics").exists()


def test_plan_uses_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("LATITUDE", "48.2349")
    monkeypatch.setenv("LONGITUDE", "16.3240")
    monkeypatch.setenv("TIME_ZONE", "Europe/Vienna")
    monkeypatch.setenv("CURRENT_WAKE_UP_TIME", "06:30")
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["plan", "--date", "2025-03-20", "--no-export"])

    assert result.exit_code == 0, result.output
    assert "Lunch" in result.output


def test_plan_missing_coordinates(tmp_path, monkeypatch):
    monkeypatch.setenv("CURRENT_WAKE_UP_TIME", "06:30")
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["plan", "--date", "2025-03-20", "--no-export"])

    assert result.exit_code == 1
    assert "Missing coordinates" in result.output


def test_plan_missing_config_file(tmp_path):
    result = runner.invoke(app, ["plan", "--config", str(tmp_path / "absent.yaml")])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_plan_invalid_date(config_path):
    result = runner.invoke(app, ["plan", "--config", str(config_path), "--date", "20.03.2025"])

    assert result.exit_code == 1


def test_plan_polar_location_fails(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "latitude": 69.6496,
                "longitude": 18.9560,
                "timezone": "Europe/Oslo",
                "schedule": {"current_wake_up_time": "06:30"},
            }
        ),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["plan", "--config", str(path), "--date", "2025-06-21", "--no-export"])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_sun_command(config_path):
    result = runner.invoke(app, ["sun", "--config", str(config_path), "--date", "2025-06-21"])

    assert result.exit_code == 0, result.output
    assert "Sunrise" in result.output
    assert "Day length" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.parametrize(
    "hours, expected",
    [
        (7.8, "7 hours 48 minutes"),
        (8.0, "8 hours 0 minutes"),
        (8.25, "8 hours 15 minutes"),
        (7.999, "8 hours 0 minutes"),
    ],
)
def test_format_sleep_duration(hours, expected):
    assert format_sleep_duration(hours) == expected
