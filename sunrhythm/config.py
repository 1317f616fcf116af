"""
Configuration management using Pydantic models, YAML files and environment variables.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import MissingCoordinatesError
from .domain.models import ScheduleConfig
from .domain.time_parsing import parse_time_of_day

# Environment variable -> (section, field); section None means top level.
ENVIRONMENT_VARIABLES = {
    "LATITUDE": (None, "latitude"),
    "LONGITUDE": (None, "longitude"),
    "TIME_ZONE": (None, "timezone"),
    "EXPORT_DIR": (None, "export_dir"),
    "CURRENT_WAKE_UP_TIME": ("schedule", "current_wake_up_time"),
    "NEXT_WAKE_UP_EARLIEST_TIME": ("schedule", "next_wake_up_earliest_time"),
    "NEXT_WAKE_UP_LATEST_TIME": ("schedule", "next_wake_up_latest_time"),
    "BAD_SLEEP_MINUTES": ("schedule", "bad_sleep_minutes"),
    "WIND_DOWN_BEFORE_SLEEP_MINUTES": ("schedule", "wind_down_before_sleep_minutes"),
    "BREAKFAST_AFTER_WAKE_UP_MINUTES": ("schedule", "breakfast_after_wake_up_minutes"),
    "DINNER_BEFORE_SLEEP_MINUTES": ("schedule", "dinner_before_sleep_minutes"),
    "WORKING_HOURS": ("schedule", "working_hours"),
}


class ScheduleSettings(BaseModel):
    """Personal preferences for the derived schedule."""
    current_wake_up_time: str
    next_wake_up_earliest_time: Optional[str] = None
    next_wake_up_latest_time: Optional[str] = None
    bad_sleep_minutes: float = Field(default=0, ge=0)
    wind_down_before_sleep_minutes: float = Field(default=60, ge=0)
    breakfast_after_wake_up_minutes: float = Field(default=45, ge=0)
    dinner_before_sleep_minutes: float = Field(default=180, ge=0)
    working_hours: float = Field(default=8, ge=0, le=24)

    @field_validator("next_wake_up_earliest_time", "next_wake_up_latest_time", mode="before")
    @classmethod
    def empty_as_unset(cls, value: Any) -> Any:
        """Treat empty strings (e.g. an exported but blank variable) as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator(
        "current_wake_up_time", "next_wake_up_earliest_time", "next_wake_up_latest_time"
    )
    @classmethod
    def validate_time_of_day(cls, value: Optional[str]) -> Optional[str]:
        """Ensure time strings follow HH:MM[:SS]."""
        if value is not None:
            parse_time_of_day(value)
        return value

    @model_validator(mode="after")
    def validate_wake_up_bounds(self) -> "ScheduleSettings":
        """Reject an earliest wake-up bound that is later than the latest one."""
        if self.next_wake_up_earliest_time and self.next_wake_up_latest_time:
            earliest = parse_time_of_day(self.next_wake_up_earliest_time)
            latest = parse_time_of_day(self.next_wake_up_latest_time)
            if earliest > latest:
                raise ValueError(
                    "next_wake_up_earliest_time must not be later than next_wake_up_latest_time"
                )
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    timezone: str = "UTC"
    schedule: ScheduleSettings
    export_dir: Path = Path("exports")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    def to_schedule_config(self) -> ScheduleConfig:
        """Build the core configuration consumed by the schedule engine."""
        return ScheduleConfig(timezone=self.timezone, **self.schedule.model_dump())

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AppConfig":
        """
        Validate a raw configuration mapping.

        Raises:
            MissingCoordinatesError: If latitude or longitude is missing
            ValidationError: If any other value is invalid
        """
        missing = [key for key in ("latitude", "longitude") if data.get(key) in (None, "")]
        if missing:
            raise MissingCoordinatesError(
                f"Missing coordinates: {', '.join(missing)}. "
                "Set them in config.yaml or via LATITUDE and LONGITUDE."
            )

        for key in ("latitude", "longitude"):
            try:
                float(data[key])
            except (TypeError, ValueError) as exc:
                raise MissingCoordinatesError(
                    f"{key} must be a number, got {data[key]!r}"
                ) from exc

        return cls(**data)

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        return cls.from_mapping(_read_yaml(config_path))

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str],
        base: Optional[Mapping[str, Any]] = None,
    ) -> "AppConfig":
        """
        Build configuration from environment variables layered over ``base``.

        Raises:
            MissingCoordinatesError: If coordinates are absent or not numeric
        """
        data = _merge_environment(dict(base or {}), environ)
        return cls.from_mapping(data)

    @classmethod
    def load(cls, config_path: Optional[Path], environ: Mapping[str, str]) -> "AppConfig":
        """
        Load the YAML file when it exists and apply environment overrides.
        """
        base: Dict[str, Any] = {}
        if config_path is not None and config_path.exists():
            base = _read_yaml(config_path)
        return cls.from_environment(environ, base=base)


def _read_yaml(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            f"Please create a config.yaml file. See config.example.yaml for reference."
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the root level.")

    return data


def _merge_environment(data: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    schedule = dict(data.get("schedule") or {})

    for variable, (section, field) in ENVIRONMENT_VARIABLES.items():
        value = environ.get(variable)
        if value is None or value == "":
            continue
        if section == "schedule":
            schedule[field] = value
        else:
            data[field] = value

    if schedule:
        data["schedule"] = schedule
    return data


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
