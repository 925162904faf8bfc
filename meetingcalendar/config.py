"""
Configuration management using Pydantic models loaded from YAML.

The configuration plays the role of a calendar builder: it holds plain,
validated records for every person and turns them into immutable
``PersonalCalendar`` values on demand.
"""

from datetime import datetime, time
from pathlib import Path
from typing import List, Optional, Sequence, Union

import pendulum
import yaml
from pendulum import DateTime
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.calendar import PersonalCalendar
from .domain.exceptions import ConfigurationError, InvalidInterval
from .domain.models import ALL_SLOTS, MeetingQuery, TimeRange, WorkingHours


def parse_instant(value: Union[str, datetime], timezone: str) -> DateTime:
    """
    Parse a configured instant into a pendulum DateTime in the given timezone.

    Raises:
        ConfigurationError: If the value is not a date-time
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return pendulum.instance(value, tz=timezone)
        return pendulum.instance(value).in_timezone(timezone)

    try:
        parsed = pendulum.parse(value, tz=timezone)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid date-time '{value}': {exc}") from exc

    if not isinstance(parsed, DateTime):
        raise ConfigurationError(f"Expected a date-time, got '{value}'")
    return parsed


class DefaultsConfig(BaseModel):
    """Default settings for search."""
    duration_minutes: int = 30
    max_results: Optional[int] = None  # None: all slots
    search_days: int = 7
    max_workers: Optional[int] = None

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure meeting duration is not negative (zero means any duration)."""
        if value < 0:
            raise ValueError("duration_minutes must not be negative")
        return value

    @field_validator("search_days")
    @classmethod
    def validate_search_days(cls, value: int) -> int:
        """Ensure the default search period is not empty."""
        if value <= 0:
            raise ValueError("search_days must be greater than zero")
        return value

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, value: Optional[int]) -> Optional[int]:
        """Ensure the worker pool has at least one thread."""
        if value is not None and value < 1:
            raise ValueError("max_workers must be at least 1")
        return value


class WorkingHoursConfig(BaseModel):
    """Daily working hours as 'HH:MM' strings."""
    start: time = time(9, 0)
    stop: time = time(17, 0)

    @field_validator("start", "stop", mode="before")
    @classmethod
    def reject_sexagesimal(cls, value):
        """Unquoted 17:00 is read by YAML as a base-60 integer."""
        if isinstance(value, int):
            raise ValueError("times must be quoted strings like '17:00'")
        return value

    def to_working_hours(self) -> WorkingHours:
        """Convert to the domain model."""
        return WorkingHours(start_time=self.start, end_time=self.stop)


class BookingConfig(BaseModel):
    """An already booked period of a person."""
    start: Union[datetime, str]
    end: Union[datetime, str]
    title: str = ""

    def to_time_range(self, timezone: str) -> TimeRange:
        """
        Convert to a time range in the given timezone.

        Raises:
            ConfigurationError: If the booking has no positive duration
        """
        start = parse_instant(self.start, timezone)
        end = parse_instant(self.end, timezone)
        try:
            return TimeRange(start=start, end=end)
        except InvalidInterval as exc:
            label = f" '{self.title}'" if self.title else ""
            raise ConfigurationError(f"Invalid booking{label}: {exc}") from exc


class PersonConfig(BaseModel):
    """A person whose calendar takes part in the search."""
    name: str
    working: WorkingHoursConfig = Field(default_factory=WorkingHoursConfig)
    busy: List[BookingConfig] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Names are used as aliases on the command line."""
        value = value.strip()
        if not value:
            raise ValueError("Person name must not be empty")
        return value

    def to_calendar(self, timezone: str) -> PersonalCalendar:
        """Build the immutable personal calendar for this person."""
        return PersonalCalendar.create(
            name=self.name,
            working_hours=self.working.to_working_hours(),
            booked=[booking.to_time_range(timezone) for booking in self.busy]
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Berlin"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    people: List[PersonConfig] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("people")
    @classmethod
    def validate_people(cls, value: List[PersonConfig]) -> List[PersonConfig]:
        """Ensure person names are unique."""
        seen_names: set[str] = set()
        for person in value:
            name_key = person.name.lower()
            if name_key in seen_names:
                raise ValueError(f"Duplicate person name detected: {person.name}")
            seen_names.add(name_key)
        return value

    @model_validator(mode="after")
    def validate_bookings(self) -> "AppConfig":
        """Ensure every booking can be read in the configured timezone."""
        for person in self.people:
            for booking in person.busy:
                booking.to_time_range(self.timezone)
        return self

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
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def find_person_by_name(self, name: str) -> PersonConfig | None:
        """Find a person by their name (case-insensitive)."""
        for person in self.people:
            if person.name.lower() == name.lower():
                return person
        return None

    def resolve_people(self, names: Sequence[str]) -> List[PersonConfig]:
        """
        Resolve person names, ensuring uniqueness.

        Args:
            names: Names to look up; an empty selection means everybody

        Returns:
            List of unique person configurations in the requested order

        Raises:
            ConfigurationError: If any name is unknown
        """
        if not names:
            return list(self.people)

        resolved: List[PersonConfig] = []
        unknown_names: List[str] = []

        for name in names:
            person = self.find_person_by_name(name)
            if person is None:
                unknown_names.append(name)
                continue

            if person not in resolved:
                resolved.append(person)

        if unknown_names:
            missing = ", ".join(sorted(set(unknown_names)))
            raise ConfigurationError(
                f"Unknown person name(s): {missing}. "
                "Ensure they exist in the configuration."
            )

        return resolved

    def build_calendars(self, names: Sequence[str] = ()) -> List[PersonalCalendar]:
        """Build personal calendars for the selected people."""
        return [person.to_calendar(self.timezone) for person in self.resolve_people(names)]

    def build_query(
        self,
        start: DateTime,
        end: DateTime,
        *,
        duration_minutes: Optional[int] = None,
        max_results: Optional[int] = None
    ) -> MeetingQuery:
        """Build a meeting query, falling back to the configured defaults."""
        minutes = duration_minutes if duration_minutes is not None else self.defaults.duration_minutes
        if minutes < 0:
            raise ConfigurationError("Meeting duration must not be negative")

        limit = max_results if max_results is not None else self.defaults.max_results

        return MeetingQuery.between(
            start,
            end,
            min_duration=pendulum.duration(minutes=minutes),
            max_results=ALL_SLOTS if limit is None else limit
        )


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
