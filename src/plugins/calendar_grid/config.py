"""Settings loaded from the environment / .env file."""

import os
import logging
from dataclasses import dataclass
from typing import Optional

import pytz
from dotenv import load_dotenv

from .models import LayoutGeometry
from .ui.styles import DEFAULT_END_HOUR, DEFAULT_START_HOUR, WEEK_CELLS_HEIGHT

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_OUTPUT_PATH = "/tmp/calendar.png"


def _env_number(name: str, default: float, cast=float):
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return cast(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}")


@dataclass
class CalendarSettings:
    """Runtime configuration of the calendar grid."""
    api_url: str = DEFAULT_API_URL
    api_token: Optional[str] = None
    timezone_name: str = 'UTC'
    start_hour: float = DEFAULT_START_HOUR
    end_hour: float = DEFAULT_END_HOUR
    hour_height: float = WEEK_CELLS_HEIGHT
    week_starts_on: int = 6
    output_path: str = DEFAULT_OUTPUT_PATH
    request_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> 'CalendarSettings':
        """
        Build settings from environment variables, loading .env first.

        Raises:
            RuntimeError: If a variable holds an invalid value
        """
        load_dotenv()

        settings = cls(
            api_url=os.getenv('CALENDAR_API_URL', DEFAULT_API_URL).rstrip('/'),
            api_token=os.getenv('CALENDAR_API_TOKEN') or None,
            timezone_name=os.getenv('CALENDAR_TIMEZONE', 'UTC'),
            start_hour=_env_number('CALENDAR_START_HOUR', DEFAULT_START_HOUR),
            end_hour=_env_number('CALENDAR_END_HOUR', DEFAULT_END_HOUR),
            hour_height=_env_number('CALENDAR_HOUR_HEIGHT', WEEK_CELLS_HEIGHT),
            week_starts_on=_env_number('CALENDAR_WEEK_STARTS_ON', 6, int),
            output_path=os.getenv('CALENDAR_OUTPUT_PATH', DEFAULT_OUTPUT_PATH),
            request_timeout=_env_number('CALENDAR_REQUEST_TIMEOUT', 10.0),
        )
        settings.validate()
        logger.info(
            f"Loaded calendar settings: api={settings.api_url} tz={settings.timezone_name} "
            f"hours={settings.start_hour}-{settings.end_hour}"
        )
        return settings

    def validate(self) -> None:
        try:
            pytz.timezone(self.timezone_name)
        except pytz.UnknownTimeZoneError:
            raise RuntimeError(f"CALENDAR_TIMEZONE is not a known timezone: {self.timezone_name!r}")
        if not 0 <= self.week_starts_on <= 6:
            raise RuntimeError(
                f"CALENDAR_WEEK_STARTS_ON must be 0 (Monday) to 6 (Sunday), got {self.week_starts_on}"
            )
        if not 0 <= self.start_hour < self.end_hour <= 24:
            raise RuntimeError(
                f"CALENDAR_START_HOUR/CALENDAR_END_HOUR must satisfy 0 <= start < end <= 24, "
                f"got {self.start_hour}-{self.end_hour}"
            )
        if self.hour_height <= 0:
            raise RuntimeError(f"CALENDAR_HOUR_HEIGHT must be positive, got {self.hour_height}")

    @property
    def timezone(self):
        return pytz.timezone(self.timezone_name)

    @property
    def geometry(self) -> LayoutGeometry:
        return LayoutGeometry(self.start_hour, self.end_hour, self.hour_height)
