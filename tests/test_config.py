"""Unit tests for environment configuration."""
import pytest

from plugins.calendar_grid.config import CalendarSettings

ENV_VARS = [
    'CALENDAR_API_URL', 'CALENDAR_API_TOKEN', 'CALENDAR_TIMEZONE', 'CALENDAR_START_HOUR',
    'CALENDAR_END_HOUR', 'CALENDAR_HOUR_HEIGHT', 'CALENDAR_WEEK_STARTS_ON',
    'CALENDAR_OUTPUT_PATH', 'CALENDAR_REQUEST_TIMEOUT',
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate each test from the real environment and any .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr('plugins.calendar_grid.config.load_dotenv', lambda: False)


class TestCalendarSettings:
    """Test cases for CalendarSettings.from_env."""

    def test_defaults(self):
        settings = CalendarSettings.from_env()

        assert settings.api_url == "http://localhost:8080"
        assert settings.api_token is None
        assert settings.timezone_name == 'UTC'
        assert settings.week_starts_on == 6
        assert settings.geometry.column_height == 24 * 64

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv('CALENDAR_API_URL', 'https://events.example.com/')
        monkeypatch.setenv('CALENDAR_API_TOKEN', 'secret')
        monkeypatch.setenv('CALENDAR_TIMEZONE', 'Europe/Warsaw')
        monkeypatch.setenv('CALENDAR_START_HOUR', '7')
        monkeypatch.setenv('CALENDAR_END_HOUR', '19.5')
        monkeypatch.setenv('CALENDAR_WEEK_STARTS_ON', '0')

        settings = CalendarSettings.from_env()

        assert settings.api_url == 'https://events.example.com'
        assert settings.api_token == 'secret'
        assert settings.timezone.zone == 'Europe/Warsaw'
        assert settings.geometry.visible_hours == 12.5
        assert settings.week_starts_on == 0

    @pytest.mark.parametrize("name,value", [
        ('CALENDAR_TIMEZONE', 'Mars/Olympus_Mons'),
        ('CALENDAR_START_HOUR', 'nine'),
        ('CALENDAR_END_HOUR', '0'),
        ('CALENDAR_WEEK_STARTS_ON', '7'),
        ('CALENDAR_HOUR_HEIGHT', '-1'),
    ])
    def test_invalid_values_raise(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        with pytest.raises(RuntimeError):
            CalendarSettings.from_env()
