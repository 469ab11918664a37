"""
Unit tests for court_scheduler/config.py

Tests Settings class, environment variable loading, slot grid validation,
production checks and configuration caching behavior.
"""

import pytest
from pydantic import ValidationError

from court_scheduler.config import Settings, get_settings


class TestSettingsDefaults:
    """Test Settings initialization with default values."""

    def test_settings_defaults(self, monkeypatch):
        """Settings should initialize with correct default values."""
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("PYTHON_ENV", raising=False)

        settings = Settings(_env_file=None)

        assert settings.python_env == "development"
        assert settings.log_level == "INFO"
        assert settings.database_url == "sqlite:///./data/court_scheduler.db"
        assert settings.api_host == "0.0.0.0"
        assert settings.api_port == 8000
        assert settings.slot_granularity_minutes == 30
        assert settings.operating_window_start == "06:00"
        assert settings.operating_window_end == "23:00"
        assert settings.booking_lock_timeout_seconds == 10.0
        assert settings.read_retry_attempts == 3

    def test_is_production_when_set(self):
        settings = Settings(_env_file=None, python_env="production")
        assert settings.is_production is True
        assert settings.is_development is False


class TestSettingsEnvironmentVariables:
    """Test Settings loading from environment variables."""

    def test_settings_from_env_vars(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/courts")
        monkeypatch.setenv("SLOT_GRANULARITY_MINUTES", "15")
        monkeypatch.setenv("OPERATING_WINDOW_START", "08:00")
        monkeypatch.setenv("OPERATING_WINDOW_END", "22:00")

        settings = Settings(_env_file=None)

        assert settings.log_level == "DEBUG"
        assert settings.uses_postgresql is True
        assert settings.uses_sqlite is False
        assert settings.slot_granularity_minutes == 15
        assert settings.operating_window_start == "08:00"
        assert settings.operating_window_end == "22:00"

    def test_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("api_port", "9000")
        assert Settings(_env_file=None).api_port == 9000


class TestSlotGridValidation:
    @pytest.mark.parametrize("value", ["6:00", "24:00", "06:60", "six"])
    def test_malformed_window_rejected(self, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, operating_window_start=value)

    def test_window_end_must_follow_start(self):
        with pytest.raises(ValidationError, match="operating_window_end"):
            Settings(_env_file=None, operating_window_start="22:00", operating_window_end="08:00")

    def test_granularity_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, slot_granularity_minutes=0)

    def test_lock_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, booking_lock_timeout_seconds=0)


class TestProductionValidation:
    def test_development_skips_checks(self):
        Settings(_env_file=None, database_url="sqlite://").validate_production_config()

    def test_production_requires_postgresql(self):
        settings = Settings(
            _env_file=None,
            python_env="production",
            database_url="sqlite:///./data/courts.db",
            api_reload=False,
        )
        with pytest.raises(ValueError, match="PostgreSQL"):
            settings.validate_production_config()

    def test_production_requires_reload_off(self):
        settings = Settings(
            _env_file=None,
            python_env="production",
            database_url="postgresql://db/courts",
            api_reload=True,
        )
        with pytest.raises(ValueError, match="API_RELOAD"):
            settings.validate_production_config()

    def test_valid_production_config(self):
        Settings(
            _env_file=None,
            python_env="production",
            database_url="postgresql://db/courts",
            api_reload=False,
        ).validate_production_config()


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_cache_clear_reloads(self, monkeypatch):
        get_settings.cache_clear()
        try:
            monkeypatch.setenv("SLOT_GRANULARITY_MINUTES", "20")
            assert get_settings().slot_granularity_minutes == 20
        finally:
            monkeypatch.undo()
            get_settings.cache_clear()
