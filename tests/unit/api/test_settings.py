"""Tests for api/settings module."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from api.settings import Settings


def load_settings(env: dict[str, str]) -> Settings:
    with patch.dict("os.environ", env, clear=True):
        return Settings(_env_file=None)


class TestDefaults:
    """Tests for default values."""

    def test_reporting_defaults(self):
        settings = load_settings({})

        assert settings.display_timezone == "Asia/Kolkata"
        assert settings.trend_window_days == 7
        assert settings.export_cache_capacity == 32
        assert settings.export_cache_ttl_seconds == 300
        assert settings.skip_pb_auth is False

    def test_insecure_password_warns(self, caplog):
        """An unset admin password is allowed but logged."""
        with caplog.at_level("WARNING", logger="api.settings"):
            load_settings({})

        assert "POCKETBASE_ADMIN_PASSWORD" in caplog.text


class TestEnvironment:
    """Tests for environment variable parsing."""

    def test_overrides(self):
        settings = load_settings(
            {
                "POCKETBASE_URL": "http://pb:8090",
                "SKIP_PB_AUTH": "true",
                "TREND_WINDOW_DAYS": "30",
                "EXPORT_CACHE_CAPACITY": "0",
            }
        )

        assert settings.pocketbase_url == "http://pb:8090"
        assert settings.skip_pb_auth is True
        assert settings.trend_window_days == 30
        assert settings.export_cache_capacity == 0

    def test_allowed_origins_parsed(self):
        settings = load_settings({"ALLOWED_ORIGINS": "http://localhost:3000, https://innothon.in ,"})

        assert settings.allowed_origins == ["http://localhost:3000", "https://innothon.in"]

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError):
            load_settings({"DISPLAY_TIMEZONE": "Mars/Olympus"})

    def test_window_must_be_positive(self):
        with pytest.raises(ValidationError):
            load_settings({"TREND_WINDOW_DAYS": "0"})
