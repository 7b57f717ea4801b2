"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from run_analytics.config import Settings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the host environment out of settings tests."""
    for name in ("RUN_ANALYTICS_MAX_HR", "RUN_ANALYTICS_REST_HR", "RUN_ANALYTICS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        """Defaults match the metric functions' defaults."""
        settings = Settings(_env_file=None)
        assert settings.max_hr == 185
        assert settings.rest_hr == 60
        assert settings.log_level == "WARNING"

    def test_environment_override(self, monkeypatch):
        """Prefixed environment variables override defaults."""
        monkeypatch.setenv("RUN_ANALYTICS_MAX_HR", "192")
        monkeypatch.setenv("RUN_ANALYTICS_REST_HR", "48")
        settings = Settings(_env_file=None)
        assert settings.max_hr == 192
        assert settings.rest_hr == 48

    def test_max_hr_must_exceed_rest_hr(self):
        with pytest.raises(ValidationError):
            Settings(max_hr=60, rest_hr=60, _env_file=None)

    def test_rest_hr_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(max_hr=180, rest_hr=0, _env_file=None)

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD", _env_file=None)

    def test_get_settings_is_cached(self):
        """get_settings returns the same instance until the cache is cleared."""
        assert get_settings() is get_settings()
