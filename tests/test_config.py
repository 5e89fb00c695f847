import sys
import os

import pytest
from pydantic import ValidationError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from config import Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PAYMENTS_LOG_LEVEL", raising=False)
        monkeypatch.delenv("PAYMENTS_REPORT_STATS", raising=False)
        settings = Settings(_env_file=None)
        assert settings.log_level == "WARNING"
        assert settings.report_stats is True

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PAYMENTS_LOG_LEVEL", "debug")
        monkeypatch.setenv("PAYMENTS_REPORT_STATS", "0")
        settings = Settings(_env_file=None)
        assert settings.log_level == "DEBUG"
        assert settings.report_stats is False

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("PAYMENTS_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()
