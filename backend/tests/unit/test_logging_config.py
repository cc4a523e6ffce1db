"""Tests for centralized logging configuration."""

import logging

import pytest
from pydantic import ValidationError

from logging_config import QUIET_LOGGERS, setup_logging


@pytest.fixture
def use_log_level(monkeypatch):
    """Point logging_config at fresh Settings built with the given LOG_LEVEL."""

    def _apply(level: str):
        monkeypatch.setenv("LOG_LEVEL", level)
        from config import Settings
        monkeypatch.setattr("logging_config.settings", Settings())

    return _apply


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_root_logger_level_default_info(self, use_log_level):
        """Default LOG_LEVEL should set root logger to INFO."""
        use_log_level("INFO")
        setup_logging()
        assert logging.getLogger().level == logging.INFO

    def test_root_logger_level_from_settings(self, use_log_level):
        """LOG_LEVEL setting should control root logger level."""
        use_log_level("DEBUG")
        setup_logging()
        assert logging.getLogger().level == logging.DEBUG

    def test_third_party_loggers_suppressed(self, use_log_level):
        """Noisy third-party loggers should be set to WARNING."""
        use_log_level("DEBUG")
        setup_logging()

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING, (
                f"{name} logger not suppressed"
            )

    def test_invalid_log_level_rejected(self, monkeypatch):
        """Invalid LOG_LEVEL values should raise a validation error."""
        monkeypatch.setenv("LOG_LEVEL", "VERBOS")
        from config import Settings
        with pytest.raises(ValidationError, match="LOG_LEVEL"):
            Settings()

    def test_log_level_case_insensitive(self, monkeypatch):
        """LOG_LEVEL should accept lowercase values."""
        monkeypatch.setenv("LOG_LEVEL", "warning")
        from config import Settings
        assert Settings().LOG_LEVEL == "WARNING"

    def test_explicit_level_overrides_settings(self, use_log_level):
        use_log_level("INFO")
        setup_logging("error")
        assert logging.getLogger().level == logging.ERROR
