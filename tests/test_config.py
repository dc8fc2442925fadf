"""Tests for configuration and logging setup."""

import logging

import structlog

from py_surfacemap.config import Settings, configure_logging


class TestSettings:
    """Test settings loading."""

    def test_defaults(self):
        """Test the default settings."""
        config = Settings()
        assert config.log_level == "INFO"
        assert config.default_resolution == 180
        assert config.max_resolution == 4096
        assert config.strict_projection_check is True

    def test_environment_override(self, monkeypatch):
        """Test settings read prefixed environment variables."""
        monkeypatch.setenv("SURFACEMAP_DEFAULT_RESOLUTION", "90")
        monkeypatch.setenv("SURFACEMAP_STRICT_PROJECTION_CHECK", "false")
        config = Settings()
        assert config.default_resolution == 90
        assert config.strict_projection_check is False


class TestConfigureLogging:
    """Test logging configuration."""

    def test_sets_level(self):
        """Test the root logger follows the configured level."""
        configure_logging(Settings(log_level="WARNING", log_format="console"))
        assert logging.getLogger().level == logging.WARNING
        assert structlog.is_configured()
        structlog.reset_defaults()
