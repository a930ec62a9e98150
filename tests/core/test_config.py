"""Tests for application settings and per-call options."""

import pytest
from pydantic import ValidationError

from zenoscript import __version__
from zenoscript.core.config import Settings, TranspileOptions, get_settings


class TestSettings:
    """Settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        """Test the default values."""
        monkeypatch.delenv("ZENOSCRIPT_LOG_LEVEL", raising=False)
        config = Settings(_env_file=None)
        assert config.APP_NAME == "Zenoscript"
        assert config.APP_VERSION == __version__
        assert config.LOG_LEVEL == "WARNING"
        assert config.LOG_FORMAT == "text"
        assert config.SOURCE_SUFFIX == ".zs"
        assert config.OUTPUT_SUFFIX == ".ts"
        assert config.ENCODING == "utf-8"

    def test_environment_override(self, monkeypatch):
        """Test that prefixed environment variables are read."""
        monkeypatch.setenv("ZENOSCRIPT_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("ZENOSCRIPT_LOG_FORMAT", "json")
        config = Settings(_env_file=None)
        assert config.LOG_LEVEL == "DEBUG"
        assert config.LOG_FORMAT == "json"

    def test_invalid_log_format(self, monkeypatch):
        """Test that only text and json formats are accepted."""
        monkeypatch.setenv("ZENOSCRIPT_LOG_FORMAT", "xml")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_env_file(self, tmp_path, monkeypatch):
        """Test loading values from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("ZENOSCRIPT_OUTPUT_SUFFIX=.mts\n", encoding="utf-8")
        monkeypatch.delenv("ZENOSCRIPT_OUTPUT_SUFFIX", raising=False)
        assert Settings(_env_file=env_file).OUTPUT_SUFFIX == ".mts"

    def test_get_settings_is_cached(self):
        """Test that the settings instance is shared."""
        assert get_settings() is get_settings()


class TestTranspileOptions:
    """Per-call switches."""

    def test_defaults(self):
        """Test that both flags are off by default."""
        options = TranspileOptions()
        assert options.verbose is False
        assert options.debug is False

    def test_frozen(self):
        """Test that options are immutable."""
        options = TranspileOptions(debug=True)
        with pytest.raises(ValidationError):
            options.debug = False
