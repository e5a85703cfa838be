"""
Unit tests for unical/config.py

Tests Settings defaults, environment variable loading, connector
configuration validation and caching behavior.
"""

import logging

import pytest
from pydantic import ValidationError

from unical.app import create_app
from unical.config import Settings, get_settings
from unical.exceptions import ConfigurationError

CONNECTOR_ENV_VARS = (
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "CRONOFY_CLIENT_ID",
    "CRONOFY_CLIENT_SECRET",
    "CRONOFY_DATA_CENTER",
    "DEFAULT_TIME_ZONE",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Clear connector environment variables."""
    for name in CONNECTOR_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettingsDefaults:
    """Test Settings initialization with default values."""

    def test_settings_defaults(self, clean_env):
        """Settings should initialize with correct default values."""
        settings = Settings(_env_file=None)

        assert settings.log_level == "INFO"
        assert settings.default_time_zone == "Etc/UTC"
        assert settings.google_client_id == ""
        assert settings.cronofy_data_center == ""
        assert settings.google_token_uri == "https://oauth2.googleapis.com/token"
        assert settings.uses_google is False
        assert settings.uses_cronofy is False

    def test_invalid_log_level(self, clean_env):
        """Should reject unknown log levels."""
        with pytest.raises(ValidationError):
            Settings(log_level="CHATTY", _env_file=None)


class TestEnvironmentLoading:
    """Test loading settings from environment variables."""

    def test_reads_connector_credentials(self, clean_env):
        """Settings should pick up client credentials from the environment."""
        clean_env.setenv("GOOGLE_CLIENT_ID", "google-id")
        clean_env.setenv("GOOGLE_CLIENT_SECRET", "google-secret")
        clean_env.setenv("CRONOFY_DATA_CENTER", "de")

        settings = Settings(_env_file=None)

        assert settings.google_client_id == "google-id"
        assert settings.uses_google is True
        assert settings.cronofy_data_center == "de"

    def test_env_names_are_case_insensitive(self, clean_env):
        clean_env.setenv("cronofy_client_id", "c-id")
        settings = Settings(_env_file=None)
        assert settings.cronofy_client_id == "c-id"


class TestValidateConnectorConfig:
    """Tests for connector configuration validation."""

    def test_google_only(self, clean_env):
        settings = Settings(google_client_id="id", google_client_secret="secret", _env_file=None)
        # Should not raise
        settings.validate_connector_config()

    def test_cronofy_only(self, clean_env):
        settings = Settings(cronofy_client_id="id", cronofy_client_secret="secret", _env_file=None)
        settings.validate_connector_config()

    def test_nothing_configured(self, clean_env):
        """Should raise when no connector can be built."""
        settings = Settings(_env_file=None)
        with pytest.raises(ConfigurationError) as exc_info:
            settings.validate_connector_config()
        assert "No connector configured" in str(exc_info.value)

    def test_half_configured_pair(self, clean_env):
        """A client id without its secret is an error even if another connector is complete."""
        settings = Settings(
            google_client_id="id",
            google_client_secret="secret",
            cronofy_client_id="id",
            _env_file=None,
        )
        with pytest.raises(ConfigurationError) as exc_info:
            settings.validate_connector_config()
        assert "CRONOFY_CLIENT_SECRET" in str(exc_info.value)


class TestGetSettings:
    """Test the cached settings accessor."""

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestCreateApp:
    """Test building the application object from settings."""

    def test_registers_configured_connectors(self, clean_env):
        settings = Settings(
            google_client_id="g-id",
            google_client_secret="g-secret",
            cronofy_client_id="c-id",
            cronofy_client_secret="c-secret",
            cronofy_data_center="uk",
            _env_file=None,
        )

        app = create_app(settings)

        assert sorted(app.list_connectors()) == ["cronofy", "google"]
        assert app.registry.get("cronofy").base_url == "https://api-uk.cronofy.com"

    def test_skips_unconfigured_connectors(self, clean_env):
        settings = Settings(cronofy_client_id="c-id", cronofy_client_secret="c-secret", _env_file=None)
        app = create_app(settings)
        assert app.list_connectors() == ["cronofy"]

    def test_applies_log_level(self, clean_env):
        settings = Settings(
            google_client_id="g-id",
            google_client_secret="g-secret",
            log_level="DEBUG",
            _env_file=None,
        )
        create_app(settings)
        assert logging.getLogger("unical").level == logging.DEBUG

    def test_invalid_configuration(self, clean_env):
        with pytest.raises(ConfigurationError):
            create_app(Settings(_env_file=None))
