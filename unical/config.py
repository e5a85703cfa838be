"""
Configuration management for Unical.

Uses Pydantic Settings for type-safe environment variable loading.
Configured via .env file in project root.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from unical.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Only static connector configuration lives here. Per-user credentials
    are always passed in with each call and never read from settings.
    """

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level for the unical logger"
    )

    default_time_zone: str = Field(
        default="Etc/UTC",
        description="IANA timezone used when a request does not specify one"
    )

    # Google OAuth client (direct provider)
    google_client_id: str = Field(
        default="",
        description="Google OAuth 2.0 client ID"
    )
    google_client_secret: str = Field(
        default="",
        description="Google OAuth 2.0 client secret"
    )
    google_token_uri: str = Field(
        default="https://oauth2.googleapis.com/token",
        description="Google token endpoint used for refresh token exchange"
    )
    google_revoke_uri: str = Field(
        default="https://oauth2.googleapis.com/revoke",
        description="Google token revocation endpoint"
    )

    # Cronofy OAuth client (aggregator)
    cronofy_client_id: str = Field(
        default="",
        description="Cronofy OAuth client ID"
    )
    cronofy_client_secret: str = Field(
        default="",
        description="Cronofy OAuth client secret"
    )
    cronofy_data_center: str = Field(
        default="",
        description="Cronofy data center identifier (e.g. 'de', 'uk'); empty for the US default"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def uses_google(self) -> bool:
        """Check if the Google connector is configured."""
        return bool(self.google_client_id and self.google_client_secret)

    @property
    def uses_cronofy(self) -> bool:
        """Check if the Cronofy connector is configured."""
        return bool(self.cronofy_client_id and self.cronofy_client_secret)

    def validate_connector_config(self) -> None:
        """
        Validate that at least one connector can be built.

        Raises:
            ConfigurationError: If no connector has complete client credentials
        """
        errors = []

        if bool(self.google_client_id) != bool(self.google_client_secret):
            errors.append(
                "Google requires both GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET."
            )
        if bool(self.cronofy_client_id) != bool(self.cronofy_client_secret):
            errors.append(
                "Cronofy requires both CRONOFY_CLIENT_ID and CRONOFY_CLIENT_SECRET."
            )
        if not errors and not (self.uses_google or self.uses_cronofy):
            errors.append(
                "No connector configured. Set Google or Cronofy client credentials."
            )

        if errors:
            raise ConfigurationError("Connector configuration errors:\n- " + "\n- ".join(errors))


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance loaded from environment

    Example:
        >>> from unical.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.default_time_zone)
    """
    return Settings()
