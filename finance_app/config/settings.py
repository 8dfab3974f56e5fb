"""
Configuration Management for Finance App

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here and read once when
components are built. Services receive the values they need as constructor
arguments; nothing downstream reads the environment on its own.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_FROM_ADDRESS = "Finance App <onboarding@resend.dev>"


class ResendSettings(BaseSettings):
    """Resend transactional email configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RESEND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Resend API key"
    )
    from_address: str = Field(
        default=DEFAULT_FROM_ADDRESS,
        description="Sender identity used for every outbound message"
    )

    @field_validator('api_key')
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Reject blank keys so misconfiguration shows up at startup."""
        if not v.strip():
            raise ValueError("RESEND_API_KEY must not be empty")
        return v.strip()


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Dashboard
    test_email_recipient: str = Field(
        default="you@example.com",
        description="Recipient of the dashboard's test email"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=3,
        description="Symbol shown next to account balances"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def resend(self) -> ResendSettings:
        return ResendSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    "<name>_error" entry for every failing section.
    """
    results = {}

    settings = get_settings()

    for name in ("resend", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
