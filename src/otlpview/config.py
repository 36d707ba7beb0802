"""
otlpview Configuration.

Centralized configuration management using Pydantic Settings.
Loads configuration from environment variables.
"""

from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LOGS_API_URL = "https://take-home-assignment-otlp-logs-api.vercel.app/api/logs"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logs API
    logs_api_url: str = DEFAULT_LOGS_API_URL
    request_timeout: float = 10.0  # Seconds

    # Display
    display_timezone: str = ""  # IANA name; empty = local time

    # Logging
    log_level: str = "WARNING"
    log_format: str = "standard"  # standard or json

    @property
    def timezone(self) -> tzinfo | None:
        """Resolve ``display_timezone``, or None for local time.

        Raises:
            ValueError: If the name is not a known IANA timezone
        """
        if not self.display_timezone:
            return None
        try:
            return ZoneInfo(self.display_timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(
                f"Unknown display timezone: {self.display_timezone!r}"
            ) from exc


# Global settings instance
settings = Settings()
