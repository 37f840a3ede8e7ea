"""
Guestbook Web — Configuration
==============================

What:  Pydantic Settings for the web client, read from environment variables
       (or a .env file).
"""

from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator


class WebSettings(BaseSettings):
    """Settings for the guestbook web client."""

    # Base URL of the Guestbook API, without a trailing slash
    api_url: str = Field(default="http://localhost:5001")

    web_host: str = Field(default="0.0.0.0")
    web_port: int = Field(default=3000, ge=1024, le=65535)

    # IANA zone for timestamps when the browser does not run the page script
    display_timezone: str = Field(default="UTC")

    log_level: str = Field(default="INFO")

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("display_timezone")
    @classmethod
    def validate_display_timezone(cls, v: str) -> str:
        if v.upper() == "UTC":
            return "UTC"
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown display_timezone '{v}'")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def display_tz(self) -> tzinfo:
        if self.display_timezone == "UTC":
            return timezone.utc
        return ZoneInfo(self.display_timezone)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


settings = WebSettings()
