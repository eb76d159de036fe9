"""popexposure settings loaded from environment variables."""

from enum import StrEnum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from popexposure.models.common import Location, Pollutant


class Environment(StrEnum):
    """Deployment environment."""

    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class LogLevel(StrEnum):
    """Supported log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Run-wide settings loaded from ``POPEXPOSURE_*`` variables / .env file."""

    model_config = SettingsConfigDict(
        env_prefix="POPEXPOSURE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Data ---
    SUPPORTED_YEARS: list[int] = Field(
        default_factory=lambda: list(range(2003, 2016)),
        description="Years the input-output and population data cover.",
    )

    # --- Run defaults ---
    DEFAULT_YEAR: int = Field(default=2015, ge=1900, le=2100)
    DEFAULT_LOCATION: Location = Field(default=Location.DOMESTIC)
    DEFAULT_POLLUTANT: Pollutant = Field(default=Pollutant.TOTAL_PM25)

    # --- Logging ---
    LOG_LEVEL: LogLevel = Field(
        default=LogLevel.INFO,
        description="Application log level.",
    )

    # --- Environment ---
    ENVIRONMENT: Environment = Field(
        default=Environment.DEV,
        description="Deployment environment (dev/staging/prod).",
    )


def get_settings() -> Settings:
    """Factory function returning freshly loaded settings."""
    return Settings()
