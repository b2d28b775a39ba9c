"""Application configuration management using Pydantic Settings.

This module loads and validates environment variables using Pydantic Settings.
All configuration is loaded from environment variables or a .env file.
"""

from functools import lru_cache
from typing import List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Attributes:
        database_url: Database connection string
        database_pool_size: Number of connections to maintain in pool
        database_max_overflow: Maximum overflow connections beyond pool_size
        environment: Application environment (development, staging, production)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        report_timezone: IANA timezone used for hour-of-day bucketing
        anonymized_email_domain: Domain used for pseudonymous respondent emails
        git_commit_sha: Git commit SHA reported at startup
        allowed_origins: List of allowed CORS origins
    """

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///./survey_insights.db",
        description="Database connection string"
    )
    database_pool_size: int = Field(
        default=5,
        description="Number of database connections in pool"
    )
    database_max_overflow: int = Field(
        default=10,
        description="Maximum overflow connections beyond pool size"
    )

    # Application Configuration
    environment: str = Field(
        default="development",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    git_commit_sha: str = Field(
        default="local",
        description="Git commit SHA for versioning"
    )

    # Reporting Configuration
    report_timezone: str = Field(
        default="UTC",
        description="Timezone used to bucket responses into times of day"
    )
    anonymized_email_domain: str = Field(
        default="example.com",
        description="Domain for pseudonymous respondent email addresses"
    )

    # Security Configuration
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        description="Comma-separated list of allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed = {"development", "staging", "production"}
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v_upper

    @field_validator("report_timezone")
    @classmethod
    def validate_report_timezone(cls, v: str) -> str:
        """Validate the report timezone is a known IANA zone."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    def get_allowed_origins_list(self) -> List[str]:
        """Parse allowed_origins string into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    def get_report_zone(self) -> ZoneInfo:
        """Return the report timezone as a ZoneInfo instance."""
        return ZoneInfo(self.report_timezone)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings singleton

    Note:
        Uses lru_cache to ensure settings are only loaded once
        and shared across the application.
    """
    return Settings()
