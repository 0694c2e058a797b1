"""zonemerge configuration using pydantic-settings.

All configuration is strongly typed and supports environment variables
and .env files.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "console" or "json"

    # Circle approximation (vertices per circle, before the closing point)
    CIRCLE_STEPS: int = Field(default=64, ge=3)

    # Intersections at or below this area (square degrees) count as touching
    OVERLAP_AREA_EPSILON: float = Field(default=1e-14, ge=0.0)

    # Guard for the converge() wrapper; single steps are never limited
    MAX_CONVERGENCE_STEPS: int = Field(default=1000, gt=0)


# Singleton instance for import convenience
settings = Settings()
