"""Configuration management using Pydantic Settings.

This module provides centralized configuration for the fantasy valuation
tools, supporting environment variables and .env file loading.

Example:
    >>> from fantasy_value.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.min_games_played)
    5
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Environment variables take precedence over .env file values.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_dir: Directory for log files.
        min_games_played: Games required for a player-season to join the
            reference cohort used for z-score statistics.
        weight_percentages_by_volume: Whether FG%/FT% z-scores are weighted
            by attempt volume when attempts are available.
        team_rate_aggregation: How team FG%/FT% are combined from members.
        display_precision: Decimal places used when rendering values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )
    log_dir: str = Field(
        default="logs",
        alias="LOG_DIR",
        description="Directory for log files",
    )

    # Cohort qualification
    min_games_played: int = Field(
        default=5,
        alias="MIN_GAMES_PLAYED",
        ge=0,
        description="Minimum games for a player to join the reference cohort",
    )

    # Rate stat handling
    weight_percentages_by_volume: bool = Field(
        default=True,
        alias="WEIGHT_PERCENTAGES_BY_VOLUME",
        description="Weight FG%/FT% z-scores by attempt volume",
    )
    team_rate_aggregation: Literal["mean", "volume_weighted"] = Field(
        default="mean",
        alias="TEAM_RATE_AGGREGATION",
        description="Team FG%/FT% aggregation (simple mean or makes/attempts)",
    )

    # Presentation
    display_precision: int = Field(
        default=2,
        alias="DISPLAY_PRECISION",
        ge=0,
        le=6,
        description="Decimal places for rendered values",
    )

    @field_validator("log_dir")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Ensure path strings are valid."""
        if not v or v.isspace():
            raise ValueError("Path cannot be empty or whitespace")
        return v

    @property
    def log_dir_obj(self) -> Path:
        """Return log directory as Path object."""
        return Path(self.log_dir)

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.log_dir_obj.mkdir(parents=True, exist_ok=True)


# Singleton pattern for settings
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        Settings instance loaded from environment.

    Example:
        >>> settings = get_settings()
        >>> print(settings.team_rate_aggregation)
        mean
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None
