"""
Configuration management using pydantic-settings.

Loads configuration from environment variables and .env file.
"""
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_SPORT_KEY, SPORTS_TO_SYNC


class ArbitrageSettings(BaseSettings):
    """Settings for surebet evaluation and stake simulation."""

    model_config = SettingsConfigDict(env_prefix="ARB_")

    default_investment: Decimal = Field(
        default=Decimal("500"),
        description="Default total investment for stake simulations",
    )
    default_sport_key: str = Field(
        default=DEFAULT_SPORT_KEY,
        description="Sport synced when a trigger does not name one",
    )


class SchedulerSettings(BaseSettings):
    """Settings for the periodic multi-sport sync."""

    model_config = SettingsConfigDict(env_prefix="SYNC_")

    interval_minutes: int = Field(
        default=60,
        description="Minutes between scheduled multi-sport syncs",
    )
    inter_sport_delay_seconds: float = Field(
        default=1.0,
        description="Pause between sports to respect provider rate limits",
    )
    sports: list[str] = Field(
        default_factory=lambda: list(SPORTS_TO_SYNC),
        description="Sport keys synced on every scheduled run",
    )
    run_on_start: bool = Field(
        default=False,
        description="Run one sync immediately when the scheduler starts",
    )

    @field_validator("interval_minutes")
    @classmethod
    def validate_interval(cls, v: int) -> int:
        if v < 1:
            raise ValueError("interval_minutes must be at least 1")
        return v


class OddsAPISettings(BaseSettings):
    """Settings for The Odds API."""

    model_config = SettingsConfigDict(env_prefix="ODDS_")

    api_key: str = Field(
        default="",
        description="API key from the-odds-api.com",
    )
    base_url: str = Field(
        default="https://api.the-odds-api.com/v4",
        description="Base URL for the API",
    )
    regions: list[str] = Field(
        default=["eu"],
        description="Regions to fetch odds from",
    )
    markets: list[str] = Field(
        default=["h2h"],
        description="Markets to fetch",
    )
    odds_format: str = Field(
        default="decimal",
        description="Odds format requested from the provider",
    )
    timeout_seconds: float = Field(default=30.0)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="sqlite:///surebet.db",
        description="Database connection URL",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default="logs/surebet.log")
    debug: bool = Field(default=False)

    # Sub-settings
    arbitrage: ArbitrageSettings = Field(default_factory=ArbitrageSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    odds_api: OddsAPISettings = Field(default_factory=OddsAPISettings)

    @property
    def project_root(self) -> Path:
        """Get project root directory."""
        return Path(__file__).parent.parent.parent


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
