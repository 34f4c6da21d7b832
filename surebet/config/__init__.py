"""Configuration and static constants."""

from .constants import (
    DEFAULT_SPORT_KEY,
    SPORTS,
    SPORTS_TO_SYNC,
    RiskLevel,
    Sport,
    SportCategory,
    get_sport_name,
    is_three_way_sport,
    sport_category,
)
from .settings import (
    ArbitrageSettings,
    OddsAPISettings,
    SchedulerSettings,
    Settings,
    get_settings,
)

__all__ = [
    # Constants
    "DEFAULT_SPORT_KEY",
    "SPORTS",
    "SPORTS_TO_SYNC",
    "RiskLevel",
    "Sport",
    "SportCategory",
    "get_sport_name",
    "is_three_way_sport",
    "sport_category",
    # Settings
    "ArbitrageSettings",
    "OddsAPISettings",
    "SchedulerSettings",
    "Settings",
    "get_settings",
]
