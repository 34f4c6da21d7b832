"""
Constants for the surebet scanner.

Contains the sport catalog, sync lists and risk tier thresholds.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Final, Optional


# =============================================================================
# SPORT CATALOG
# =============================================================================
class SportCategory(str, Enum):
    """Display category stored on each game."""

    BASKETBALL = "Basketball"
    SOCCER = "Soccer"
    AMERICAN_FOOTBALL = "American Football"
    OTHER = "Other"


@dataclass(frozen=True)
class Sport:
    """A sport/league known to the provider."""

    key: str
    name: str
    category: SportCategory
    three_way: bool  # h2h market has a draw outcome


SPORTS: Final[tuple[Sport, ...]] = (
    Sport("basketball_nba", "NBA", SportCategory.BASKETBALL, False),
    Sport("soccer_epl", "Premier League", SportCategory.SOCCER, True),
    Sport("soccer_brazil_campeonato", "Brasileirão Série A", SportCategory.SOCCER, True),
    Sport("soccer_spain_la_liga", "La Liga", SportCategory.SOCCER, True),
    Sport("soccer_germany_bundesliga", "Bundesliga", SportCategory.SOCCER, True),
    Sport("soccer_italy_serie_a", "Serie A", SportCategory.SOCCER, True),
    Sport("soccer_france_ligue_one", "Ligue 1", SportCategory.SOCCER, True),
    Sport("soccer_uefa_champs_league", "UEFA Champions League", SportCategory.SOCCER, True),
    Sport("americanfootball_nfl", "NFL", SportCategory.AMERICAN_FOOTBALL, False),
)

SPORTS_BY_KEY: Final[dict[str, Sport]] = {sport.key: sport for sport in SPORTS}

DEFAULT_SPORT_KEY: Final[str] = "basketball_nba"

# Synced sequentially on every scheduled run
SPORTS_TO_SYNC: Final[tuple[str, ...]] = tuple(sport.key for sport in SPORTS)

# Provider literal for the draw outcome in h2h markets
DRAW_OUTCOME_NAME: Final[str] = "Draw"

H2H_MARKET: Final[str] = "h2h"

GAME_STATUS_OPEN: Final[str] = "open"


def get_sport_name(key: str) -> str:
    """Human readable name, falling back to the key itself."""
    sport = SPORTS_BY_KEY.get(key)
    return sport.name if sport else key


def sport_category(key: str) -> SportCategory:
    """
    Display category for a sport key.

    Keys outside the catalog are classified by their provider prefix; a
    category name is returned as is.
    """
    sport = SPORTS_BY_KEY.get(key)
    if sport:
        return sport.category
    try:
        return SportCategory(key)
    except ValueError:
        pass
    if key.startswith("soccer_"):
        return SportCategory.SOCCER
    if key.startswith("basketball_"):
        return SportCategory.BASKETBALL
    if key.startswith("americanfootball_"):
        return SportCategory.AMERICAN_FOOTBALL
    return SportCategory.OTHER


def is_three_way_sport(key_or_category: str) -> bool:
    """
    Whether a sport's h2h market carries a draw outcome.

    Accepts either a provider sport key or a stored display category.
    """
    sport = SPORTS_BY_KEY.get(key_or_category)
    if sport:
        return sport.three_way
    if key_or_category == SportCategory.SOCCER.value:
        return True
    return sport_category(key_or_category) == SportCategory.SOCCER


# =============================================================================
# RISK TIERS
# =============================================================================
class RiskLevel(str, Enum):
    """Risk appetite for single-outcome picks."""

    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


# Inclusive decimal odds window per tier (upper None = unbounded)
RISK_ODDS_WINDOWS: Final[dict[RiskLevel, tuple[float, Optional[float]]]] = {
    RiskLevel.CONSERVATIVE: (1.2, 1.8),
    RiskLevel.MODERATE: (1.5, 2.5),
    RiskLevel.AGGRESSIVE: (2.0, None),  # strictly above 2.0
}

# Conservative picks never switch to an outcome priced below this
CONSERVATIVE_MIN_ODD: Final[float] = 1.2
