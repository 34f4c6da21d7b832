"""
Pydantic schemas for data validation and serialization.

Used for provider payload validation and API responses.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# PROVIDER SCHEMAS
# =============================================================================
class OddsOutcome(BaseModel):
    """Single outcome price from a bookmaker."""

    name: str
    price: Optional[float] = None  # Decimal odds


class MarketOdds(BaseModel):
    """Odds for a single market type."""

    key: str  # e.g., 'h2h'
    outcomes: list[OddsOutcome] = Field(default_factory=list)


class BookmakerOdds(BaseModel):
    """Odds from a single bookmaker."""

    key: str  # e.g., 'pinnacle'
    title: Optional[str] = None
    markets: list[MarketOdds] = Field(default_factory=list)


class OddsEvent(BaseModel):
    """Full odds data for one provider event."""

    model_config = ConfigDict(extra="ignore")

    id: str
    sport_key: Optional[str] = None
    sport_title: Optional[str] = None
    commence_time: Optional[datetime] = None
    home_team: str
    away_team: str
    bookmakers: list[BookmakerOdds] = Field(default_factory=list)


# =============================================================================
# SYNC SCHEMAS
# =============================================================================
class CamelModel(BaseModel):
    """Schema serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SyncOddsRequest(CamelModel):
    """Body of a sync trigger."""

    sport_key: Optional[str] = None


class SyncOddsResponse(CamelModel):
    """Result of a single-sport sync."""

    success: bool = True
    games_processed: int
    odds_processed: int
    arbitrages_logged: int
    sport_key: str


class SyncStatusResponse(CamelModel):
    """Most recent completed sync."""

    last_run_at: Optional[datetime] = None
    sport_key: str


class SyncRunResponse(CamelModel):
    """Stored totals of one multi-sport run."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    sync_time: datetime
    total_games: int
    total_odds: int
    total_arbitrages: int
    sports_synced: int


class HourlySyncResponse(CamelModel):
    """Totals of a multi-sport scheduled run."""

    success: bool = True
    timestamp: datetime
    total_games: int
    total_odds: int
    total_arbitrages: int
    sports_processed: int
    failed_sports: list[str] = Field(default_factory=list)


# =============================================================================
# GAME / ODDS SCHEMAS
# =============================================================================
class OddResponse(BaseModel):
    """One bookmaker quote."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    game_id: int
    bookmaker: str
    home_odd: float
    draw_odd: Optional[float] = None
    away_odd: float
    last_update: datetime


class GameResponse(BaseModel):
    """Game with its current quotes."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    external_id: str
    sport: str
    league: str
    home_team: str
    away_team: str
    game_datetime: Optional[datetime] = None
    status: str
    updated_at: datetime
    odds: list[OddResponse] = Field(default_factory=list)


class ArbitrageLogResponse(BaseModel):
    """Logged arbitrage opportunity."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    game_id: int
    home_team: str
    away_team: str
    sport: str
    league: str
    bookmaker_a: str
    bookmaker_b: str
    odd_a: float
    odd_b: float
    arb_index: float
    profit_percent: float
    detected_at: datetime


# =============================================================================
# SUREBET / RISK SCHEMAS
# =============================================================================
class StakeLeg(BaseModel):
    """Stake on one outcome at one bookmaker."""

    outcome: str  # home, draw, away
    bookmaker: str
    odd: float
    stake: float


class SurebetResponse(BaseModel):
    """Evaluation of one bookmaker pair plus stake simulation."""

    game_id: int
    home_team: str
    away_team: str
    is_three_way: bool
    has_arbitrage: bool
    arb_index: float
    profit_percent: float
    combo: Optional[str] = None
    house_a: str = ""
    house_b: str = ""
    total_investment: float
    payout: Optional[float] = None
    profit: Optional[float] = None
    legs: list[StakeLeg] = Field(default_factory=list)


class RiskPickResponse(BaseModel):
    """Single-outcome pick for a risk tier."""

    model_config = ConfigDict(from_attributes=True)

    game_id: int
    home_team: str
    away_team: str
    outcome: str
    odd: float
    bookmaker: str
    probability: float
    stake: float
