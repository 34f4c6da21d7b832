"""Bookmaker comparison and accumulator endpoints."""

from typing import Optional

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel, ConfigDict, Field, field_validator

from surebet.betting.arbitrage import combined_odds, is_valid_odd, joint_probability
from surebet.betting.bookmaker_stats import available_bookmakers, compute_bookmaker_stats

router = APIRouter()


class BookmakerStatsResponse(BaseModel):
    """Best-price counts and average prices of one bookmaker."""

    model_config = ConfigDict(from_attributes=True)

    bookmaker: str
    best_home_count: int
    best_away_count: int
    best_total: int
    total_games: int
    avg_home_odd: float
    avg_away_odd: float


class AccumulatorRequest(BaseModel):
    """Legs of a multiple, as decimal odds."""

    odds: list[float] = Field(..., min_length=1)
    stake: Optional[float] = Field(None, gt=0)

    @field_validator("odds")
    @classmethod
    def validate_odds(cls, v: list[float]) -> list[float]:
        if not all(is_valid_odd(odd) for odd in v):
            raise ValueError("every leg must have decimal odds above 1")
        return v


class AccumulatorResponse(BaseModel):
    """Combined price and joint win probability of a multiple."""

    legs: int
    combined_odds: float
    joint_probability: float  # Percent, legs treated as independent
    stake: Optional[float] = None
    potential_return: Optional[float] = None


@router.get("/bookmaker-stats", response_model=list[BookmakerStatsResponse])
async def get_bookmaker_stats(
    request: Request,
    sport: Optional[str] = Query(None, description="Sport key or category"),
    limit: int = Query(10, ge=1, le=100, description="Bookmakers returned"),
) -> list[BookmakerStatsResponse]:
    """
    Bookmakers ranked by how often they hold a game's best price.

    Counts best home and best away prices across the stored games.
    """
    app_state = request.app.state.app_state

    games = app_state.repository.list_games(sport)
    stats = compute_bookmaker_stats(games, limit=limit)
    return [BookmakerStatsResponse.model_validate(stat) for stat in stats]


@router.get("/bookmakers", response_model=list[str])
async def list_bookmakers(
    request: Request,
    sport: Optional[str] = Query(None, description="Sport key or category"),
) -> list[str]:
    """Sorted bookmaker keys available for pair selection."""
    app_state = request.app.state.app_state

    return available_bookmakers(app_state.repository.list_games(sport))


@router.post("/accumulator", response_model=AccumulatorResponse)
async def price_accumulator(payload: AccumulatorRequest) -> AccumulatorResponse:
    """Combined odds, joint probability and potential return of a multiple."""
    price = combined_odds(payload.odds)

    return AccumulatorResponse(
        legs=len(payload.odds),
        combined_odds=price,
        joint_probability=joint_probability(payload.odds),
        stake=payload.stake,
        potential_return=payload.stake * price if payload.stake else None,
    )
