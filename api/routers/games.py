"""Games endpoints - stored games, the arbitrage log, surebets and risk picks."""

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query, Request

from surebet.betting.arbitrage_scanner import ArbitrageScanner, SurebetEvaluation
from surebet.betting.risk_profile import select_picks
from surebet.config.constants import RiskLevel, is_three_way_sport
from surebet.database.schemas import (
    ArbitrageLogResponse,
    GameResponse,
    RiskPickResponse,
    StakeLeg,
    SurebetResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================
def _default_investment(app_state: Any) -> float:
    settings = app_state.settings
    if settings is None:
        return 500.0
    return float(settings.arbitrage.default_investment)


def build_surebet_response(
    game: Any,
    evaluation: SurebetEvaluation,
    total_investment: float,
) -> SurebetResponse:
    """
    Combine a pair evaluation with its equal-payout stake simulation.

    Legs are listed home, draw (1X2 only), away.
    """
    response = SurebetResponse(
        game_id=game.id,
        home_team=game.home_team,
        away_team=game.away_team,
        is_three_way=evaluation.is_three_way,
        has_arbitrage=evaluation.has_arbitrage,
        arb_index=evaluation.arb_index,
        profit_percent=evaluation.profit_percent,
        combo=evaluation.combo.value if evaluation.combo else None,
        house_a=evaluation.house_a,
        house_b=evaluation.house_b,
        total_investment=total_investment,
    )

    split = evaluation.stake_split(total_investment)
    if split is None:
        return response

    response.payout = split.payout
    response.profit = split.profit

    if evaluation.is_three_way:
        response.legs = [
            StakeLeg(outcome="home", bookmaker=evaluation.home_bookmaker,
                     odd=evaluation.odd_a, stake=split.stake_home),
            StakeLeg(outcome="draw", bookmaker=evaluation.draw_bookmaker or "",
                     odd=evaluation.odd_draw or 0.0, stake=split.stake_draw),
            StakeLeg(outcome="away", bookmaker=evaluation.away_bookmaker,
                     odd=evaluation.odd_b, stake=split.stake_away),
        ]
    else:
        response.legs = [
            StakeLeg(outcome="home", bookmaker=evaluation.home_bookmaker,
                     odd=evaluation.odd_a, stake=split.stake_a),
            StakeLeg(outcome="away", bookmaker=evaluation.away_bookmaker,
                     odd=evaluation.odd_b, stake=split.stake_b),
        ]

    return response


# =============================================================================
# ENDPOINTS
# =============================================================================
@router.get("/games", response_model=list[GameResponse])
async def list_games(
    request: Request,
    sport: Optional[str] = Query(None, description="Sport key or category"),
) -> list[GameResponse]:
    """Stored games with the latest quote of every bookmaker, soonest first."""
    app_state = request.app.state.app_state

    games = app_state.repository.list_games(sport)
    return [GameResponse.model_validate(game) for game in games]


@router.get("/games/{game_id}", response_model=GameResponse)
async def get_game(request: Request, game_id: int) -> GameResponse:
    """One stored game with its quotes."""
    app_state = request.app.state.app_state

    game = app_state.repository.get_game(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    return GameResponse.model_validate(game)


@router.get("/games/{game_id}/surebet", response_model=SurebetResponse)
async def get_surebet(
    request: Request,
    game_id: int,
    house_a: Optional[str] = Query(None, description="Bookmaker key for house A"),
    house_b: Optional[str] = Query(None, description="Bookmaker key for house B"),
    total: Optional[float] = Query(None, gt=0, description="Total investment"),
) -> SurebetResponse:
    """
    Evaluate one bookmaker pair for a game and simulate the stakes.

    Without an explicit pair the first two bookmakers are used. Draw
    sports take the best price of the two books per outcome; two-way
    sports keep the better of the two leg assignments.
    """
    app_state = request.app.state.app_state

    game = app_state.repository.get_game(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")

    books = {odd.bookmaker for odd in game.odds}
    for key in (house_a, house_b):
        if key and key not in books:
            raise HTTPException(
                status_code=404,
                detail=f"Bookmaker '{key}' has no odds for game {game_id}",
            )

    scanner = app_state.scanner or ArbitrageScanner()
    evaluation = scanner.evaluate_game(
        game.odds,
        three_way=is_three_way_sport(game.sport),
        house_a=house_a,
        house_b=house_b,
    )

    total_investment = total if total is not None else _default_investment(app_state)
    return build_surebet_response(game, evaluation, total_investment)


@router.get("/surebets", response_model=list[SurebetResponse])
async def list_surebets(
    request: Request,
    sport: Optional[str] = Query(None, description="Sport key or category"),
    house_a: Optional[str] = Query(None, description="Bookmaker key for house A"),
    house_b: Optional[str] = Query(None, description="Bookmaker key for house B"),
    total: Optional[float] = Query(None, gt=0, description="Total investment"),
    only_arbitrage: bool = Query(True, description="Drop games without arbitrage"),
) -> list[SurebetResponse]:
    """
    Evaluate the same bookmaker pair on every stored game.

    Games that lack one of the selected bookmakers evaluate without a
    combination and are dropped when only_arbitrage is set.
    """
    app_state = request.app.state.app_state

    scanner = app_state.scanner or ArbitrageScanner()
    total_investment = total if total is not None else _default_investment(app_state)

    responses = []
    for game in app_state.repository.list_games(sport):
        evaluation = scanner.evaluate_game(
            game.odds,
            three_way=is_three_way_sport(game.sport),
            house_a=house_a,
            house_b=house_b,
        )
        if only_arbitrage and not evaluation.has_arbitrage:
            continue
        responses.append(build_surebet_response(game, evaluation, total_investment))
    return responses


@router.get("/arbitrage-log", response_model=list[ArbitrageLogResponse])
async def list_arbitrage_log(
    request: Request,
    start_date: Optional[datetime] = Query(None, description="Earliest detection time"),
    end_date: Optional[datetime] = Query(None, description="Latest detection time"),
    sport: Optional[str] = Query(None, description="Sport category, e.g. Soccer"),
) -> list[ArbitrageLogResponse]:
    """Logged arbitrage opportunities, newest first."""
    app_state = request.app.state.app_state

    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date is after end_date")

    logs = app_state.repository.list_arbitrage_logs(
        start=start_date, end=end_date, sport=sport
    )
    return [ArbitrageLogResponse.model_validate(log) for log in logs]


@router.get("/risk-picks", response_model=list[RiskPickResponse])
async def list_risk_picks(
    request: Request,
    level: RiskLevel = Query(RiskLevel.MODERATE, description="Risk appetite"),
    total: Optional[float] = Query(None, gt=0, description="Total investment"),
    sport: Optional[str] = Query(None, description="Sport key or category"),
) -> list[RiskPickResponse]:
    """
    One pick per eligible game for a risk tier.

    The total investment is split evenly across the picks.
    """
    app_state = request.app.state.app_state

    games = app_state.repository.list_games(sport)
    total_investment = total if total is not None else _default_investment(app_state)

    picks = select_picks(games, level, total_investment)
    logger.debug(f"{len(picks)} {level.value} picks from {len(games)} games")
    return [RiskPickResponse.model_validate(pick) for pick in picks]
