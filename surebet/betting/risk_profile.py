"""
Risk-tier picks built from implied probability.

For each game the best home and best away prices across bookmakers are
found, one outcome is chosen according to the risk appetite, and games
whose chosen price falls outside the tier's odds window are dropped.
"""
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from surebet.config.constants import (
    CONSERVATIVE_MIN_ODD,
    RISK_ODDS_WINDOWS,
    RiskLevel,
)

from .arbitrage import implied_probability


@dataclass
class RiskPick:
    """A single-outcome pick for one game."""

    game_id: Any
    home_team: str
    away_team: str
    outcome: str  # "home" or "away"
    odd: float
    bookmaker: str
    probability: float  # Implied probability, percent
    stake: float = 0.0


def _in_window(level: RiskLevel, odd: float) -> bool:
    low, high = RISK_ODDS_WINDOWS[level]
    if high is None:
        return odd > low
    return low <= odd <= high


def pick_for_game(
    game_id: Any,
    home_team: str,
    away_team: str,
    quotes: Sequence[Any],
    level: RiskLevel,
) -> Optional[RiskPick]:
    """
    Choose one outcome of a game for the given risk level.

    Defaults to the best home price. Aggressive switches to the away side
    when it pays more; conservative switches when the away side is the
    safer favourite but not below CONSERVATIVE_MIN_ODD.
    """
    if not quotes:
        return None

    best_home = max(quotes, key=lambda q: q.home_odd)
    best_away = max(quotes, key=lambda q: q.away_odd)

    outcome, chosen = "home", best_home
    odd = best_home.home_odd

    if level == RiskLevel.AGGRESSIVE and best_away.away_odd > odd:
        outcome, chosen, odd = "away", best_away, best_away.away_odd
    elif (
        level == RiskLevel.CONSERVATIVE
        and CONSERVATIVE_MIN_ODD <= best_away.away_odd < odd
    ):
        outcome, chosen, odd = "away", best_away, best_away.away_odd

    if not _in_window(level, odd):
        return None

    return RiskPick(
        game_id=game_id,
        home_team=home_team,
        away_team=away_team,
        outcome=outcome,
        odd=odd,
        bookmaker=chosen.bookmaker,
        probability=implied_probability(odd),
    )


def select_picks(
    games: Sequence[Any],
    level: RiskLevel,
    total_investment: float,
) -> list[RiskPick]:
    """
    Build risk-tier picks across games and spread the investment evenly.

    Args:
        games: Objects with id, home_team, away_team and odds (quotes)
        level: Risk appetite
        total_investment: Amount split equally across the picks

    Returns:
        Picks ordered most likely first for conservative, least likely
        first otherwise
    """
    picks = []
    for game in games:
        pick = pick_for_game(game.id, game.home_team, game.away_team, game.odds, level)
        if pick is not None:
            picks.append(pick)

    picks.sort(
        key=lambda p: p.probability,
        reverse=level == RiskLevel.CONSERVATIVE,
    )

    if picks:
        stake = total_investment / len(picks)
        for pick in picks:
            pick.stake = stake

    return picks
