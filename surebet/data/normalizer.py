"""
Odds normalization for raw provider events.

Transforms an Odds API event:
{
    "id": "e912304de2b2ce35b473ce2ecd3d1502",
    "sport_title": "EPL",
    "commence_time": "2024-08-16T19:00:00Z",
    "home_team": "Manchester United",
    "away_team": "Fulham",
    "bookmakers": [
        {
            "key": "pinnacle",
            "markets": [
                {
                    "key": "h2h",
                    "outcomes": [
                        {"name": "Manchester United", "price": 1.62},
                        {"name": "Fulham", "price": 5.4},
                        {"name": "Draw", "price": 4.2}
                    ]
                }
            ]
        }
    ]
}

into one GameRecord plus one NormalizedQuote per bookmaker:
{"bookmaker": "pinnacle", "home_odd": 1.62, "draw_odd": 4.2, "away_odd": 5.4}
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

from loguru import logger
from pydantic import ValidationError

from surebet.betting.arbitrage import is_valid_odd
from surebet.config.constants import (
    DRAW_OUTCOME_NAME,
    GAME_STATUS_OPEN,
    H2H_MARKET,
    sport_category,
)
from surebet.database.schemas import BookmakerOdds, OddsEvent


@dataclass(frozen=True)
class NormalizedQuote:
    """Canonical h2h quote of one bookmaker for one game."""

    bookmaker: str
    home_odd: float
    away_odd: float
    draw_odd: Optional[float] = None

    @property
    def is_three_way(self) -> bool:
        return self.draw_odd is not None


@dataclass(frozen=True)
class GameRecord:
    """Upsert payload for a game, keyed by external_id."""

    external_id: str
    sport: str
    league: str
    home_team: str
    away_team: str
    game_datetime: Optional[datetime]
    status: str = GAME_STATUS_OPEN


def parse_event(raw: Union[dict, OddsEvent]) -> OddsEvent:
    """Validate a raw provider payload into an OddsEvent."""
    if isinstance(raw, OddsEvent):
        return raw
    return OddsEvent.model_validate(raw)


def event_to_game(event: OddsEvent, sport_key: str) -> GameRecord:
    """
    Build the game upsert payload for an event.

    The league falls back to the sport key when the provider omits a title.
    """
    return GameRecord(
        external_id=event.id,
        sport=sport_category(sport_key).value,
        league=event.sport_title or sport_key,
        home_team=event.home_team,
        away_team=event.away_team,
        game_datetime=event.commence_time,
    )


def normalize_bookmaker(
    bookmaker: BookmakerOdds,
    home_team: str,
    away_team: str,
) -> Optional[NormalizedQuote]:
    """
    Extract the h2h quote of a single bookmaker.

    Returns None when the market lacks a home or away price, or when any
    quoted price is not a usable decimal odd. Partial quotes are never
    recorded.
    """
    market = next((m for m in bookmaker.markets if m.key == H2H_MARKET), None)
    if market is None:
        return None

    prices: dict[str, Optional[float]] = {}
    for outcome in market.outcomes:
        # First outcome with a given name wins
        prices.setdefault(outcome.name, outcome.price)

    home_odd = prices.get(home_team)
    away_odd = prices.get(away_team)
    if home_odd is None or away_odd is None:
        return None

    draw_odd = prices.get(DRAW_OUTCOME_NAME)
    has_draw = DRAW_OUTCOME_NAME in prices

    if not (is_valid_odd(home_odd) and is_valid_odd(away_odd)):
        logger.debug(f"Dropping invalid quote from {bookmaker.key}: {home_odd}/{away_odd}")
        return None
    if has_draw and not is_valid_odd(draw_odd):
        logger.debug(f"Dropping invalid draw quote from {bookmaker.key}: {draw_odd}")
        return None

    return NormalizedQuote(
        bookmaker=bookmaker.key,
        home_odd=float(home_odd),
        away_odd=float(away_odd),
        draw_odd=float(draw_odd) if has_draw else None,
    )


def normalize_event(event: OddsEvent) -> list[NormalizedQuote]:
    """
    Normalize every bookmaker of an event into canonical quotes.

    Bookmakers appear in provider order; a bookmaker listed twice keeps
    its first usable quote.

    Args:
        event: Validated provider event

    Returns:
        One NormalizedQuote per bookmaker with a complete h2h market
    """
    quotes: list[NormalizedQuote] = []
    seen: set[str] = set()

    for bookmaker in event.bookmakers:
        if bookmaker.key in seen:
            continue
        quote = normalize_bookmaker(bookmaker, event.home_team, event.away_team)
        if quote is None:
            continue
        seen.add(bookmaker.key)
        quotes.append(quote)

    return quotes


def normalize_events(raw_events: list[Any], sport_key: str) -> list[tuple[GameRecord, list[NormalizedQuote]]]:
    """
    Normalize a whole provider response.

    Events that fail validation are logged and skipped.
    """
    normalized = []
    for raw in raw_events:
        try:
            event = parse_event(raw)
        except ValidationError as e:
            logger.warning(f"Skipping malformed event: {e.error_count()} validation error(s)")
            continue
        normalized.append((event_to_game(event, sport_key), normalize_event(event)))

    logger.info(f"Normalized {len(normalized)} of {len(raw_events)} events for {sport_key}")
    return normalized
