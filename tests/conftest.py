"""Shared test fixtures for the surebet scanner tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from surebet.data.sources.base import UpstreamFetchError
from surebet.database.models import init_db
from surebet.database.repository import RepositoryError, SQLAlchemyRepository


def make_bookmaker(key: str, home: tuple[str, Any], away: tuple[str, Any], draw: Any = None) -> dict:
    """Provider bookmaker entry with a single h2h market."""
    outcomes = [
        {"name": home[0], "price": home[1]},
        {"name": away[0], "price": away[1]},
    ]
    if draw is not None:
        outcomes.append({"name": "Draw", "price": draw})
    return {
        "key": key,
        "title": key.title(),
        "markets": [{"key": "h2h", "outcomes": outcomes}],
    }


def make_event(
    event_id: str,
    home_team: str,
    away_team: str,
    books: list[tuple[str, Any, Any, Any]],
    sport_title: Optional[str] = "NBA",
    commence_time: str = "2026-10-20T00:00:00Z",
) -> dict:
    """Provider event; books are (key, home price, away price, draw price)."""
    return {
        "id": event_id,
        "sport_title": sport_title,
        "commence_time": commence_time,
        "home_team": home_team,
        "away_team": away_team,
        "bookmakers": [
            make_bookmaker(key, (home_team, h), (away_team, a), d)
            for key, h, a, d in books
        ],
    }


@pytest.fixture
def repository() -> SQLAlchemyRepository:
    """Repository over a fresh in-memory SQLite database."""
    engine = init_db("sqlite://")
    return SQLAlchemyRepository(engine)


@pytest.fixture
def nba_event() -> dict:
    """Two-way event where bet365 home + pinnacle away is an arbitrage."""
    return make_event(
        "evt-nba-1",
        "Boston Celtics",
        "Miami Heat",
        [
            ("bet365", 2.10, 1.70, None),
            ("pinnacle", 1.75, 2.05, None),
        ],
    )


@pytest.fixture
def soccer_event() -> dict:
    """
    1X2 event with three bookmakers.

    bet365 and unibet together give the triple 2.50 / 4.00 / 3.50.
    """
    return make_event(
        "evt-epl-1",
        "Arsenal",
        "Chelsea",
        [
            ("bet365", 2.50, 3.00, 3.40),
            ("unibet", 2.40, 3.50, 4.00),
            ("williamhill", 2.45, 2.90, 3.60),
        ],
        sport_title="EPL",
    )


class FakeOddsClient:
    """Stand-in for OddsAPIClient serving canned events per sport key."""

    source_name = "odds_api"

    def __init__(
        self,
        events_by_sport: Optional[dict[str, list[dict]]] = None,
        failing: Optional[dict[str, Exception]] = None,
    ):
        self.events_by_sport = events_by_sport or {}
        self.failing = failing or {}
        self.calls: list[str] = []
        self.closed = False

    async def get_odds(self, sport_key: str) -> list[dict]:
        self.calls.append(sport_key)
        if sport_key in self.failing:
            raise self.failing[sport_key]
        return list(self.events_by_sport.get(sport_key, []))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client(nba_event, soccer_event) -> FakeOddsClient:
    return FakeOddsClient(
        {
            "basketball_nba": [nba_event],
            "soccer_epl": [soccer_event],
        }
    )


@pytest.fixture
def upstream_error() -> UpstreamFetchError:
    return UpstreamFetchError("Error fetching odds: 503", "odds_api", status_code=503)


class FlakyRepository(SQLAlchemyRepository):
    """SQLAlchemyRepository that fails selected operations."""

    def __init__(
        self,
        engine: Any,
        fail_games: tuple[str, ...] = (),
        fail_arbitrage: bool = False,
        fail_sync_status: bool = False,
        fail_run_stats: bool = False,
    ):
        super().__init__(engine)
        self.fail_games = set(fail_games)
        self.fail_arbitrage = fail_arbitrage
        self.fail_sync_status = fail_sync_status
        self.fail_run_stats = fail_run_stats

    def upsert_game(self, game):
        if game.external_id in self.fail_games:
            raise RepositoryError(f"cannot save {game.external_id}")
        return super().upsert_game(game)

    def append_arbitrage(self, game, opportunity):
        if self.fail_arbitrage:
            raise RepositoryError("arbitrage log unavailable")
        return super().append_arbitrage(game, opportunity)

    def set_sync_status(self, sport_key, at=None):
        if self.fail_sync_status:
            raise RepositoryError("sync status unavailable")
        return super().set_sync_status(sport_key, at)

    def append_run_stats(self, *args, **kwargs):
        if self.fail_run_stats:
            raise RepositoryError("run stats unavailable")
        return super().append_run_stats(*args, **kwargs)


@pytest.fixture
def flaky_repository_factory():
    def factory(**kwargs) -> FlakyRepository:
        return FlakyRepository(init_db("sqlite://"), **kwargs)

    return factory
