"""
Persistence layer for games, quotes, the arbitrage log and sync bookkeeping.

Games and quotes are upserted (replace on conflict), the arbitrage log and
run statistics are append-only, and the sync status is a single row.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from surebet.config.constants import sport_category

from .models import ArbitrageLog, Game, Odd, SyncRunStats, SyncStatus, utcnow

SYNC_STATUS_ROW_ID = 1


class RepositoryError(Exception):
    """A storage operation failed."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


@dataclass(frozen=True)
class StoredGame:
    """Identity and denormalized fields of a stored game."""

    id: int
    external_id: str
    sport: str
    league: str
    home_team: str
    away_team: str


@dataclass(frozen=True)
class SyncStatusRecord:
    last_run_at: datetime
    sport_key: str


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to UTC; naive datetimes are taken as UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class OddsRepository(ABC):
    """Storage operations needed by the sync and the API."""

    @abstractmethod
    def upsert_game(self, game: Any) -> StoredGame:
        """Insert or replace a game keyed by external_id."""

    @abstractmethod
    def upsert_odd(self, game_id: int, quote: Any) -> None:
        """Insert or replace the quote keyed by (game_id, bookmaker)."""

    @abstractmethod
    def append_arbitrage(self, game: StoredGame, opportunity: Any) -> None:
        """Append one detected opportunity to the log."""

    @abstractmethod
    def set_sync_status(self, sport_key: str, at: Optional[datetime] = None) -> None:
        """Record the most recent completed sync."""

    @abstractmethod
    def get_sync_status(self) -> Optional[SyncStatusRecord]:
        """Most recent completed sync, or None if none has completed."""

    @abstractmethod
    def append_run_stats(
        self,
        total_games: int,
        total_odds: int,
        total_arbitrages: int,
        sports_synced: int,
        sync_time: Optional[datetime] = None,
    ) -> None:
        """Append the totals of one multi-sport run."""

    @abstractmethod
    def list_run_stats(self, limit: int = 24) -> list[SyncRunStats]:
        """Most recent multi-sport runs, newest first."""

    @abstractmethod
    def list_games(self, sport_key: Optional[str] = None) -> list[Game]:
        """Games with their quotes, soonest first."""

    @abstractmethod
    def get_game(self, game_id: int) -> Optional[Game]:
        """One game with its quotes."""

    @abstractmethod
    def list_arbitrage_logs(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        sport: Optional[str] = None,
    ) -> list[ArbitrageLog]:
        """Logged opportunities, newest first."""


class SQLAlchemyRepository(OddsRepository):
    """
    OddsRepository backed by a SQLAlchemy engine.

    Each operation runs in its own session and commits on success; any
    SQLAlchemy failure is rolled back and re-raised as RepositoryError.
    Returned ORM objects are detached with their attributes loaded.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    def _session(self) -> Session:
        return self._session_factory()

    def _fail(self, action: str, error: SQLAlchemyError) -> RepositoryError:
        logger.error(f"Repository {action} failed: {error}")
        return RepositoryError(f"Failed to {action}: {error}", original_error=error)

    def upsert_game(self, game: Any) -> StoredGame:
        try:
            with self._session() as session, session.begin():
                row = session.scalar(
                    select(Game).where(Game.external_id == game.external_id)
                )
                if row is None:
                    row = Game(external_id=game.external_id)
                    session.add(row)

                row.sport = game.sport
                row.league = game.league
                row.home_team = game.home_team
                row.away_team = game.away_team
                row.game_datetime = _as_utc(game.game_datetime)
                row.status = game.status
                row.updated_at = utcnow()
                session.flush()

                return StoredGame(
                    id=row.id,
                    external_id=row.external_id,
                    sport=row.sport,
                    league=row.league,
                    home_team=row.home_team,
                    away_team=row.away_team,
                )
        except SQLAlchemyError as e:
            raise self._fail(f"upsert game {game.external_id}", e) from e

    def upsert_odd(self, game_id: int, quote: Any) -> None:
        try:
            with self._session() as session, session.begin():
                row = session.scalar(
                    select(Odd).where(
                        Odd.game_id == game_id, Odd.bookmaker == quote.bookmaker
                    )
                )
                if row is None:
                    row = Odd(game_id=game_id, bookmaker=quote.bookmaker)
                    session.add(row)

                row.home_odd = quote.home_odd
                row.away_odd = quote.away_odd
                row.draw_odd = quote.draw_odd
                row.last_update = utcnow()
        except SQLAlchemyError as e:
            raise self._fail(f"upsert odds {game_id}/{quote.bookmaker}", e) from e

    def append_arbitrage(self, game: StoredGame, opportunity: Any) -> None:
        try:
            with self._session() as session, session.begin():
                session.add(
                    ArbitrageLog(
                        game_id=game.id,
                        home_team=game.home_team,
                        away_team=game.away_team,
                        sport=game.sport,
                        league=game.league,
                        bookmaker_a=opportunity.bookmaker_a,
                        bookmaker_b=opportunity.bookmaker_b,
                        odd_a=opportunity.odd_a,
                        odd_b=opportunity.odd_b,
                        arb_index=opportunity.arb_index,
                        profit_percent=opportunity.profit_percent,
                        detected_at=_as_utc(opportunity.detected_at) or utcnow(),
                    )
                )
        except SQLAlchemyError as e:
            raise self._fail(f"log arbitrage for game {game.id}", e) from e

    def set_sync_status(self, sport_key: str, at: Optional[datetime] = None) -> None:
        try:
            with self._session() as session, session.begin():
                row = session.get(SyncStatus, SYNC_STATUS_ROW_ID)
                if row is None:
                    row = SyncStatus(id=SYNC_STATUS_ROW_ID)
                    session.add(row)
                row.last_run_at = _as_utc(at) or utcnow()
                row.sport_key = sport_key
        except SQLAlchemyError as e:
            raise self._fail("update sync status", e) from e

    def get_sync_status(self) -> Optional[SyncStatusRecord]:
        try:
            with self._session() as session:
                row = session.get(SyncStatus, SYNC_STATUS_ROW_ID)
                if row is None:
                    return None
                return SyncStatusRecord(
                    last_run_at=_as_utc(row.last_run_at), sport_key=row.sport_key
                )
        except SQLAlchemyError as e:
            raise self._fail("read sync status", e) from e

    def append_run_stats(
        self,
        total_games: int,
        total_odds: int,
        total_arbitrages: int,
        sports_synced: int,
        sync_time: Optional[datetime] = None,
    ) -> None:
        try:
            with self._session() as session, session.begin():
                session.add(
                    SyncRunStats(
                        sync_time=_as_utc(sync_time) or utcnow(),
                        total_games=total_games,
                        total_odds=total_odds,
                        total_arbitrages=total_arbitrages,
                        sports_synced=sports_synced,
                    )
                )
        except SQLAlchemyError as e:
            raise self._fail("append run stats", e) from e

    def list_run_stats(self, limit: int = 24) -> list[SyncRunStats]:
        try:
            with self._session() as session:
                stmt = (
                    select(SyncRunStats)
                    .order_by(SyncRunStats.sync_time.desc(), SyncRunStats.id.desc())
                    .limit(limit)
                )
                return list(session.scalars(stmt))
        except SQLAlchemyError as e:
            raise self._fail("list run stats", e) from e

    def list_games(self, sport_key: Optional[str] = None) -> list[Game]:
        try:
            with self._session() as session:
                stmt = select(Game).options(selectinload(Game.odds))
                if sport_key:
                    stmt = stmt.where(Game.sport == sport_category(sport_key).value)
                stmt = stmt.order_by(Game.game_datetime.asc(), Game.id.asc())
                return list(session.scalars(stmt))
        except SQLAlchemyError as e:
            raise self._fail("list games", e) from e

    def get_game(self, game_id: int) -> Optional[Game]:
        try:
            with self._session() as session:
                stmt = (
                    select(Game)
                    .options(selectinload(Game.odds))
                    .where(Game.id == game_id)
                )
                return session.scalar(stmt)
        except SQLAlchemyError as e:
            raise self._fail(f"read game {game_id}", e) from e

    def list_arbitrage_logs(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        sport: Optional[str] = None,
    ) -> list[ArbitrageLog]:
        try:
            with self._session() as session:
                stmt = select(ArbitrageLog)
                if start is not None:
                    stmt = stmt.where(ArbitrageLog.detected_at >= _as_utc(start))
                if end is not None:
                    stmt = stmt.where(ArbitrageLog.detected_at <= _as_utc(end))
                if sport:
                    stmt = stmt.where(ArbitrageLog.sport == sport)
                stmt = stmt.order_by(
                    ArbitrageLog.detected_at.desc(), ArbitrageLog.id.desc()
                )
                return list(session.scalars(stmt))
        except SQLAlchemyError as e:
            raise self._fail("list arbitrage logs", e) from e
