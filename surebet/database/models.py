"""
SQLAlchemy ORM models for the surebet scanner.

Defines database schema for games, bookmaker quotes, the arbitrage log and
sync bookkeeping.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class Game(Base):
    """Provider event, upserted by external_id."""

    __tablename__ = "games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    sport: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    league: Mapped[str] = mapped_column(String(100), nullable=False)
    home_team: Mapped[str] = mapped_column(String(100), nullable=False)
    away_team: Mapped[str] = mapped_column(String(100), nullable=False)
    game_datetime: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    status: Mapped[str] = mapped_column(String(20), default="open", nullable=False)

    # Metadata
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships
    odds: Mapped[list["Odd"]] = relationship(
        back_populates="game", order_by="Odd.id", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("ix_games_datetime", "game_datetime"),)


class Odd(Base):
    """Latest h2h quote of one bookmaker for one game (no history)."""

    __tablename__ = "odds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("games.id"), nullable=False, index=True
    )
    bookmaker: Mapped[str] = mapped_column(String(50), nullable=False)

    home_odd: Mapped[float] = mapped_column(Float, nullable=False)
    draw_odd: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # 1X2 only
    away_odd: Mapped[float] = mapped_column(Float, nullable=False)
    last_update: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationship
    game: Mapped["Game"] = relationship(back_populates="odds")

    __table_args__ = (
        UniqueConstraint("game_id", "bookmaker", name="uq_odds_game_bookmaker"),
    )


class ArbitrageLog(Base):
    """Append-only record of a detected opportunity."""

    __tablename__ = "arbitrage_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("games.id"), nullable=False, index=True
    )

    # Denormalized at detection time
    home_team: Mapped[str] = mapped_column(String(100), nullable=False)
    away_team: Mapped[str] = mapped_column(String(100), nullable=False)
    sport: Mapped[str] = mapped_column(String(50), nullable=False)
    league: Mapped[str] = mapped_column(String(100), nullable=False)

    # Legs: home at bookmaker A, away at bookmaker B
    bookmaker_a: Mapped[str] = mapped_column(String(50), nullable=False)
    bookmaker_b: Mapped[str] = mapped_column(String(50), nullable=False)
    odd_a: Mapped[float] = mapped_column(Float, nullable=False)
    odd_b: Mapped[float] = mapped_column(Float, nullable=False)

    arb_index: Mapped[float] = mapped_column(Float, nullable=False)
    profit_percent: Mapped[float] = mapped_column(Float, nullable=False)
    detected_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_arbitrage_log_detected", "detected_at"),
        Index("ix_arbitrage_log_sport", "sport"),
    )


class SyncStatus(Base):
    """Single row (id=1) describing the most recent completed sync."""

    __tablename__ = "sync_status"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    last_run_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    sport_key: Mapped[str] = mapped_column(String(100), nullable=False)


class SyncRunStats(Base):
    """Totals of one scheduled multi-sport run."""

    __tablename__ = "hourly_sync_stats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sync_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    total_games: Mapped[int] = mapped_column(Integer, default=0)
    total_odds: Mapped[int] = mapped_column(Integer, default=0)
    total_arbitrages: Mapped[int] = mapped_column(Integer, default=0)
    sports_synced: Mapped[int] = mapped_column(Integer, default=0)


def init_db(database_url: str) -> Engine:
    """
    Initialize the database with all tables.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        The engine the tables were created on
    """
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)
    return engine


def get_engine(database_url: str) -> Engine:
    """
    Get SQLAlchemy engine for database operations.

    In-memory SQLite URLs share one connection so every session sees the
    same tables.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        SQLAlchemy Engine
    """
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        from sqlalchemy.pool import StaticPool

        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url)
