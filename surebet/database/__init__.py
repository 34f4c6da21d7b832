"""Storage for games, quotes, the arbitrage log and sync bookkeeping."""
from .models import (
    ArbitrageLog,
    Base,
    Game,
    Odd,
    SyncRunStats,
    SyncStatus,
    get_engine,
    init_db,
)
from .repository import (
    OddsRepository,
    RepositoryError,
    SQLAlchemyRepository,
    StoredGame,
    SyncStatusRecord,
)

__all__ = [
    "ArbitrageLog",
    "Base",
    "Game",
    "Odd",
    "SyncRunStats",
    "SyncStatus",
    "get_engine",
    "init_db",
    "OddsRepository",
    "RepositoryError",
    "SQLAlchemyRepository",
    "StoredGame",
    "SyncStatusRecord",
]
