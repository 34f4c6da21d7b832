"""
Data layer for the surebet scanner.

Provides:
- The Odds API client (live h2h bookmaker odds)
- Normalization of provider events into games and per-bookmaker quotes
"""
from .normalizer import (
    GameRecord,
    NormalizedQuote,
    event_to_game,
    normalize_event,
    normalize_events,
    parse_event,
)
from .sources import (
    ConfigurationError,
    DataSourceError,
    OddsAPIClient,
    UpstreamFetchError,
)

__all__ = [
    # Normalization
    "GameRecord",
    "NormalizedQuote",
    "event_to_game",
    "normalize_event",
    "normalize_events",
    "parse_event",
    # Sources
    "ConfigurationError",
    "DataSourceError",
    "OddsAPIClient",
    "UpstreamFetchError",
]
