"""
Data source clients for the surebet scanner.

Available sources:
- OddsAPIClient: The Odds API for head-to-head bookmaker odds
"""
from .base import (
    AuthenticationError,
    BaseDataSource,
    ConfigurationError,
    DataSourceError,
    DataSourceHealth,
    DataSourceStatus,
    RateLimitError,
    UpstreamFetchError,
)
from .odds_api import OddsAPIClient

__all__ = [
    # Base classes
    "BaseDataSource",
    "DataSourceError",
    "DataSourceHealth",
    "DataSourceStatus",
    # Errors
    "AuthenticationError",
    "ConfigurationError",
    "RateLimitError",
    "UpstreamFetchError",
    # Clients
    "OddsAPIClient",
]
