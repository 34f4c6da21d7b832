"""Cross-bookmaker arbitrage (surebet) detection over The Odds API."""

__version__ = "0.1.0"
