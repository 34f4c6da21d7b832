"""
Bookmaker comparison across stored games.

For every bookmaker: how often it offers the best home and best away price
of a game, and its average home and away prices over the games it quotes.
"""
from dataclasses import dataclass
from typing import Any, Sequence


@dataclass
class BookmakerStats:
    """Best-price counts and average prices for one bookmaker."""

    bookmaker: str
    best_home_count: int = 0
    best_away_count: int = 0
    total_games: int = 0
    home_odd_sum: float = 0.0
    away_odd_sum: float = 0.0

    @property
    def best_total(self) -> int:
        return self.best_home_count + self.best_away_count

    @property
    def avg_home_odd(self) -> float:
        return self.home_odd_sum / self.total_games if self.total_games else 0.0

    @property
    def avg_away_odd(self) -> float:
        return self.away_odd_sum / self.total_games if self.total_games else 0.0


def available_bookmakers(games: Sequence[Any]) -> list[str]:
    """Sorted distinct bookmaker keys quoted on any of the games."""
    return sorted({odd.bookmaker for game in games for odd in game.odds})


def compute_bookmaker_stats(games: Sequence[Any], limit: int = 10) -> list[BookmakerStats]:
    """
    Rank bookmakers by how often they hold the best price.

    Ties for the best price of a game go to the bookmaker quoted first.
    Bookmakers with equal totals keep first-seen order.

    Args:
        games: Objects with an odds list (bookmaker, home_odd, away_odd)
        limit: Number of bookmakers returned

    Returns:
        Stats ordered by best home count plus best away count, descending
    """
    stats: dict[str, BookmakerStats] = {}

    for game in games:
        best_home = best_away = None
        for odd in game.odds:
            stat = stats.setdefault(odd.bookmaker, BookmakerStats(odd.bookmaker))
            stat.home_odd_sum += odd.home_odd
            stat.away_odd_sum += odd.away_odd
            stat.total_games += 1

            if odd.home_odd > 0 and (best_home is None or odd.home_odd > best_home.home_odd):
                best_home = odd
            if odd.away_odd > 0 and (best_away is None or odd.away_odd > best_away.away_odd):
                best_away = odd

        if best_home is not None:
            stats[best_home.bookmaker].best_home_count += 1
        if best_away is not None:
            stats[best_away.bookmaker].best_away_count += 1

    ranked = sorted(stats.values(), key=lambda s: s.best_total, reverse=True)
    return ranked[:limit]
