"""
Arbitrage calculation utilities for decimal odds.

Provides the arbitrage index, guaranteed profit percentage and implied
probability for two-way and three-way markets.
"""
from typing import NamedTuple, Optional, Sequence


class ArbitrageCalc(NamedTuple):
    """Result of an arbitrage check."""

    has_arbitrage: bool
    arb_index: float  # Sum of implied probabilities (< 1 = arb exists)
    profit_percent: float  # (1 - arb_index) * 100, negative without an arb


NO_ARBITRAGE = ArbitrageCalc(has_arbitrage=False, arb_index=0.0, profit_percent=0.0)


def is_valid_odd(odd: Optional[float]) -> bool:
    """
    Check that a decimal odd can be used in arbitrage math.

    Missing, zero and <= 1.0 odds are unusable quotes.

    Examples:
        >>> is_valid_odd(2.10)
        True
        >>> is_valid_odd(1.0)
        False
        >>> is_valid_odd(None)
        False
    """
    return bool(odd) and odd > 1


def _from_index(arb_index: float) -> ArbitrageCalc:
    return ArbitrageCalc(
        has_arbitrage=arb_index < 1,
        arb_index=arb_index,
        profit_percent=(1 - arb_index) * 100,
    )


def compute_arbitrage(odd_a: Optional[float], odd_b: Optional[float]) -> ArbitrageCalc:
    """
    Check if arbitrage exists between two complementary outcomes.

    Arbitrage exists when the sum of implied probabilities is strictly
    below 1. An index of exactly 1 is break-even, not profit.

    Args:
        odd_a: Decimal odds for outcome A (e.g. home at bookmaker A)
        odd_b: Decimal odds for outcome B (e.g. away at bookmaker B)

    Returns:
        ArbitrageCalc; (False, 0, 0) when either odd is unusable

    Examples:
        >>> calc = compute_arbitrage(2.10, 2.05)
        >>> calc.has_arbitrage, round(calc.arb_index, 4), round(calc.profit_percent, 2)
        (True, 0.964, 3.6)
        >>> compute_arbitrage(1.80, 1.90).has_arbitrage
        False
        >>> compute_arbitrage(0, 2.5)
        ArbitrageCalc(has_arbitrage=False, arb_index=0.0, profit_percent=0.0)
    """
    if not (is_valid_odd(odd_a) and is_valid_odd(odd_b)):
        return NO_ARBITRAGE

    return _from_index(1 / odd_a + 1 / odd_b)


def compute_arbitrage_three_way(
    home_odd: Optional[float],
    draw_odd: Optional[float],
    away_odd: Optional[float],
) -> ArbitrageCalc:
    """
    Check if arbitrage exists across the three outcomes of a 1X2 market.

    Only meaningful for sports whose h2h market has a draw outcome.

    Args:
        home_odd: Decimal odds for the home win
        draw_odd: Decimal odds for the draw
        away_odd: Decimal odds for the away win

    Returns:
        ArbitrageCalc; (False, 0, 0) when any odd is unusable

    Examples:
        >>> calc = compute_arbitrage_three_way(2.50, 4.00, 3.50)
        >>> calc.has_arbitrage, round(calc.arb_index, 4)
        (True, 0.9357)
    """
    if not all(is_valid_odd(odd) for odd in (home_odd, draw_odd, away_odd)):
        return NO_ARBITRAGE

    return _from_index(1 / home_odd + 1 / draw_odd + 1 / away_odd)


def implied_probability(odd: Optional[float]) -> float:
    """
    Convert decimal odds to implied probability, as a percentage.

    Note: This includes the bookmaker's margin.

    Examples:
        >>> implied_probability(2.0)
        50.0
        >>> implied_probability(1.0)
        0
    """
    if not is_valid_odd(odd):
        return 0
    return 100 / odd


def combined_odds(odds: Sequence[float]) -> float:
    """
    Combined decimal odds of an accumulator (product of the legs).

    Returns 0 for an empty selection.
    """
    if not odds:
        return 0
    result = 1.0
    for odd in odds:
        result *= odd
    return result


def joint_probability(odds: Sequence[float]) -> float:
    """
    Probability that every leg of an accumulator wins, as a percentage.

    Legs are treated as independent; unusable odds contribute 0.
    """
    if not odds:
        return 0
    result = 1.0
    for odd in odds:
        result *= implied_probability(odd) / 100
    return result * 100
