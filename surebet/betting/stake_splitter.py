"""
Stake allocation for arbitrage combinations.

Splits a total investment across outcomes so that every outcome returns the
same payout. These are pure allocation formulas: they do not check that an
arbitrage exists and perform no bounds checking on the odds. Callers gate
on compute_arbitrage() and the odds validity guard first.
"""
from typing import NamedTuple


class StakeSplit(NamedTuple):
    """Two-leg stake allocation."""

    payout: float  # Guaranteed return whichever outcome wins
    stake_a: float
    stake_b: float
    profit: float  # payout - total (negative without an arb)
    profit_percent: float


class StakeSplitThreeWay(NamedTuple):
    """Three-leg (home/draw/away) stake allocation."""

    payout: float
    stake_home: float
    stake_draw: float
    stake_away: float
    profit: float
    profit_percent: float


def compute_stake_split(total: float, odd_a: float, odd_b: float) -> StakeSplit:
    """
    Split a total stake across two outcomes to equalize payout.

    stake_a * odd_a == stake_b * odd_b == payout.

    Args:
        total: Total amount to distribute
        odd_a: Decimal odds for outcome A
        odd_b: Decimal odds for outcome B

    Returns:
        StakeSplit with payout, stakes and profit

    Examples:
        >>> split = compute_stake_split(500, 2.10, 2.05)
        >>> round(split.payout, 2), round(split.stake_a, 2), round(split.stake_b, 2)
        (518.67, 246.99, 253.01)
    """
    inv_sum = 1 / odd_a + 1 / odd_b
    payout = total / inv_sum
    profit = payout - total

    return StakeSplit(
        payout=payout,
        stake_a=payout / odd_a,
        stake_b=payout / odd_b,
        profit=profit,
        profit_percent=profit / total * 100,
    )


def compute_stake_split_three_way(
    total: float,
    home_odd: float,
    draw_odd: float,
    away_odd: float,
) -> StakeSplitThreeWay:
    """
    Split a total stake across home, draw and away to equalize payout.

    Args:
        total: Total amount to distribute
        home_odd: Decimal odds for the home win
        draw_odd: Decimal odds for the draw
        away_odd: Decimal odds for the away win

    Returns:
        StakeSplitThreeWay with payout, stakes and profit
    """
    inv_sum = 1 / home_odd + 1 / draw_odd + 1 / away_odd
    payout = total / inv_sum
    profit = payout - total

    return StakeSplitThreeWay(
        payout=payout,
        stake_home=payout / home_odd,
        stake_draw=payout / draw_odd,
        stake_away=payout / away_odd,
        profit=profit,
        profit_percent=profit / total * 100,
    )
