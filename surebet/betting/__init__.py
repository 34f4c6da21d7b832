"""
Arbitrage math and scanning.

Provides tools for:
- Two-way and three-way arbitrage detection
- Equal-payout stake splitting
- Cross-book pair scanning
- Risk-tier picks
- Bookmaker best-price comparison
"""

from .arbitrage import (
    ArbitrageCalc,
    combined_odds,
    compute_arbitrage,
    compute_arbitrage_three_way,
    implied_probability,
    is_valid_odd,
    joint_probability,
)

from .stake_splitter import (
    StakeSplit,
    StakeSplitThreeWay,
    compute_stake_split,
    compute_stake_split_three_way,
)

from .arbitrage_scanner import (
    ArbitrageOpportunity,
    ArbitrageScanner,
    Combo,
    ScanResult,
    SurebetEvaluation,
)

from .risk_profile import RiskPick, pick_for_game, select_picks

from .bookmaker_stats import BookmakerStats, available_bookmakers, compute_bookmaker_stats

__all__ = [
    # Calculator
    "ArbitrageCalc",
    "combined_odds",
    "compute_arbitrage",
    "compute_arbitrage_three_way",
    "implied_probability",
    "is_valid_odd",
    "joint_probability",
    # Stake splitting
    "StakeSplit",
    "StakeSplitThreeWay",
    "compute_stake_split",
    "compute_stake_split_three_way",
    # Scanner
    "ArbitrageOpportunity",
    "ArbitrageScanner",
    "Combo",
    "ScanResult",
    "SurebetEvaluation",
    # Risk
    "RiskPick",
    "pick_for_game",
    "select_picks",
    # Bookmaker comparison
    "BookmakerStats",
    "available_bookmakers",
    "compute_bookmaker_stats",
]
