"""
Cross-book arbitrage scanner.

Identifies guaranteed profit opportunities by pairing the quotes that
different bookmakers offer for the same game.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterator, Optional, Protocol, Sequence, Union

from .arbitrage import (
    ArbitrageCalc,
    compute_arbitrage,
    compute_arbitrage_three_way,
    is_valid_odd,
)
from .stake_splitter import (
    StakeSplit,
    StakeSplitThreeWay,
    compute_stake_split,
    compute_stake_split_three_way,
)


class Quote(Protocol):
    """Anything carrying one bookmaker's h2h prices for a game."""

    bookmaker: str
    home_odd: float
    away_odd: float
    draw_odd: Optional[float]


class Combo(str, Enum):
    """Which leg assignment produced an evaluation."""

    HOME_A_AWAY_B = "home_houseA_away_houseB"
    HOME_B_AWAY_A = "home_houseB_away_houseA"
    THREE_WAY = "three_way"


@dataclass
class ArbitrageOpportunity:
    """A two-leg combination: home leg at one book, away leg at another."""

    bookmaker_a: str  # Home leg
    bookmaker_b: str  # Away leg
    odd_a: float
    odd_b: float
    arb_index: float
    profit_percent: float
    detected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def stake_split(self, total: float) -> StakeSplit:
        """Equal-payout stakes for a total investment."""
        return compute_stake_split(total, self.odd_a, self.odd_b)


@dataclass
class ScanResult:
    """Results from scanning one game's quotes pairwise."""

    opportunities: list[ArbitrageOpportunity] = field(default_factory=list)
    evaluations: int = 0  # Leg assignments checked
    scanned_books: int = 0
    scan_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_opportunities(self) -> bool:
        return len(self.opportunities) > 0

    def get_top_opportunities(self, n: int = 5) -> list[ArbitrageOpportunity]:
        """Get top N opportunities sorted by profit percentage."""
        return sorted(
            self.opportunities, key=lambda x: x.profit_percent, reverse=True
        )[:n]


@dataclass
class SurebetEvaluation:
    """Best combination for a single bookmaker pair."""

    has_arbitrage: bool
    arb_index: float
    profit_percent: float
    combo: Optional[Combo]
    house_a: str = ""
    house_b: str = ""
    is_three_way: bool = False

    # Two-way legs (home odd / away odd actually used)
    odd_a: float = 0.0
    odd_b: float = 0.0
    home_bookmaker: str = ""
    away_bookmaker: str = ""

    # Three-way only
    odd_draw: Optional[float] = None
    draw_bookmaker: Optional[str] = None

    def stake_split(self, total: float) -> Union[StakeSplit, StakeSplitThreeWay, None]:
        """
        Equal-payout stakes for a total investment.

        Returns None when the evaluation has no usable odds.
        """
        if self.combo is None:
            return None
        if not (is_valid_odd(self.odd_a) and is_valid_odd(self.odd_b)):
            return None
        if self.is_three_way:
            return compute_stake_split_three_way(
                total, self.odd_a, self.odd_draw, self.odd_b
            )
        return compute_stake_split(total, self.odd_a, self.odd_b)


class ArbitrageScanner:
    """
    Scanner for cross-book arbitrage opportunities.

    Arbitrage exists when the sum of implied probabilities across
    bookmakers is less than 1. This guarantees a profit regardless of
    outcome.

    Every unordered bookmaker pair is checked in both leg assignments,
    since a book that is generous on the home side need not be stingy on
    the away side. N quotes give 2 * C(N, 2) evaluations.

    Usage:
        >>> scanner = ArbitrageScanner()
        >>> result = scanner.scan_pairs(quotes)
        >>> for arb in result.opportunities:
        ...     print(f"{arb.profit_percent:.2f}% {arb.bookmaker_a}/{arb.bookmaker_b}")
    """

    def __init__(self, min_profit_percent: float = 0.0):
        """
        Initialize the arbitrage scanner.

        Args:
            min_profit_percent: Minimum profit (in percent) to report
        """
        self.min_profit_percent = min_profit_percent

    def _is_reportable(self, calc: ArbitrageCalc) -> bool:
        return calc.has_arbitrage and calc.profit_percent >= self.min_profit_percent

    @staticmethod
    def iter_leg_assignments(quotes: Sequence[Quote]) -> Iterator[tuple[Quote, Quote]]:
        """Yield (home quote, away quote) for both assignments of every pair."""
        for i in range(len(quotes)):
            for j in range(i + 1, len(quotes)):
                yield quotes[i], quotes[j]
                yield quotes[j], quotes[i]

    def scan_pairs(self, quotes: Sequence[Quote]) -> ScanResult:
        """
        Scan a game's quotes for two-leg arbitrage.

        Args:
            quotes: One quote per bookmaker for the same game

        Returns:
            ScanResult with every profitable leg assignment
        """
        result = ScanResult(scanned_books=len(quotes))

        for home_quote, away_quote in self.iter_leg_assignments(quotes):
            result.evaluations += 1
            calc = compute_arbitrage(home_quote.home_odd, away_quote.away_odd)
            if not self._is_reportable(calc):
                continue

            result.opportunities.append(
                ArbitrageOpportunity(
                    bookmaker_a=home_quote.bookmaker,
                    bookmaker_b=away_quote.bookmaker,
                    odd_a=home_quote.home_odd,
                    odd_b=away_quote.away_odd,
                    arb_index=calc.arb_index,
                    profit_percent=calc.profit_percent,
                )
            )

        return result

    def evaluate_three_way(self, house_a: Quote, house_b: Quote) -> SurebetEvaluation:
        """
        Evaluate a 1X2 market across two bookmakers.

        Takes the best price of the two books independently for each
        outcome and tests that single triple. Ties go to house A.
        """
        best_home = max(house_a.home_odd, house_b.home_odd)
        best_draw = max(house_a.draw_odd or 0, house_b.draw_odd or 0)
        best_away = max(house_a.away_odd, house_b.away_odd)

        if not best_draw:
            return SurebetEvaluation(
                has_arbitrage=False,
                arb_index=0.0,
                profit_percent=0.0,
                combo=None,
                house_a=house_a.bookmaker,
                house_b=house_b.bookmaker,
                is_three_way=True,
            )

        calc = compute_arbitrage_three_way(best_home, best_draw, best_away)

        def pick(a_odd: Optional[float], b_odd: Optional[float]) -> str:
            return house_a.bookmaker if (a_odd or 0) >= (b_odd or 0) else house_b.bookmaker

        return SurebetEvaluation(
            has_arbitrage=calc.has_arbitrage,
            arb_index=calc.arb_index,
            profit_percent=calc.profit_percent,
            combo=Combo.THREE_WAY,
            house_a=house_a.bookmaker,
            house_b=house_b.bookmaker,
            is_three_way=True,
            odd_a=best_home,
            odd_b=best_away,
            home_bookmaker=pick(house_a.home_odd, house_b.home_odd),
            away_bookmaker=pick(house_a.away_odd, house_b.away_odd),
            odd_draw=best_draw,
            draw_bookmaker=pick(house_a.draw_odd, house_b.draw_odd),
        )

    def evaluate_two_way(self, house_a: Quote, house_b: Quote) -> SurebetEvaluation:
        """
        Evaluate both leg assignments of a pair and keep the better one.

        The lower arbitrage index wins; an assignment with unusable odds
        never beats a usable one.
        """
        combo1 = compute_arbitrage(house_a.home_odd, house_b.away_odd)
        combo2 = compute_arbitrage(house_b.home_odd, house_a.away_odd)

        def rank(calc: ArbitrageCalc, home_odd: float, away_odd: float) -> float:
            if not (is_valid_odd(home_odd) and is_valid_odd(away_odd)):
                return float("inf")
            return calc.arb_index

        if rank(combo1, house_a.home_odd, house_b.away_odd) <= rank(
            combo2, house_b.home_odd, house_a.away_odd
        ):
            calc, combo, home, away = combo1, Combo.HOME_A_AWAY_B, house_a, house_b
        else:
            calc, combo, home, away = combo2, Combo.HOME_B_AWAY_A, house_b, house_a

        return SurebetEvaluation(
            has_arbitrage=calc.has_arbitrage,
            arb_index=calc.arb_index,
            profit_percent=calc.profit_percent,
            combo=combo,
            house_a=house_a.bookmaker,
            house_b=house_b.bookmaker,
            odd_a=home.home_odd,
            odd_b=away.away_odd,
            home_bookmaker=home.bookmaker,
            away_bookmaker=away.bookmaker,
        )

    def evaluate_game(
        self,
        quotes: Sequence[Quote],
        three_way: bool,
        house_a: Optional[str] = None,
        house_b: Optional[str] = None,
    ) -> SurebetEvaluation:
        """
        Evaluate one bookmaker pair for a game.

        Args:
            quotes: The game's quotes, one per bookmaker
            three_way: Whether the sport's market has a draw outcome
            house_a: Bookmaker key for house A (default: first bookmaker
                other than house B)
            house_b: Bookmaker key for house B (default: first bookmaker
                other than house A)

        Returns:
            SurebetEvaluation for the selected pair
        """
        distinct = list(dict.fromkeys(q.bookmaker for q in quotes))
        key_a = house_a or next((b for b in distinct if b != house_b), None)
        key_b = house_b or next((b for b in distinct if b != key_a), None)

        by_book = {q.bookmaker: q for q in quotes}
        quote_a = by_book.get(key_a) if key_a else None
        quote_b = by_book.get(key_b) if key_b else None

        if quote_a is None or quote_b is None:
            return SurebetEvaluation(
                has_arbitrage=False,
                arb_index=0.0,
                profit_percent=0.0,
                combo=None,
                is_three_way=three_way,
            )

        if three_way:
            return self.evaluate_three_way(quote_a, quote_b)
        return self.evaluate_two_way(quote_a, quote_b)
