"""Tests for pairwise cross-book scanning and pair evaluation."""

from __future__ import annotations

import pytest

from surebet.betting.arbitrage_scanner import ArbitrageScanner, Combo
from surebet.data.normalizer import NormalizedQuote


def quote(book: str, home: float, away: float, draw: float | None = None) -> NormalizedQuote:
    return NormalizedQuote(bookmaker=book, home_odd=home, away_odd=away, draw_odd=draw)


@pytest.fixture
def scanner() -> ArbitrageScanner:
    return ArbitrageScanner()


@pytest.fixture
def three_books() -> list[NormalizedQuote]:
    return [
        quote("a", 2.10, 1.70),
        quote("b", 1.75, 2.05),
        quote("c", 1.90, 1.95),
    ]


class TestScanPairs:
    def test_evaluates_both_assignments_of_every_pair(self, scanner, three_books):
        result = scanner.scan_pairs(three_books)

        assert result.evaluations == 6
        assert result.scanned_books == 3

    def test_reports_only_profitable_assignments(self, scanner, three_books):
        result = scanner.scan_pairs(three_books)

        legs = {(o.bookmaker_a, o.bookmaker_b) for o in result.opportunities}
        assert legs == {("a", "b"), ("a", "c")}
        assert all(o.arb_index < 1 for o in result.opportunities)

    def test_home_leg_is_bookmaker_a(self, scanner, three_books):
        result = scanner.scan_pairs(three_books)
        best = result.get_top_opportunities(1)[0]

        assert (best.bookmaker_a, best.odd_a) == ("a", 2.10)
        assert (best.bookmaker_b, best.odd_b) == ("b", 2.05)
        assert best.profit_percent == pytest.approx(3.60, abs=0.01)

    def test_reverse_assignment_is_found(self, scanner):
        # Only home at the second book + away at the first is profitable
        result = scanner.scan_pairs([quote("x", 1.50, 2.20), quote("y", 2.30, 1.40)])

        assert [(o.bookmaker_a, o.bookmaker_b) for o in result.opportunities] == [("y", "x")]

    @pytest.mark.parametrize("count", [0, 1])
    def test_fewer_than_two_books(self, scanner, count):
        result = scanner.scan_pairs([quote("a", 2.5, 2.5)][:count])

        assert result.evaluations == 0
        assert not result.has_opportunities

    def test_min_profit_filter(self, three_books):
        result = ArbitrageScanner(min_profit_percent=2.0).scan_pairs(three_books)

        assert [(o.bookmaker_a, o.bookmaker_b) for o in result.opportunities] == [("a", "b")]

    def test_opportunity_stake_split(self, scanner, three_books):
        best = scanner.scan_pairs(three_books).get_top_opportunities(1)[0]
        split = best.stake_split(500)

        assert split.payout == pytest.approx(518.67, abs=0.01)


class TestEvaluateTwoWay:
    def test_keeps_lower_index_assignment(self, scanner):
        evaluation = scanner.evaluate_two_way(quote("a", 2.10, 1.70), quote("b", 1.75, 2.05))

        assert evaluation.combo == Combo.HOME_A_AWAY_B
        assert evaluation.has_arbitrage
        assert (evaluation.home_bookmaker, evaluation.away_bookmaker) == ("a", "b")

    def test_swapped_pair_reports_other_combo(self, scanner):
        evaluation = scanner.evaluate_two_way(quote("b", 1.75, 2.05), quote("a", 2.10, 1.70))

        assert evaluation.combo == Combo.HOME_B_AWAY_A
        assert (evaluation.house_a, evaluation.house_b) == ("b", "a")
        assert (evaluation.odd_a, evaluation.odd_b) == (2.10, 2.05)

    def test_no_arbitrage_still_reports_best_index(self, scanner):
        evaluation = scanner.evaluate_two_way(quote("a", 1.80, 1.80), quote("b", 1.85, 1.90))

        assert not evaluation.has_arbitrage
        assert evaluation.arb_index == pytest.approx(1 / 1.80 + 1 / 1.90)


class TestEvaluateThreeWay:
    def test_best_of_two_triple(self, scanner):
        evaluation = scanner.evaluate_three_way(
            quote("bet365", 2.50, 3.00, 3.40),
            quote("unibet", 2.40, 3.50, 4.00),
        )

        assert evaluation.combo == Combo.THREE_WAY
        assert evaluation.has_arbitrage
        assert evaluation.arb_index == pytest.approx(0.9357, abs=1e-4)
        assert evaluation.home_bookmaker == "bet365"
        assert evaluation.draw_bookmaker == "unibet"
        assert evaluation.away_bookmaker == "unibet"

    def test_overround_triple(self, scanner):
        evaluation = scanner.evaluate_three_way(
            quote("a", 2.50, 3.00, 3.40),
            quote("b", 2.40, 2.90, 3.20),
        )

        assert not evaluation.has_arbitrage
        assert evaluation.arb_index == pytest.approx(1.0275, abs=1e-4)

    def test_no_draw_quoted(self, scanner):
        evaluation = scanner.evaluate_three_way(quote("a", 5.0, 5.0), quote("b", 5.0, 5.0))

        assert evaluation.combo is None
        assert not evaluation.has_arbitrage
        assert evaluation.stake_split(100) is None

    def test_ties_go_to_house_a(self, scanner):
        evaluation = scanner.evaluate_three_way(
            quote("a", 2.50, 3.00, 3.40),
            quote("b", 2.50, 3.00, 3.40),
        )

        assert evaluation.home_bookmaker == evaluation.draw_bookmaker == "a"


class TestEvaluateGame:
    def test_defaults_to_first_two_bookmakers(self, scanner, three_books):
        evaluation = scanner.evaluate_game(three_books, three_way=False)

        assert (evaluation.house_a, evaluation.house_b) == ("a", "b")

    def test_explicit_pair(self, scanner, three_books):
        evaluation = scanner.evaluate_game(three_books, three_way=False, house_a="c", house_b="a")

        assert (evaluation.house_a, evaluation.house_b) == ("c", "a")
        assert evaluation.combo == Combo.HOME_B_AWAY_A
        assert evaluation.has_arbitrage

    def test_default_partner_skips_explicit_house_a(self, scanner, three_books):
        evaluation = scanner.evaluate_game(three_books, three_way=False, house_a="b")

        assert (evaluation.house_a, evaluation.house_b) == ("b", "a")
        assert evaluation.combo == Combo.HOME_B_AWAY_A
        assert evaluation.has_arbitrage

    def test_default_partner_skips_explicit_house_b(self, scanner, three_books):
        evaluation = scanner.evaluate_game(three_books, three_way=False, house_b="a")

        assert (evaluation.house_a, evaluation.house_b) == ("b", "a")

    def test_unknown_bookmaker(self, scanner, three_books):
        evaluation = scanner.evaluate_game(three_books, three_way=False, house_a="zzz")

        assert evaluation.combo is None
        assert not evaluation.has_arbitrage

    def test_single_bookmaker(self, scanner):
        evaluation = scanner.evaluate_game([quote("a", 2.0, 2.0)], three_way=True)

        assert evaluation.combo is None
        assert evaluation.is_three_way

    def test_three_way_stake_split(self, scanner):
        quotes = [quote("bet365", 2.50, 3.00, 3.40), quote("unibet", 2.40, 3.50, 4.00)]
        split = scanner.evaluate_game(quotes, three_way=True).stake_split(500)

        assert split.stake_home * 2.50 == pytest.approx(split.payout)
        assert split.stake_draw * 4.00 == pytest.approx(split.payout)
        assert split.profit > 0
