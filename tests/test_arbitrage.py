"""Tests for arbitrage index, profit and implied probability math."""

from __future__ import annotations

import pytest

from surebet.betting.arbitrage import (
    combined_odds,
    compute_arbitrage,
    compute_arbitrage_three_way,
    implied_probability,
    is_valid_odd,
    joint_probability,
)


class TestComputeArbitrage:
    def test_profitable_pair(self):
        calc = compute_arbitrage(2.10, 2.05)

        assert calc.has_arbitrage is True
        assert calc.arb_index == pytest.approx(1 / 2.10 + 1 / 2.05)
        assert calc.arb_index == pytest.approx(0.96400, abs=1e-5)
        assert calc.profit_percent == pytest.approx(3.60, abs=0.01)

    def test_no_arbitrage_reports_negative_profit(self):
        calc = compute_arbitrage(1.80, 1.90)

        assert calc.has_arbitrage is False
        assert calc.arb_index == pytest.approx(1.0819, abs=1e-4)
        assert calc.profit_percent < 0

    def test_break_even_is_not_arbitrage(self):
        calc = compute_arbitrage(2.0, 2.0)

        assert calc.arb_index == pytest.approx(1.0)
        assert calc.has_arbitrage is False
        assert calc.profit_percent == pytest.approx(0.0)

    @pytest.mark.parametrize(
        "odd_a, odd_b",
        [(None, 2.0), (0, 2.0), (1.0, 2.0), (2.0, 0.5), (2.0, None)],
    )
    def test_invalid_odds_short_circuit(self, odd_a, odd_b):
        calc = compute_arbitrage(odd_a, odd_b)

        assert tuple(calc) == (False, 0, 0)

    def test_has_arbitrage_matches_index(self):
        for odd_a in (1.5, 2.0, 2.5, 3.0, 4.5):
            for odd_b in (1.2, 1.9, 2.2, 3.5, 6.0):
                calc = compute_arbitrage(odd_a, odd_b)
                assert calc.has_arbitrage == (calc.arb_index < 1)
                assert calc.profit_percent == pytest.approx((1 - calc.arb_index) * 100)


class TestComputeArbitrageThreeWay:
    def test_profitable_triple(self):
        calc = compute_arbitrage_three_way(2.50, 4.00, 3.50)

        assert calc.has_arbitrage is True
        assert calc.arb_index == pytest.approx(0.9357, abs=1e-4)
        assert calc.profit_percent == pytest.approx(6.43, abs=0.01)

    def test_overround_triple(self):
        calc = compute_arbitrage_three_way(2.50, 3.40, 3.00)

        assert calc.has_arbitrage is False
        assert calc.arb_index == pytest.approx(1.0275, abs=1e-4)

    def test_missing_draw_is_not_arbitrage(self):
        assert tuple(compute_arbitrage_three_way(5.0, None, 5.0)) == (False, 0, 0)

    def test_draw_at_one_is_invalid(self):
        assert compute_arbitrage_three_way(5.0, 1.0, 5.0).has_arbitrage is False


class TestProbabilityHelpers:
    def test_is_valid_odd(self):
        assert is_valid_odd(1.01)
        assert not is_valid_odd(1.0)
        assert not is_valid_odd(0)
        assert not is_valid_odd(None)

    def test_implied_probability(self):
        assert implied_probability(2.0) == pytest.approx(50.0)
        assert implied_probability(4.0) == pytest.approx(25.0)
        assert implied_probability(1.0) == 0
        assert implied_probability(None) == 0

    def test_combined_odds(self):
        assert combined_odds([2.0, 1.5, 3.0]) == pytest.approx(9.0)
        assert combined_odds([]) == 0

    def test_joint_probability(self):
        assert joint_probability([2.0, 2.0]) == pytest.approx(25.0)
        assert joint_probability([2.0, 1.0]) == 0
        assert joint_probability([]) == 0
