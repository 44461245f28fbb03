"""
Strategy Comparison Tests - Unit Tests for Simulated Strategies

This module contains unit tests for simulate_purchases and
compare_strategies: equal-capital monthly/weekly DCA and lump-sum
simulations priced from the recorded history.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- dcafolio.application.strategies (simulate_purchases, compare_strategies)
- dcafolio.adapters.providers.static (StaticFXProvider)
- dcafolio.domain.models (Purchase, Strategy, options)
"""
import pytest  # Testing framework for writing and running tests

from dcafolio.adapters.providers.static import StaticFXProvider
from dcafolio.application.strategies import compare_strategies, simulate_purchases
from dcafolio.domain.models import CurrencyOptions, MetricOptions, Purchase, Strategy


def _scenario():
    # Deliberately out of order
    return [
        Purchase(date="2024-02-15", amount_btc=0.0015, price_usd=45000, fee_usd=3.0),
        Purchase(date="2024-01-15", amount_btc=0.001, price_usd=42000, fee_usd=2.5),
    ]


class TestSimulatePurchases:
    def test_actual_is_sorted_history(self):
        result = simulate_purchases(_scenario(), Strategy.ACTUAL)
        assert [p.date for p in result] == ["2024-01-15", "2024-02-15"]

    def test_lump_sum(self):
        (buy,) = simulate_purchases(_scenario(), Strategy.LUMP_SUM)

        assert buy.date == "2024-01-15"
        assert buy.price_usd == 42000
        assert buy.amount_btc == pytest.approx(109.5 / 42000)
        assert buy.fee_usd == pytest.approx(109.5 * 0.005)
        assert buy.exchange == "Simulated"

    def test_monthly_dca(self):
        result = simulate_purchases(_scenario(), Strategy.MONTHLY_DCA)

        assert [p.date for p in result] == ["2024-01-15", "2024-02-15"]
        assert [p.price_usd for p in result] == [42000, 45000]
        assert result[0].amount_btc == pytest.approx(54.75 / 42000)
        assert all(p.fee_usd == pytest.approx(0.5475) for p in result)

    def test_weekly_dca_uses_closest_recorded_price(self):
        result = simulate_purchases(_scenario(), Strategy.WEEKLY_DCA)

        assert [p.date for p in result] == [
            "2024-01-15", "2024-01-22", "2024-01-29", "2024-02-05", "2024-02-12",
        ]
        assert [p.price_usd for p in result] == [42000, 42000, 42000, 45000, 45000]
        assert sum(p.amount_btc * p.price_usd for p in result) == pytest.approx(109.5)

    def test_month_end_is_clamped(self):
        purchases = [
            Purchase(date="2024-01-31", amount_btc=0.001, price_usd=43000),
            Purchase(date="2024-03-31", amount_btc=0.001, price_usd=71000),
        ]
        result = simulate_purchases(purchases, Strategy.MONTHLY_DCA)
        assert [p.date for p in result] == ["2024-01-31", "2024-02-29"]

    def test_single_purchase_yields_one_buy(self):
        purchases = [Purchase(date="2024-01-15", amount_btc=0.001, price_usd=42000)]
        for strategy in (Strategy.MONTHLY_DCA, Strategy.WEEKLY_DCA, Strategy.LUMP_SUM):
            result = simulate_purchases(purchases, strategy)
            assert len(result) == 1
            assert result[0].amount_btc == pytest.approx(0.001)

    def test_empty(self):
        for strategy in Strategy:
            assert simulate_purchases([], strategy) == []


class TestCompareStrategies:
    def test_same_capital_across_strategies(self):
        results = compare_strategies(_scenario(), 50000)

        assert list(results) == list(Strategy)
        for strategy in (Strategy.MONTHLY_DCA, Strategy.WEEKLY_DCA, Strategy.LUMP_SUM):
            assert results[strategy].total_cost_excl_fees == pytest.approx(109.5)
        assert results[Strategy.ACTUAL].total_invested == pytest.approx(115.0)
        assert results[Strategy.LUMP_SUM].total_fees == pytest.approx(0.5475)
        assert results[Strategy.LUMP_SUM].total_btc == pytest.approx(109.5 / 42000)

    def test_selected_strategies_in_order(self):
        results = compare_strategies(_scenario(), 50000, strategies=["lump-sum", Strategy.ACTUAL])
        assert list(results) == [Strategy.LUMP_SUM, Strategy.ACTUAL]

    def test_target_fiat_conversion(self):
        options = MetricOptions(currency=CurrencyOptions(
            target_fiat="EUR", fx=StaticFXProvider({("EUR", "USD"): 1.25}),
        ))
        results = compare_strategies(_scenario(), 40000, "EUR", options)

        assert results[Strategy.LUMP_SUM].currency == "EUR"
        assert results[Strategy.LUMP_SUM].total_cost_excl_fees == pytest.approx(109.5 * 0.8)

    def test_empty_history(self):
        results = compare_strategies([], 50000)
        assert all(m.purchase_count == 0 for m in results.values())
