"""
Formatter Tests - Unit Tests for Report Formatting Functions

This module contains unit tests for the report formatting functions:
currency, percentage and BTC formatting, the metrics summary, derived
figures, the performance table and the strategy comparison table.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- dcafolio.adapters.formatting.formatter (formatter functions for testing)
- dcafolio.application (engine functions for test data)
"""
from datetime import datetime, timezone

from dcafolio.adapters.formatting.formatter import (
    comparison_lines,  # Format strategy comparison table
    derived_lines,  # Format derived figures
    format_btc,  # Format BTC quantity
    format_currency,  # Format fiat amount with symbol
    format_percent,  # Format signed percentage
    metrics_lines,  # Format metrics summary
    performance_lines,  # Format performance table
)
from dcafolio.application import (
    compare_strategies,
    compute_derived_metrics,
    compute_metrics,
    compute_performance,
)
from dcafolio.domain.models import Purchase, Strategy


def _scenario():
    return [
        Purchase(date="2024-01-15", amount_btc=0.001, price_usd=42000, fee_usd=2.5, exchange="Kraken"),
        Purchase(date="2024-02-15", amount_btc=0.0015, price_usd=45000, fee_usd=3.0, exchange="Kraken"),
    ]


class TestFormatCurrency:
    def test_usd(self):
        assert format_currency(1234.5) == "$1,234.50"

    def test_negative_eur(self):
        assert format_currency(-42, "eur") == "-€42.00"

    def test_unknown_code(self):
        assert format_currency(1, "XYZ") == "XYZ 1.00"

    def test_decimals(self):
        assert format_currency(50000.4, "USD", decimals=0) == "$50,000"


class TestFormatPercentAndBtc:
    def test_percent_signs(self):
        assert format_percent(8.69565) == "+8.70%"
        assert format_percent(-3) == "-3.00%"
        assert format_percent(0) == "0.00%"

    def test_btc(self):
        assert format_btc(0.0025) == "₿0.00250000"
        assert format_btc(0.0025, decimals=4) == "₿0.0025"


class TestMetricsLines:
    def test_summary(self):
        result = metrics_lines(compute_metrics(_scenario(), 50000), ["USD", "EUR"])

        assert "Purchases: 2 (2024-01-15 → 2024-02-15)" in result
        assert "Total invested (effective): $115.00" in result
        assert "Current value: $125.00" in result
        assert "Unrealized P&L: $10.00 (+8.70%)" in result
        assert "Currencies in data: USD, EUR" in result
        assert "  Kraken: 2 buys" in result

    def test_empty(self):
        assert metrics_lines(compute_metrics([], 50000)) == "No purchases."

    def test_warnings_listed(self):
        result = metrics_lines(compute_metrics(_scenario(), 45000, "EUR"))
        assert "⚠️" in result


class TestPerformanceLines:
    def test_table(self):
        result = performance_lines(compute_performance(_scenario(), 50000)).splitlines()

        assert len(result) == 3
        assert "P&L (now)" in result[0]
        assert "2024-02-15" in result[2]
        assert "$115.00" in result[2]
        assert "+8.70%" in result[2]


class TestDerivedLines:
    def test_lines(self):
        derived = compute_derived_metrics(
            compute_metrics(_scenario(), 50000), now=datetime(2024, 3, 15, tzinfo=timezone.utc)
        )
        result = derived_lines(derived, "USD")

        assert "Average purchase: $57.50" in result
        assert "Price vs cost basis: +8.70%" in result
        assert "Days since first purchase: 60" in result


class TestComparisonLines:
    def test_table(self):
        results = compare_strategies(_scenario(), 50000, strategies=[Strategy.ACTUAL, Strategy.LUMP_SUM])
        lines = comparison_lines(results).splitlines()

        assert len(lines) == 3
        assert lines[1].startswith("Actual DCA")
        assert lines[2].startswith("Lump Sum")
        assert "$115" in lines[1]
        assert "+8.70%" in lines[1]
