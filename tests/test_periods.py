"""
Period Filter Tests - Unit Tests for filter_by_period

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- dcafolio.application.periods (filter_by_period)
- dcafolio.domain.models (Purchase, Period for test data)
"""
from datetime import datetime, timezone

import pytest  # Testing framework for writing and running tests

from dcafolio.application.periods import filter_by_period
from dcafolio.domain.errors import ConfigurationError
from dcafolio.domain.models import Period, Purchase

NOW = datetime(2024, 6, 30, tzinfo=timezone.utc)


def _purchases():
    return [
        Purchase(date="2024-06-25", amount_btc=0.001, price_usd=61000),
        Purchase(date="2024-05-15T18:00:00Z", amount_btc=0.001, price_usd=62000),
        Purchase(date="2024-01-10", amount_btc=0.001, price_usd=46000),
        Purchase(date="2023-03-01", amount_btc=0.001, price_usd=23000),
    ]


def _dates(purchases):
    return [p.date[:10] for p in purchases]


class TestPresets:
    def test_all_returns_everything(self):
        assert len(filter_by_period(_purchases(), Period.ALL)) == 4

    @pytest.mark.parametrize("period, expected", [
        (Period.DAYS_7, ["2024-06-25"]),
        (Period.DAYS_30, ["2024-06-25"]),
        (Period.DAYS_90, ["2024-06-25", "2024-05-15"]),
        (Period.YEAR_1, ["2024-06-25", "2024-05-15", "2024-01-10"]),
    ])
    def test_rolling_windows(self, period, expected):
        assert _dates(filter_by_period(_purchases(), period, now=NOW)) == expected

    def test_accepts_string_and_naive_now(self):
        result = filter_by_period(_purchases(), "7d", now=datetime(2024, 6, 30))
        assert _dates(result) == ["2024-06-25"]

    def test_empty_input(self):
        assert filter_by_period([], Period.DAYS_30, now=NOW) == []


class TestCustomRange:
    def test_inclusive_bounds(self):
        result = filter_by_period(_purchases(), Period.CUSTOM, start="2024-01-10", end="2024-05-15")
        assert _dates(result) == ["2024-05-15", "2024-01-10"]

    def test_open_ended(self):
        assert _dates(filter_by_period(_purchases(), Period.CUSTOM, start="2024-05-01")) == [
            "2024-06-25", "2024-05-15",
        ]
        assert _dates(filter_by_period(_purchases(), Period.CUSTOM, end="2023-12-31")) == ["2023-03-01"]

    def test_no_bounds_keeps_everything(self):
        assert len(filter_by_period(_purchases(), Period.CUSTOM)) == 4

    def test_start_after_end(self):
        with pytest.raises(ConfigurationError, match="after"):
            filter_by_period(_purchases(), Period.CUSTOM, start="2024-06-01", end="2024-01-01")

    def test_invalid_bound(self):
        with pytest.raises(ConfigurationError, match="start"):
            filter_by_period(_purchases(), Period.CUSTOM, start="last week")
