"""
Derived Metrics Tests - Unit Tests for compute_derived_metrics

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- dcafolio.application.insights (compute_derived_metrics)
- dcafolio.application.metrics (compute_metrics for snapshots)
"""
from datetime import datetime, timezone

import pytest  # Testing framework for writing and running tests

from dcafolio.application.insights import compute_derived_metrics
from dcafolio.application.metrics import compute_metrics
from dcafolio.domain.models import Purchase

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def _metrics(price=50000):
    return compute_metrics([
        Purchase(date="2024-01-15", amount_btc=0.001, price_usd=42000, fee_usd=2.5),
        Purchase(date="2024-02-15", amount_btc=0.0015, price_usd=45000, fee_usd=3.0),
    ], price)


class TestDerivedMetrics:
    def test_scenario(self):
        derived = compute_derived_metrics(_metrics(), now=NOW)

        assert derived.average_purchase_amount == pytest.approx(57.5)
        assert derived.price_vs_cost_basis_percent == pytest.approx(8.6957, rel=1e-4)
        assert derived.btc_per_fiat_unit == pytest.approx(0.0025 / 115)
        assert derived.days_since_first_purchase == 60
        assert derived.days_since_last_purchase == 29

    def test_price_below_cost_basis(self):
        derived = compute_derived_metrics(_metrics(price=41400), now=NOW)
        assert derived.price_vs_cost_basis_percent == pytest.approx(-10.0)

    def test_empty_snapshot(self):
        derived = compute_derived_metrics(compute_metrics([], 50000), now=NOW)

        assert derived.average_purchase_amount == 0.0
        assert derived.price_vs_cost_basis_percent == 0.0
        assert derived.days_since_first_purchase == 0
