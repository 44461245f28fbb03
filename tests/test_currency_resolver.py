"""
Currency Resolver Tests - Unit Tests for Cost and Fee Normalization

This module contains unit tests for the per-purchase cost and fee resolution,
covering field priority, FX conversion with dated/undated lookups, the strict
error path and the graceful USD fallback path.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- dcafolio.application.currency_resolver (functions under test)
- dcafolio.adapters.providers.static (StaticFXProvider for fixed rates)
- unittest.mock (Mock for provider call assertions)
"""
import logging
import math

import pytest  # Testing framework for writing and running tests

from unittest.mock import Mock, call  # Mock objects for FX provider doubles

from dcafolio.adapters.providers.static import StaticFXProvider
from dcafolio.application.currency_resolver import (
    convert_price,
    lookup_rate,
    resolve_cost,
    resolve_fee,
    try_resolve_cost,
    try_resolve_fee,
)
from dcafolio.domain.errors import CurrencyConversionError
from dcafolio.domain.models import CurrencyOptions, Purchase


def _usd_purchase(**overrides):
    values = dict(date="2024-01-15", amount_btc=0.001, price_usd=42000, fee_usd=2.5)
    values.update(overrides)
    return Purchase(**values)


def _eur_to_usd(rate=1.1):
    return CurrencyOptions(
        target_fiat="USD",
        fx=StaticFXProvider(dated_rates={("EUR", "USD", "2024-01-15"): rate}),
    )


class TestResolveCost:
    def test_usd_legacy_basis(self):
        assert resolve_cost(_usd_purchase()) == pytest.approx(42.0)

    def test_fiat_amount_converted_with_dated_rate(self):
        purchase = _usd_purchase(fiat_amount=42, fiat_currency="EUR")
        assert resolve_cost(purchase, _eur_to_usd()) == pytest.approx(46.2)

    def test_fiat_amount_falls_back_to_undated_rate(self):
        fx = Mock()
        fx.get_rate.side_effect = [None, 1.1]
        purchase = _usd_purchase(fiat_amount=42, fiat_currency="EUR")

        result = resolve_cost(purchase, CurrencyOptions(target_fiat="USD", fx=fx))

        assert result == pytest.approx(46.2)
        assert fx.get_rate.call_args_list == [
            call("EUR", "USD", "2024-01-15"),
            call("EUR", "USD"),
        ]

    def test_fiat_amount_in_target_needs_no_provider(self):
        purchase = _usd_purchase(fiat_amount=39.5, fiat_currency="EUR")
        assert resolve_cost(purchase, CurrencyOptions(target_fiat="EUR")) == 39.5

    def test_fiat_amount_without_currency_assumes_target(self, caplog):
        purchase = _usd_purchase(fiat_amount=40)
        with caplog.at_level(logging.WARNING):
            result = resolve_cost(purchase, CurrencyOptions(target_fiat="EUR"))
        assert result == 40
        assert "without fiat_currency" in caplog.text

    def test_price_fiat_with_currency(self):
        purchase = _usd_purchase(amount_btc=0.5, price_fiat=40000, fiat_currency="EUR")
        assert resolve_cost(purchase, CurrencyOptions(target_fiat="EUR")) == pytest.approx(20000)

    def test_price_fiat_without_currency_uses_price_usd(self):
        purchase = _usd_purchase(price_fiat=40000)
        assert resolve_cost(purchase) == pytest.approx(42.0)

    def test_usd_converted_into_other_target(self):
        options = CurrencyOptions(target_fiat="EUR", fx=StaticFXProvider({("EUR", "USD"): 1.25}))
        assert resolve_cost(_usd_purchase(), options) == pytest.approx(42.0 / 1.25)

    def test_non_finite_fiat_amount_is_ignored(self):
        purchase = _usd_purchase(fiat_amount=float("nan"), fiat_currency="EUR")
        assert resolve_cost(purchase, _eur_to_usd()) == pytest.approx(42.0)

    def test_missing_provider_raises(self):
        purchase = _usd_purchase(fiat_amount=42, fiat_currency="EUR")
        with pytest.raises(CurrencyConversionError) as excinfo:
            resolve_cost(purchase, CurrencyOptions(target_fiat="USD"))
        assert excinfo.value.from_currency == "EUR"
        assert excinfo.value.to_currency == "USD"
        assert excinfo.value.date == "2024-01-15"

    def test_missing_rate_raises(self):
        fx = Mock()
        fx.get_rate.return_value = None
        purchase = _usd_purchase(fiat_amount=42, fiat_currency="EUR")
        with pytest.raises(CurrencyConversionError, match="Missing FX EUR->USD on 2024-01-15"):
            resolve_cost(purchase, CurrencyOptions(target_fiat="USD", fx=fx))

    def test_non_positive_rate_counts_as_missing(self):
        fx = Mock()
        fx.get_rate.return_value = 0
        with pytest.raises(CurrencyConversionError):
            lookup_rate(CurrencyOptions(target_fiat="USD", fx=fx), "EUR", "2024-01-15")


class TestResolveFee:
    def test_fee_usd_default(self):
        assert resolve_fee(_usd_purchase()) == 2.5
        assert resolve_fee(_usd_purchase(fee_usd=None)) == 0.0

    def test_malformed_fee_coerces_to_zero(self):
        assert resolve_fee(_usd_purchase(fee_usd="n/a")) == 0.0

    def test_fee_fiat_uses_fiat_currency(self):
        purchase = _usd_purchase(fee_fiat=3, fiat_currency="EUR")
        assert resolve_fee(purchase, _eur_to_usd()) == pytest.approx(3.3)

    def test_fee_amount_with_fee_currency(self):
        options = CurrencyOptions(target_fiat="USD", fx=StaticFXProvider({("GBP", "USD"): 1.25}))
        purchase = _usd_purchase(fee_amount=2, fee_currency="GBP")
        assert resolve_fee(purchase, options) == pytest.approx(2.5)

    def test_fee_fiat_without_currency_falls_through(self):
        purchase = _usd_purchase(fee_fiat=3)
        assert resolve_fee(purchase) == 2.5

    def test_zero_fee_needs_no_conversion(self):
        purchase = _usd_purchase(fee_usd=0)
        assert resolve_fee(purchase, CurrencyOptions(target_fiat="EUR")) == 0.0

    def test_missing_rate_raises(self):
        purchase = _usd_purchase(fee_fiat=3, fiat_currency="EUR")
        with pytest.raises(CurrencyConversionError):
            resolve_fee(purchase, CurrencyOptions(target_fiat="USD"))


class TestGracefulResolution:
    def _no_rates(self):
        fx = Mock()
        fx.get_rate.return_value = None
        return CurrencyOptions(target_fiat="USD", fx=fx)

    def test_cost_falls_back_to_usd_basis(self, caplog):
        purchase = _usd_purchase(fiat_amount=40, fiat_currency="EUR")
        with caplog.at_level(logging.WARNING):
            result = try_resolve_cost(purchase, self._no_rates())
        assert result.amount == pytest.approx(42.0)
        assert result.currency == "USD"
        assert result.fell_back is True
        assert "fell back to USD-based calculation" in result.warning
        assert "fell back" in caplog.text

    def test_fee_falls_back_to_fee_usd(self):
        purchase = _usd_purchase(fee_fiat=3, fiat_currency="EUR")
        result = try_resolve_fee(purchase, self._no_rates())
        assert result.amount == 2.5
        assert result.fell_back is True

    def test_success_has_no_warning(self):
        result = try_resolve_cost(_usd_purchase(fiat_amount=42, fiat_currency="EUR"), _eur_to_usd())
        assert result.amount == pytest.approx(46.2)
        assert result.currency == "USD"
        assert result.fell_back is False
        assert result.warning is None


class TestConvertPrice:
    def test_same_currency(self):
        assert convert_price(50000, "usd").amount == 50000

    def test_converted(self):
        options = CurrencyOptions(target_fiat="USD", fx=StaticFXProvider({("EUR", "USD"): 1.1}))
        result = convert_price(45000, "EUR", options)
        assert result.amount == pytest.approx(49500)
        assert result.currency == "USD"

    def test_missing_fx_keeps_original_price(self):
        result = convert_price(45000, "EUR", CurrencyOptions(target_fiat="USD"))
        assert result.amount == 45000
        assert result.fell_back is True
        assert result.currency == "EUR"

    def test_non_numeric_price_is_zero(self):
        result = convert_price("oops", "USD")
        assert result.amount == 0.0
        assert math.isfinite(result.amount)
