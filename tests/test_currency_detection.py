"""
Currency Detection Tests - Unit Tests for detect_currencies

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- dcafolio.application.currency_detection (detect_currencies)
- dcafolio.domain.models (Purchase for test data)
"""
from dcafolio.application.currency_detection import detect_currencies
from dcafolio.domain.models import Purchase


class TestDetectCurrencies:
    def test_empty(self):
        assert detect_currencies([]) == []

    def test_legacy_usd_only(self):
        purchases = [Purchase(date="2024-01-15", amount_btc=0.001, price_usd=42000)]
        assert detect_currencies(purchases) == ["USD"]

    def test_usd_first_then_alphabetical(self):
        purchases = [
            Purchase(date="2024-01-15", amount_btc=0.001, price_usd=42000, fiat_currency="GBP"),
            Purchase(date="2024-01-16", amount_btc=0.001, price_usd=42000, currency_sent="chf"),
            Purchase(date="2024-01-17", amount_btc=0.001, price_usd=42000, fiat_currency="EUR",
                     fee_currency="EUR"),
        ]
        assert detect_currencies(purchases) == ["USD", "CHF", "EUR", "GBP"]

    def test_crypto_codes_excluded(self):
        purchases = [
            Purchase(date="2024-01-15", amount_btc=0.001, price_usd=42000, currency_received="BTC",
                     currency_sent="EUR", fee_currency="USDT"),
            Purchase(date="2024-01-16", amount_btc=0.001, price_usd=42000, currency_received="Bitcoin",
                     fee_currency="Ethereum"),
        ]
        assert detect_currencies(purchases) == ["USD", "EUR"]
