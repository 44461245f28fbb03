# src/dcafolio/application/currency_detection.py
"""
Currency Detection - Fiat Currencies Present in a Purchase Set

Reports which fiat currencies appear in a set of purchases so a caller can
offer them as target currency choices. Crypto tickers are never reported.

Files that USE this module:
- dcafolio.app (report command lists detected currencies)
- tests.test_currency_detection (unit tests)

Files that this module USES:
- dcafolio.domain.models (Purchase)
- dcafolio.shared.validators (normalize_currency, to_float)
"""
from __future__ import annotations

from typing import Iterable, List

from dcafolio.domain.models import Purchase
from dcafolio.shared.validators import normalize_currency, to_float

CRYPTO_CODES = frozenset({
    "BTC", "XBT", "BITCOIN",
    "ETH", "ETHER", "ETHEREUM",
    "USDC", "USD COIN",
    "USDT", "TETHER",
})

_CURRENCY_FIELDS = ("fiat_currency", "currency_sent", "currency_received", "fee_currency")


def detect_currencies(purchases: Iterable[Purchase]) -> List[str]:
    """
    List the fiat currencies used by a set of purchases.

    USD is included whenever any purchase carries a positive price_usd or
    fee_usd, even without explicit currency fields.

    Args:
        purchases: Purchase records

    Returns:
        Deduplicated currency codes, USD first, the rest alphabetical
    """
    found = set()
    for purchase in purchases:
        for name in _CURRENCY_FIELDS:
            code = normalize_currency(getattr(purchase, name, None))
            if code and code not in CRYPTO_CODES:
                found.add(code)
        if to_float(purchase.price_usd) > 0 or to_float(purchase.fee_usd) > 0:
            found.add("USD")

    ordered = sorted(found - {"USD"})
    if "USD" in found:
        ordered.insert(0, "USD")
    return ordered
