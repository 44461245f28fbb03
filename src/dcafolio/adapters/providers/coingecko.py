# src/dcafolio/adapters/providers/coingecko.py
"""
CoinGecko API Provider for Bitcoin Prices

This module implements the CoinGecko client used to obtain the current BTC
price and a daily price history. The history is returned as a
HistoricalPriceTable, a callable usable as the engine's historical price
lookup for mark-to-market valuation.

Files that USE this module:
- dcafolio.app (current price and history for the report command)
- tests.test_providers (unit tests)

Files that this module USES:
- dcafolio.config (settings for API URL, timeout and cache TTL)
- dcafolio.shared.validators (parse_date)
"""
from __future__ import annotations

import bisect
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests

from dcafolio.config import settings
from dcafolio.shared.validators import parse_date

log = logging.getLogger(__name__)


class HistoricalPriceTable:
    """
    Daily BTC closes, callable as ``table(date) -> price``.

    A date between two closes gets the latest close on or before it; a date
    before the first close gets the first close. An empty table returns 0.0.
    """

    def __init__(self, closes: Iterable[Tuple[date, float]], currency: str = "USD"):
        ordered = sorted(closes)
        self.days: List[date] = [d for d, _ in ordered]
        self.prices: List[float] = [p for _, p in ordered]
        self.currency = currency.upper()

    def __len__(self) -> int:
        return len(self.days)

    def __call__(self, when: str) -> float:
        if not self.days:
            return 0.0
        day = parse_date(when).date()
        idx = bisect.bisect_right(self.days, day) - 1
        return self.prices[max(idx, 0)]


class CoinGeckoPriceProvider:
    """
    Lightweight client for the CoinGecko simple/price and market_chart endpoints.
    """

    # Class-level cache shared across instances: currency -> (price, fetched_at)
    _price_cache: Dict[str, Tuple[float, datetime]] = {}

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        """
        Initialize CoinGecko provider.

        Args:
            base_url: Optional custom API root (defaults to settings.coingecko_url)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
        """
        self.url = (base_url or settings.coingecko_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.ttl = timedelta(minutes=settings.coingecko_cache_minutes)

    def _cache_valid(self, currency: str) -> bool:
        entry = self._price_cache.get(currency)
        if entry is None:
            return False
        return datetime.now(timezone.utc) - entry[1] < self.ttl

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        """
        Perform a GET request against CoinGecko.

        Raises:
            RuntimeError: If the request fails or returns invalid JSON
        """
        try:
            resp = requests.get(f"{self.url}{path}", params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.exceptions.Timeout:
            log.error("CoinGecko API timeout after %d seconds", self.timeout)
            raise RuntimeError(f"CoinGecko API timeout after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            log.error("CoinGecko API request failed: %s", e)
            raise RuntimeError(f"CoinGecko API request failed: {e}") from e
        except ValueError as e:
            log.error("CoinGecko API returned invalid JSON: %s", e)
            raise RuntimeError(f"CoinGecko API returned invalid JSON: {e}") from e

    def current_price(self, currency: str = "USD") -> float:
        """
        Get the current BTC price (with TTL cache).

        Args:
            currency: Quote currency (e.g. 'USD', 'EUR')

        Returns:
            BTC price in the requested currency

        Raises:
            RuntimeError: If the request fails or the currency is not quoted
        """
        code = currency.lower()
        if self._cache_valid(code):
            log.debug("Using cached CoinGecko %s price", code)
            return self._price_cache[code][0]

        log.info("Fetching current BTC/%s price from CoinGecko", code.upper())
        data = self._get("/simple/price", {"ids": "bitcoin", "vs_currencies": code})
        try:
            price = float(data["bitcoin"][code])
        except (KeyError, TypeError, ValueError) as e:
            log.error("CoinGecko unexpected schema: %s", data)
            raise RuntimeError(f"Price not available for currency: {currency}") from e
        if price <= 0:
            raise RuntimeError(f"CoinGecko returned non-positive price: {price}")

        CoinGeckoPriceProvider._price_cache[code] = (price, datetime.now(timezone.utc))
        return price

    def price_history(self, days: int = 365, currency: str = "USD") -> HistoricalPriceTable:
        """
        Get daily BTC closes for the last `days` days.

        Args:
            days: Number of days of history
            currency: Quote currency

        Returns:
            HistoricalPriceTable in the requested currency

        Raises:
            RuntimeError: If the request fails or returns no prices
        """
        data = self._get(
            "/coins/bitcoin/market_chart",
            {"vs_currency": currency.lower(), "days": days, "interval": "daily"},
        )
        if not isinstance(data, dict) or "prices" not in data:
            log.error("CoinGecko unexpected history response: %s", data)
            raise RuntimeError("Invalid response format")

        closes: List[Tuple[date, float]] = []
        for entry in data["prices"]:
            try:
                ts_ms, price = entry[0], float(entry[1])
            except (IndexError, TypeError, ValueError):
                continue
            day = datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc).date()
            closes.append((day, price))
        log.info("Loaded %d daily BTC/%s closes from CoinGecko", len(closes), currency.upper())
        return HistoricalPriceTable(closes, currency=currency)
