# src/dcafolio/adapters/providers/fastforex.py
"""
FastForex API Provider for Fiat FX Rates

This module implements the FastForex API client used as a live FX rate
source. Latest rates come from /fetch-all and dated rates from /historical;
both are cached per base currency to reduce API calls.

get_rate never raises on transport problems: failures are logged and
reported as a missing rate, which the engine then handles through its own
fallback policy.

Files that USE this module:
- dcafolio.app (live FX provider for the report command)
- tests.test_providers (unit tests)

Files that this module USES:
- dcafolio.adapters.providers.base (FXRateProvider interface)
- dcafolio.config (settings for API configuration)
"""
import logging
import urllib.parse
import requests
from typing import Any, Dict, Optional, Tuple
from datetime import datetime, timedelta, timezone

from dcafolio.adapters.providers.base import FXRateProvider
from dcafolio.config import settings
from dcafolio.shared.validators import normalize_currency, parse_date

log = logging.getLogger(__name__)


class FastForexFXProvider(FXRateProvider):
    # Class-level caches shared across instances
    _latest_cache: Dict[str, Tuple[Dict[str, float], datetime]] = {}
    _historical_cache: Dict[Tuple[str, str], Dict[str, float]] = {}

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        """
        Initialize FastForex API provider.

        Args:
            base_url: Optional custom fetch-all URL including api_key (defaults to settings.FASTFOREX_URL)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)

        Raises:
            ValueError: If API key is missing or empty in the URL
        """
        self.url = base_url or settings.FASTFOREX_URL
        # Validate that api_key has a non-empty value
        parsed = urllib.parse.urlparse(self.url)
        params = urllib.parse.parse_qs(parsed.query)
        if "api_key" not in params or not params["api_key"] or not params["api_key"][0]:
            raise ValueError("FASTFOREX_URL contains empty or missing api_key value.")
        self.api_key = params["api_key"][0]
        self.root = f"{parsed.scheme}://{parsed.netloc}"
        self.timeout = timeout or settings.http_timeout_seconds
        self.ttl = timedelta(minutes=settings.fastforex_cache_minutes)

    def _cache_valid(self, base: str) -> bool:
        """
        Check if cached latest rates for a base currency are still valid.

        Returns:
            True if cache exists and is within TTL, False otherwise
        """
        entry = self._latest_cache.get(base)
        if entry is None:
            return False
        return datetime.now(timezone.utc) - entry[1] < self.ttl

    def _request(self, path: str, params: Dict[str, str]) -> Dict[str, Any]:
        """
        Perform a GET request against the FastForex API.

        Raises:
            RuntimeError: If the request fails or returns invalid JSON
        """
        query = {"api_key": self.api_key, **params}
        try:
            resp = requests.get(f"{self.root}{path}", params=query, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.Timeout:
            log.warning("FastForex API timeout after %d seconds", self.timeout)
            raise RuntimeError(f"FastForex API timeout after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            log.warning("FastForex API request failed: %s", e)
            raise RuntimeError(f"FastForex API request failed: {e}") from e
        except ValueError as e:
            log.error("FastForex API returned invalid JSON: %s", e)
            raise RuntimeError(f"FastForex API returned invalid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("results"), dict):
            log.error("FastForex unexpected response structure: %s", data)
            raise RuntimeError("FastForex response missing 'results' field")
        return data

    @staticmethod
    def _parse_results(data: Dict[str, Any]) -> Dict[str, float]:
        results: Dict[str, float] = {}
        for code, value in data["results"].items():
            try:
                rate = float(value)
            except (TypeError, ValueError):
                continue
            if rate > 0:
                results[code.upper()] = rate
        return results

    def latest_rates(self, base: str) -> Dict[str, float]:
        """
        Get latest rates for a base currency (with TTL cache).

        Raises:
            RuntimeError: If the API request fails
        """
        if self._cache_valid(base):
            log.debug("Using cached FastForex rates for %s", base)
            return self._latest_cache[base][0]

        log.info("Fetching fresh %s rates from FastForex", base)
        results = self._parse_results(self._request("/fetch-all", {"from": base}))
        FastForexFXProvider._latest_cache[base] = (results, datetime.now(timezone.utc))
        log.info("FastForex %s rates updated (ttl=%sm)", base, settings.fastforex_cache_minutes)
        return results

    def historical_rates(self, base: str, day: str) -> Dict[str, float]:
        """
        Get rates for a base currency on a given day (cached indefinitely).

        Raises:
            RuntimeError: If the API request fails
        """
        key = (base, day)
        if key not in self._historical_cache:
            log.info("Fetching %s rates for %s from FastForex", base, day)
            results = self._parse_results(self._request("/historical", {"from": base, "date": day}))
            FastForexFXProvider._historical_cache[key] = results
        return self._historical_cache[key]

    def get_rate(self, from_currency: str, to_currency: str,
                 as_of_date: Optional[str] = None) -> Optional[float]:
        """
        Get units of `to_currency` per 1 `from_currency`.

        Returns:
            Rate as float, or None if unavailable
        """
        source = normalize_currency(from_currency)
        target = normalize_currency(to_currency)
        if source is None or target is None:
            return None
        if source == target:
            return 1.0

        try:
            if as_of_date:
                day = parse_date(as_of_date).date().isoformat()
                rates = self.historical_rates(source, day)
            else:
                rates = self.latest_rates(source)
        except ValueError as e:
            log.warning("FastForex cannot look up %s->%s on %r: %s", source, target, as_of_date, e)
            return None
        except RuntimeError as e:
            log.warning("FastForex rate %s->%s unavailable: %s", source, target, e)
            return None
        return rates.get(target)
