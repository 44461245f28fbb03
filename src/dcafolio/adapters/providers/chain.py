# src/dcafolio/adapters/providers/chain.py
"""
FX Provider Chain - Primary/Fallback Rate Resolution

Combines two FX providers: the primary is asked first and the fallback
only when the primary has no rate. Typically a live provider backed by
the configurable approximate fallback rates.

Files that USE this module:
- dcafolio.app (live FX backed by settings.fallback_fx_rates)
- tests.test_providers (unit tests)

Files that this module USES:
- dcafolio.adapters.providers.base (FXRateProvider interface)
"""
from __future__ import annotations

import logging
from typing import Optional

from dcafolio.adapters.providers.base import FXRateProvider

log = logging.getLogger(__name__)


class FXProviderChain(FXRateProvider):
    """
    Provider chain that tries multiple providers in order.
    Tracks which provider was actually used.
    """
    def __init__(self, primary: FXRateProvider, fallback: FXRateProvider,
                 primary_name: str = "primary", fallback_name: str = "fallback"):
        """
        Initialize provider chain with primary and fallback providers.

        Args:
            primary: Provider to try first
            fallback: Provider to use if the primary has no rate
            primary_name: Label recorded when the primary answers
            fallback_name: Label recorded when the fallback answers
        """
        self.primary = primary
        self.fallback = fallback
        self.primary_name = primary_name
        self.fallback_name = fallback_name
        self.last_used_provider: Optional[str] = None

    def get_rate(self, from_currency: str, to_currency: str,
                 as_of_date: Optional[str] = None) -> Optional[float]:
        """
        Get a rate, trying the primary provider first, then the fallback.

        Returns:
            Rate as float, or None if neither provider knows the pair
        """
        rate = self.primary.get_rate(from_currency, to_currency, as_of_date)
        if rate:
            self.last_used_provider = self.primary_name
            return rate

        rate = self.fallback.get_rate(from_currency, to_currency, as_of_date)
        if rate:
            log.warning(
                "Using %s rate for %s->%s (%s): %s",
                self.fallback_name, from_currency, to_currency, as_of_date or "latest", rate,
            )
            self.last_used_provider = self.fallback_name
            return rate
        return None

    def get_last_provider(self) -> Optional[str]:
        """
        Get the name of the last provider that successfully provided a rate.

        Returns:
            Provider name or None if no rate was found yet
        """
        return self.last_used_provider
