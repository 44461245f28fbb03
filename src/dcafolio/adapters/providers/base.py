# src/dcafolio/adapters/providers/base.py
"""
Base Provider Interface for FX Rate Providers

This module defines the abstract base class for all FX rate providers.
It establishes the contract the portfolio engine relies on.

Files that USE this module:
- dcafolio.adapters.providers.static (StaticFXProvider implements FXRateProvider)
- dcafolio.adapters.providers.chain (FXProviderChain implements FXRateProvider)
- dcafolio.adapters.providers.fastforex (FastForexFXProvider implements FXRateProvider)

Files that this module USES:
- None (pure interface definition)
"""
from abc import ABC, abstractmethod
from typing import Optional


class FXRateProvider(ABC):
    @abstractmethod
    def get_rate(self, from_currency: str, to_currency: str,
                 as_of_date: Optional[str] = None) -> Optional[float]:
        """Return units of `to_currency` per 1 `from_currency`, or None if unknown."""
        raise NotImplementedError
