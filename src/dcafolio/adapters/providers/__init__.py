# src/dcafolio/adapters/providers/__init__.py
"""
Provider Adapters - FX Rates and Market Prices

This package contains adapters for FX rate tables and external APIs.
All FX providers implement the FXRateProvider interface.
"""

from dcafolio.adapters.providers.base import FXRateProvider
from dcafolio.adapters.providers.chain import FXProviderChain
from dcafolio.adapters.providers.coingecko import CoinGeckoPriceProvider, HistoricalPriceTable
from dcafolio.adapters.providers.fastforex import FastForexFXProvider
from dcafolio.adapters.providers.static import StaticFXProvider

__all__ = [
    "FXRateProvider",
    "FXProviderChain",
    "StaticFXProvider",
    "FastForexFXProvider",
    "CoinGeckoPriceProvider",
    "HistoricalPriceTable",
]
