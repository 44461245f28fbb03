# src/dcafolio/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models and business rules.
No dependencies on infrastructure or external systems.
"""

from dcafolio.domain.models import (
    CostBasis,
    CurrencyOptions,
    CurrencyStats,
    DCAOptions,
    DerivedMetrics,
    ExchangeStats,
    HistoricalPriceLookup,
    MetricOptions,
    Period,
    PerformancePoint,
    PortfolioMetrics,
    Purchase,
    PurchaseExtreme,
    Resolution,
    Strategy,
    SupportsFXRate,
    ValuationMode,
)
from dcafolio.domain.errors import (
    ConfigurationError,
    CurrencyConversionError,
    DomainError,
    InvalidPurchaseError,
)

__all__ = [
    "Purchase",
    "CurrencyOptions",
    "MetricOptions",
    "DCAOptions",
    "CostBasis",
    "ValuationMode",
    "Period",
    "Strategy",
    "Resolution",
    "ExchangeStats",
    "CurrencyStats",
    "PurchaseExtreme",
    "PortfolioMetrics",
    "PerformancePoint",
    "DerivedMetrics",
    "SupportsFXRate",
    "HistoricalPriceLookup",
    "DomainError",
    "CurrencyConversionError",
    "ConfigurationError",
    "InvalidPurchaseError",
]
