# src/dcafolio/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Purchase records (one BTC buy, already field-mapped by ingestion)
- Currency and metric options
- Portfolio metrics snapshots and their breakdowns
- Per-purchase performance points

Files that USE this module:
- dcafolio.application.* (all engine components read and build domain models)
- dcafolio.adapters.* (formatter and CLI present domain models)
- tests.* (tests use domain models for test data)

Files that this module USES:
- dcafolio.shared.validators (coercion and date parsing for invariants)
- dcafolio.domain.errors (InvalidPurchaseError)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass, field, fields  # Decorators for creating data classes
from enum import Enum  # Enumerations for basis and valuation mode
from typing import Any, Callable, Mapping, Optional, Protocol, Tuple  # Type hints

from dcafolio.domain.errors import InvalidPurchaseError
from dcafolio.shared.validators import is_number, is_valid_date, normalize_currency, to_float


class SupportsFXRate(Protocol):
    """Protocol for FX rate providers consumed by the engine."""
    def get_rate(self, from_currency: str, to_currency: str,
                 as_of_date: Optional[str] = None) -> Optional[float]:  # units of `to` per 1 `from`
        ...


HistoricalPriceLookup = Callable[[str], float]


class CostBasis(str, Enum):
    """Whether fees are excluded (execution) or included (effective) in cost."""
    EXECUTION = "execution"
    EFFECTIVE = "effective"


class ValuationMode(str, Enum):
    """How the historical (mark-to-market) columns of a performance point are priced."""
    TO_DATE = "to_date"
    MARK_TO_MARKET = "mark_to_market"


class Period(str, Enum):
    """Time range presets for filtering purchases; CUSTOM takes explicit bounds."""
    ALL = "all"
    DAYS_7 = "7d"
    DAYS_30 = "30d"
    DAYS_90 = "90d"
    YEAR_1 = "1y"
    CUSTOM = "custom"


class Strategy(str, Enum):
    """Investment strategies compared against the actual purchase history."""
    ACTUAL = "actual"
    MONTHLY_DCA = "monthly-dca"
    WEEKLY_DCA = "weekly-dca"
    LUMP_SUM = "lump-sum"


_CURRENCY_FIELDS = ("fiat_currency", "currency_sent", "currency_received", "fee_currency")
_FEE_FIELDS = ("fee_usd", "fee_amount", "fee_fiat")
_NUMERIC_FIELDS = (
    "amount_btc", "price_usd", "fee_usd", "amount_received", "amount_sent",
    "fee_amount", "fee_token_price", "sent_token_price", "received_token_price",
    "fiat_amount", "price_fiat", "fee_fiat", "effective_price",
)


@dataclass(frozen=True)
class Purchase:
    """
    One Bitcoin purchase transaction.

    Only ``date``, ``amount_btc`` and ``price_usd`` are required; every
    enrichment field is independently optional. Optional numeric fields
    may hold malformed values; the engine coerces them when read.

    Raises:
        InvalidPurchaseError: If amount_btc or price_usd is not positive,
            the date is not ISO-parseable, or a numeric fee is negative
    """
    date: str
    amount_btc: float
    price_usd: float
    fee_usd: Optional[float] = None
    exchange: Optional[str] = None
    notes: Optional[str] = None
    type: Optional[str] = None
    timezone: Optional[str] = None
    amount_received: Optional[float] = None
    currency_received: Optional[str] = None
    amount_sent: Optional[float] = None
    currency_sent: Optional[str] = None
    fee_amount: Optional[float] = None
    fee_currency: Optional[str] = None
    fee_token_price: Optional[float] = None
    sent_token_price: Optional[float] = None
    received_token_price: Optional[float] = None
    description: Optional[str] = None
    address: Optional[str] = None
    transaction_hash: Optional[str] = None
    external_id: Optional[str] = None
    fiat_amount: Optional[float] = None
    fiat_currency: Optional[str] = None
    price_fiat: Optional[float] = None
    fee_fiat: Optional[float] = None
    effective_price: Optional[float] = None

    def __post_init__(self) -> None:
        if not is_valid_date(self.date):
            raise InvalidPurchaseError(f"Invalid date format: {self.date!r}")
        if to_float(self.amount_btc) <= 0:
            raise InvalidPurchaseError(f"Bitcoin amount must be positive: {self.amount_btc!r}")
        if to_float(self.price_usd) <= 0:
            raise InvalidPurchaseError(f"Price must be positive: {self.price_usd!r}")
        for name in _FEE_FIELDS:
            value = getattr(self, name)
            if is_number(value) and to_float(value) < 0:
                raise InvalidPurchaseError(f"{name} cannot be negative: {value!r}")

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "Purchase":
        """
        Build a purchase from an already field-mapped dictionary.

        Numeric strings are coerced, currency codes upper-cased, empty
        strings treated as missing and unknown keys ignored.

        Args:
            row: Mapping with normalized field names

        Returns:
            Purchase instance

        Raises:
            InvalidPurchaseError: If the record violates its invariants
        """
        known = {f.name for f in fields(cls)}
        values: dict = {}
        for key, value in row.items():
            if key not in known:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            if key in _CURRENCY_FIELDS:
                value = normalize_currency(value)
            elif key in _NUMERIC_FIELDS and isinstance(value, str) and is_number(value):
                value = to_float(value)
            values[key] = value
        for required in ("date", "amount_btc", "price_usd"):
            if required not in values:
                raise InvalidPurchaseError(f"Missing required field: {required}")
        return cls(**values)


@dataclass(frozen=True)
class CurrencyOptions:
    """
    Currency normalization settings.

    Attributes:
        target_fiat: Currency every amount is normalized into
        fx: Optional FX rate provider used for conversions
    """
    target_fiat: str = "USD"
    fx: Optional[SupportsFXRate] = None


@dataclass(frozen=True)
class MetricOptions:
    """Options for the metrics aggregator."""
    basis: CostBasis = CostBasis.EFFECTIVE
    currency: CurrencyOptions = field(default_factory=CurrencyOptions)


@dataclass(frozen=True)
class DCAOptions(MetricOptions):
    """
    Options for the time-series performance engine.

    Attributes:
        mode: Valuation mode for the mark-to-market columns
        get_historical_price: Price lookup by date, required for MARK_TO_MARKET
        historical_price_currency: Currency the lookup quotes prices in
    """
    mode: ValuationMode = ValuationMode.TO_DATE
    get_historical_price: Optional[HistoricalPriceLookup] = None
    historical_price_currency: str = "USD"


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of resolving an amount into the target fiat.

    Attributes:
        amount: Resolved amount
        currency: Currency the amount is expressed in
        fell_back: True if the legacy USD basis was used instead
        warning: Human-readable warning when a fallback or assumption happened
    """
    amount: float
    currency: str
    fell_back: bool = False
    warning: Optional[str] = None


@dataclass(frozen=True)
class ExchangeStats:
    """Per-exchange aggregation."""
    count: int
    total_btc: float
    total_fiat: float
    avg_price: float


@dataclass(frozen=True)
class CurrencyStats:
    """Per currency-of-record aggregation."""
    total_amount: float
    purchase_count: int


@dataclass(frozen=True)
class PurchaseExtreme:
    """
    A single notable purchase (largest/smallest).

    Attributes:
        amount: BTC amount of the purchase
        fiat_amount: Resolved cost in target fiat, excluding fees
        date: Purchase date
        price: Resolved cost divided by amount, in target fiat
    """
    amount: float
    fiat_amount: float
    date: str
    price: float


EMPTY_EXTREME = PurchaseExtreme(amount=0.0, fiat_amount=0.0, date="", price=0.0)


@dataclass(frozen=True)
class PortfolioMetrics:
    """
    Point-in-time portfolio snapshot, always expressed in ``currency``.

    ``total_invested`` and ``average_cost_basis`` follow ``basis``; both
    average prices are exposed regardless.
    """
    total_btc: float
    total_invested: float
    total_cost_excl_fees: float
    average_cost_basis: float
    average_execution_price: float
    average_effective_price: float
    current_value: float
    unrealized_pnl: float
    unrealized_pnl_percent: float
    total_fees: float
    fee_percent_of_investment: float
    purchase_count: int
    first_purchase_date: str
    last_purchase_date: str
    primary_fiat_currency: str
    currency: str
    basis: CostBasis
    exchange_breakdown: Mapping[str, ExchangeStats] = field(default_factory=dict)
    currency_breakdown: Mapping[str, CurrencyStats] = field(default_factory=dict)
    transaction_type_breakdown: Mapping[str, int] = field(default_factory=dict)
    largest_purchase: PurchaseExtreme = EMPTY_EXTREME
    smallest_purchase: PurchaseExtreme = EMPTY_EXTREME
    largest_purchase_fiat: PurchaseExtreme = EMPTY_EXTREME
    smallest_purchase_fiat: PurchaseExtreme = EMPTY_EXTREME
    has_transaction_hashes: bool = False
    has_addresses: bool = False
    timezone_most_used: Optional[str] = None
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PerformancePoint:
    """
    Running portfolio state after one purchase.

    Attributes:
        date: Purchase date
        purchase_index: 1-based position in chronological order
        running_btc: BTC held after this purchase
        running_invested: Cumulative invested fiat (per basis)
        avg_cost_basis: running_invested / running_btc
        price_at_buy: This row's own execution price (fees excluded)
        value_mtm: Holdings valued at the historical price for this point
        pnl_mtm: value_mtm - running_invested
        pnl_percent_mtm: pnl_mtm / running_invested * 100
        value_to_date: Holdings valued at the current price
        pnl_to_date: value_to_date - running_invested
        pnl_percent_to_date: pnl_to_date / running_invested * 100
    """
    date: str
    purchase_index: int
    running_btc: float
    running_invested: float
    avg_cost_basis: float
    price_at_buy: float
    value_mtm: float
    pnl_mtm: float
    pnl_percent_mtm: float
    value_to_date: float
    pnl_to_date: float
    pnl_percent_to_date: float


@dataclass(frozen=True)
class DerivedMetrics:
    """
    Figures derived from a metrics snapshot for the summary view.

    Attributes:
        average_purchase_amount: total_invested / purchase_count
        price_vs_cost_basis_percent: How far the current price sits above (+) or below (-) the average cost basis
        btc_per_fiat_unit: BTC acquired per unit of target fiat invested
        days_since_first_purchase: Whole days elapsed since the first purchase
        days_since_last_purchase: Whole days elapsed since the last purchase
    """
    average_purchase_amount: float
    price_vs_cost_basis_percent: float
    btc_per_fiat_unit: float
    days_since_first_purchase: int
    days_since_last_purchase: int
