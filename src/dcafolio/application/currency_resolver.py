# src/dcafolio/application/currency_resolver.py
"""
Currency Resolver - Per-Purchase Cost and Fee Normalization

This module determines the true cost (excluding fees) and the fee of a
single purchase in the target fiat currency. It picks the most authoritative
source field available on the record and converts it through the injected
FX provider.

Two entry points exist for each amount:
- resolve_cost / resolve_fee: strict, raise CurrencyConversionError when a
  required rate is missing
- try_resolve_cost / try_resolve_fee: graceful, fall back to the legacy USD
  basis and report a warning instead of raising

Files that USE this module:
- dcafolio.application.metrics (graceful resolution for every row)
- dcafolio.application.performance (graceful resolution for every row)
- tests.test_currency_resolver (unit tests)

Files that this module USES:
- dcafolio.domain.models (Purchase, CurrencyOptions, Resolution)
- dcafolio.domain.errors (CurrencyConversionError)
- dcafolio.shared.validators (to_float, normalize_currency)
"""
from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

from dcafolio.domain.errors import CurrencyConversionError
from dcafolio.domain.models import CurrencyOptions, Purchase, Resolution
from dcafolio.shared.validators import normalize_currency, to_float

log = logging.getLogger(__name__)

_DEFAULT_OPTIONS = CurrencyOptions()


def _target(options: Optional[CurrencyOptions]) -> str:
    options = options or _DEFAULT_OPTIONS
    return normalize_currency(options.target_fiat) or "USD"


def _usable_rate(rate: object) -> Optional[float]:
    """Return rate as float if it is a positive finite number, else None."""
    if rate is None or isinstance(rate, bool):
        return None
    try:
        value = float(rate)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def lookup_rate(options: Optional[CurrencyOptions], from_currency: str,
                as_of_date: Optional[str] = None) -> float:
    """
    Find the rate converting ``from_currency`` into the target fiat.

    Tries the dated lookup first, then the undated one.

    Args:
        options: Currency options carrying the target fiat and FX provider
        from_currency: Source currency code
        as_of_date: Transaction date for the dated lookup

    Returns:
        Units of target fiat per 1 unit of from_currency (1.0 if equal)

    Raises:
        CurrencyConversionError: If no provider is configured or no rate resolves
    """
    options = options or _DEFAULT_OPTIONS
    target = _target(options)
    source = normalize_currency(from_currency) or "USD"
    if source == target:
        return 1.0

    fx = options.fx
    if fx is None:
        raise CurrencyConversionError(
            source, target, as_of_date,
            message=f"FX required to convert {source}->{target}",
        )

    rate = None
    if as_of_date:
        rate = _usable_rate(fx.get_rate(source, target, as_of_date))
    if rate is None:
        rate = _usable_rate(fx.get_rate(source, target))
    if rate is None:
        raise CurrencyConversionError(source, target, as_of_date)
    return rate


def _cost_source(purchase: Purchase, target: str) -> Tuple[float, str, Optional[str]]:
    """
    Pick the authoritative cost field of a purchase.

    Returns:
        Tuple of (amount, currency, warning)
    """
    amount_btc = to_float(purchase.amount_btc)
    fiat_currency = normalize_currency(purchase.fiat_currency)

    fiat_amount = to_float(purchase.fiat_amount)
    if fiat_amount > 0:
        if not fiat_currency:
            return (
                fiat_amount,
                target,
                "fiat_amount provided without fiat_currency; assuming target currency "
                f"{target} for purchase on {purchase.date}",
            )
        return fiat_amount, fiat_currency, None

    price_fiat = to_float(purchase.price_fiat)
    if price_fiat > 0 and fiat_currency:
        return amount_btc * price_fiat, fiat_currency, None

    return amount_btc * to_float(purchase.price_usd), "USD", None


def _fee_source(purchase: Purchase) -> Tuple[float, str]:
    """
    Pick the authoritative fee field of a purchase.

    Returns:
        Tuple of (amount, currency)
    """
    fiat_currency = normalize_currency(purchase.fiat_currency)
    fee_fiat = to_float(purchase.fee_fiat)
    if fee_fiat > 0 and fiat_currency:
        return fee_fiat, fiat_currency

    fee_currency = normalize_currency(purchase.fee_currency)
    fee_amount = to_float(purchase.fee_amount)
    if fee_amount > 0 and fee_currency:
        return fee_amount, fee_currency

    return max(to_float(purchase.fee_usd), 0.0), "USD"


def legacy_cost(purchase: Purchase) -> float:
    """Cost on the legacy USD-only basis: amount_btc * price_usd."""
    return to_float(purchase.amount_btc) * to_float(purchase.price_usd)


def legacy_fee(purchase: Purchase) -> float:
    """Fee on the legacy USD-only basis: fee_usd (0 if missing)."""
    return max(to_float(purchase.fee_usd), 0.0)


def _resolve_cost(purchase: Purchase, options: Optional[CurrencyOptions]) -> Tuple[float, Optional[str]]:
    target = _target(options)
    amount, currency, warning = _cost_source(purchase, target)
    if currency == target:
        return amount, warning
    return amount * lookup_rate(options, currency, purchase.date), warning


def resolve_cost(purchase: Purchase, options: Optional[CurrencyOptions] = None) -> float:
    """
    Resolve the purchase cost, excluding fees, in the target fiat.

    Priority: fiat_amount (in fiat_currency), then amount_btc * price_fiat
    (in fiat_currency), then amount_btc * price_usd (in USD).

    Args:
        purchase: Purchase record
        options: Currency options (defaults to USD with no FX provider)

    Returns:
        Non-negative cost in target fiat

    Raises:
        CurrencyConversionError: If conversion is required but impossible
    """
    amount, warning = _resolve_cost(purchase, options)
    if warning:
        log.warning(warning)
    return amount


def resolve_fee(purchase: Purchase, options: Optional[CurrencyOptions] = None) -> float:
    """
    Resolve the purchase fee in the target fiat.

    Priority: fee_fiat (in fiat_currency), then fee_amount (in fee_currency),
    then fee_usd (in USD, default 0).

    Args:
        purchase: Purchase record
        options: Currency options (defaults to USD with no FX provider)

    Returns:
        Non-negative fee in target fiat

    Raises:
        CurrencyConversionError: If conversion is required but impossible
    """
    amount, currency = _fee_source(purchase)
    if amount == 0:
        return 0.0
    if currency == _target(options):
        return amount
    return amount * lookup_rate(options, currency, purchase.date)


def try_resolve_cost(purchase: Purchase, options: Optional[CurrencyOptions] = None) -> Resolution:
    """
    Resolve the purchase cost without ever failing on missing FX data.

    On a missing rate the cost falls back to amount_btc * price_usd and the
    returned Resolution carries the warning.
    """
    target = _target(options)
    try:
        amount, warning = _resolve_cost(purchase, options)
    except CurrencyConversionError as e:
        warning = f"{e}; fell back to USD-based calculation for purchase on {purchase.date}"
        log.warning(warning)
        return Resolution(amount=legacy_cost(purchase), currency="USD", fell_back=True, warning=warning)
    if warning:
        log.warning(warning)
    return Resolution(amount=amount, currency=target, warning=warning)


def try_resolve_fee(purchase: Purchase, options: Optional[CurrencyOptions] = None) -> Resolution:
    """
    Resolve the purchase fee without ever failing on missing FX data.

    On a missing rate the fee falls back to fee_usd and the returned
    Resolution carries the warning.
    """
    target = _target(options)
    try:
        amount = resolve_fee(purchase, options)
    except CurrencyConversionError as e:
        warning = f"{e}; fell back to fee_usd for purchase on {purchase.date}"
        log.warning(warning)
        return Resolution(amount=legacy_fee(purchase), currency="USD", fell_back=True, warning=warning)
    return Resolution(amount=amount, currency=target)


def convert_price(price: float, price_currency: str, options: Optional[CurrencyOptions] = None,
                  as_of_date: Optional[str] = None) -> Resolution:
    """
    Convert a quoted BTC price into the target fiat.

    If FX is unavailable the original price is kept unconverted and a
    warning is returned.

    Args:
        price: Quoted price
        price_currency: Currency of the quote
        options: Currency options
        as_of_date: Date of the quote, for dated FX lookups

    Returns:
        Resolution with the converted price
    """
    target = _target(options)
    value = to_float(price)
    source = normalize_currency(price_currency) or "USD"
    if source == target:
        return Resolution(amount=value, currency=target)
    try:
        rate = lookup_rate(options, source, as_of_date)
    except CurrencyConversionError as e:
        warning = f"{e}; using original {source} price"
        log.warning(warning)
        return Resolution(amount=value, currency=source, fell_back=True, warning=warning)
    return Resolution(amount=value * rate, currency=target)
