"""Pure functions for currency normalization and conversion.

Rate tables map a currency code to the number of units of that currency
equal to one unit of the reference currency (the entry whose rate is 1).
Conversion always goes through the reference currency:

    amount / rates[from] * rates[to]

Currency codes are normalized at this boundary only. Stored records keep the
code exactly as it was entered.
"""

import math
from collections.abc import Iterable, Mapping
from typing import Any

from costbook.domain.errors import UnsupportedCurrency
from costbook.domain.models import CostRecord

CURRENCY_ALIASES: dict[str, str] = {
    "EURO": "EUR",
}


def normalize_currency(code: str, aliases: Mapping[str, str] = CURRENCY_ALIASES) -> str:
    """Normalize a currency code for comparison and rate lookup.

    Args:
        code: Currency code as entered or as found in a rate table.
        aliases: Mapping of alternative spellings to canonical codes.

    Returns:
        Upper-cased, stripped code with aliases resolved.
    """
    normalized = str(code).strip().upper()
    return aliases.get(normalized, normalized)


def normalize_rates(rates: Mapping[str, Any], aliases: Mapping[str, str] = CURRENCY_ALIASES) -> dict[str, Any]:
    """Normalize rate table keys.

    When both an alias and its canonical code are present, the canonical
    entry wins.

    Args:
        rates: Rate table as fetched.
        aliases: Mapping of alternative spellings to canonical codes.

    Returns:
        New rate table keyed by normalized codes.
    """
    normalized: dict[str, Any] = {}
    canonical: dict[str, Any] = {}
    for code, rate in rates.items():
        key = normalize_currency(code, aliases)
        if str(code).strip().upper() == key:
            canonical[key] = rate
        else:
            normalized.setdefault(key, rate)
    normalized.update(canonical)
    return normalized


def needs_conversion(
    items: Iterable[CostRecord],
    target_currency: str,
    aliases: Mapping[str, str] = CURRENCY_ALIASES,
) -> bool:
    """Check whether any item is recorded in a currency other than the target.

    Args:
        items: Cost records to inspect.
        target_currency: Currency the report is requested in.
        aliases: Mapping of alternative spellings to canonical codes.

    Returns:
        True if at least one item needs a rate lookup.
    """
    target = normalize_currency(target_currency, aliases)
    return any(normalize_currency(item.currency, aliases) != target for item in items)


def coerce_amount(amount: Any) -> float:
    """Coerce an amount to a finite float, treating anything else as zero."""
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def _lookup_rate(rates: Mapping[str, Any], code: str) -> float:
    rate = rates.get(code)
    if isinstance(rate, bool) or not isinstance(rate, (int, float)):
        raise UnsupportedCurrency(code)
    if not math.isfinite(rate) or rate == 0:
        raise UnsupportedCurrency(code)
    return float(rate)


def convert(
    amount: Any,
    from_currency: str,
    to_currency: str,
    rates: Mapping[str, Any] | None,
    aliases: Mapping[str, str] = CURRENCY_ALIASES,
) -> float:
    """Convert an amount between currencies.

    Args:
        amount: Amount in from_currency. Non-numeric or non-finite amounts
            convert to 0.
        from_currency: Currency the amount is recorded in.
        to_currency: Currency to convert to.
        rates: Rate table. Not consulted when both currencies normalize to
            the same code, so it may be empty or None in that case.
        aliases: Mapping of alternative spellings to canonical codes.

    Returns:
        Converted amount at full float precision.

    Raises:
        UnsupportedCurrency: If either currency has no usable rate.
    """
    value = coerce_amount(amount)
    source = normalize_currency(from_currency, aliases)
    target = normalize_currency(to_currency, aliases)

    if source == target:
        return value

    table = normalize_rates(rates, aliases) if isinstance(rates, Mapping) else {}
    source_rate = _lookup_rate(table, source)
    target_rate = _lookup_rate(table, target)
    return value / source_rate * target_rate
