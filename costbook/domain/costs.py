"""Pure functions for cost entry validation and stamping.

This module contains the functional core for cost entries:
- No I/O operations (no database, no console, no files)
- No side effects
- Easy to test
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from costbook.domain.errors import InvalidInput
from costbook.domain.models import CategoryName, CostInput, CurrencyCode, Description, Money

SUPPORTED_CURRENCIES: tuple[str, ...] = ("USD", "ILS", "GBP", "EURO")

REQUIRED_FIELDS: tuple[str, ...] = ("sum", "currency", "category", "description")


@dataclass(frozen=True)
class StampedCost:
    """Cost ready for insertion, with its capture time denormalized."""

    sum: Money
    currency: CurrencyCode
    category: CategoryName
    description: Description
    created_at: str
    year: int
    month: int
    day: int


def coerce_sum(raw: Any) -> Money:
    """Coerce a raw sum to a finite float.

    Args:
        raw: Number or numeric string.

    Returns:
        Sum as float.

    Raises:
        InvalidInput: If the value is not numeric or not finite.
    """
    if isinstance(raw, bool):
        raise InvalidInput(f"Sum must be a number, got {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Sum must be a number, got {raw!r}") from e
    if not math.isfinite(value):
        raise InvalidInput(f"Sum must be finite, got {raw!r}")
    return Money(value)


def stamp_cost(cost: Mapping[str, Any], now: datetime) -> StampedCost:
    """Build the stored form of a cost entry.

    Args:
        cost: Cost entry with sum, currency, category and description.
        now: Capture instant. Naive datetimes are taken as local time.

    Returns:
        StampedCost with year, month and day taken from the capture instant.

    Raises:
        InvalidInput: If a required field is missing or sum is not numeric.
    """
    missing = [name for name in REQUIRED_FIELDS if name not in cost or cost[name] is None]
    if missing:
        raise InvalidInput(f"Missing cost fields: {', '.join(missing)}")

    captured = now if now.tzinfo is not None else now.astimezone()
    return StampedCost(
        sum=coerce_sum(cost["sum"]),
        currency=CurrencyCode(str(cost["currency"])),
        category=CategoryName(str(cost["category"])),
        description=Description(str(cost["description"])),
        created_at=captured.isoformat(),
        year=captured.year,
        month=captured.month,
        day=captured.day,
    )


def validate_cost_input(
    amount: Any,
    currency: str,
    category: str,
    description: str = "",
    allowed_currencies: tuple[str, ...] | None = SUPPORTED_CURRENCIES,
) -> CostInput:
    """Validate and trim a cost entry before it is stored.

    Args:
        amount: Sum as entered.
        currency: Currency code as entered.
        category: Category as entered.
        description: Optional description.
        allowed_currencies: Currencies accepted, or None to accept any code.

    Returns:
        CostInput with trimmed text fields and a float sum.

    Raises:
        InvalidInput: If the sum is not a positive number, the category is
            blank, or the currency is not accepted.
    """
    if isinstance(amount, str) and not amount.strip():
        raise InvalidInput("Please enter a valid positive sum.")
    try:
        value = coerce_sum(amount)
    except InvalidInput as e:
        raise InvalidInput("Please enter a valid positive sum.") from e
    if value <= 0:
        raise InvalidInput("Please enter a valid positive sum.")

    if not category or not category.strip():
        raise InvalidInput("Please enter a category.")

    code = currency.strip()
    if not code:
        raise InvalidInput("Please choose a currency.")
    if allowed_currencies is not None and code not in allowed_currencies:
        raise InvalidInput(f"Currency must be one of: {', '.join(allowed_currencies)}")

    return CostInput(
        sum=value,
        currency=code,
        category=category.strip(),
        description=(description or "").strip(),
    )
