"""Pure functions for report calculations and aggregations.

This module contains the functional core for reporting operations:
- No I/O operations (no database, no network, no console)
- No side effects
- Pure data transformations
- Easy to test

Converted amounts keep full float precision. Totals are rounded to cents
only when they are finalized.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import pandas as pd

from costbook.domain.currency import CURRENCY_ALIASES, coerce_amount, convert
from costbook.domain.models import CategoryName, CostRecord, CurrencyCode, Money

DEFAULT_CATEGORY = CategoryName("Other")

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class ReportRow:
    """Immutable report line for a single cost."""

    record: CostRecord
    day: int | None
    sum_in_target: Money
    target_currency: CurrencyCode

    def to_dict(self) -> dict[str, Any]:
        row = self.record.to_dict()
        row["day"] = self.day
        row["sumInTarget"] = self.sum_in_target
        row["targetCurrency"] = self.target_currency
        return row


@dataclass(frozen=True)
class ReportTotal:
    """Immutable report total."""

    currency: CurrencyCode
    total: Money


@dataclass(frozen=True)
class Report:
    """Immutable itemized report for one calendar month."""

    year: int
    month: int
    costs: list[ReportRow]
    total: ReportTotal

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "costs": [row.to_dict() for row in self.costs],
            "total": {"currency": self.total.currency, "total": self.total.total},
        }


@dataclass(frozen=True)
class CategoryTotal:
    """Immutable converted total for one category."""

    category: CategoryName
    total: Money

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "total": self.total}


def round_money(amount: float) -> Money:
    """Round an amount to cents, halves away from zero.

    The shortest decimal representation of the float is rounded, so 2.675
    becomes 2.68 as it would on a monetary display.

    Args:
        amount: Amount to round.

    Returns:
        Amount rounded to 2 decimal places.
    """
    value = coerce_amount(amount)
    return Money(float(Decimal(repr(value)).quantize(_CENT, rounding=ROUND_HALF_UP)))


def resolve_day(record: CostRecord) -> int | None:
    """Get the day of month for a record.

    Uses the stored day when present, otherwise derives it from created_at.
    Rows written before the day column existed have no stored day.

    Args:
        record: Stored cost record.

    Returns:
        Day of month, or None if created_at cannot be parsed.
    """
    if record.day is not None:
        return record.day
    try:
        return int(pd.to_datetime(record.created_at).day)
    except (ValueError, TypeError):
        return None


def category_label(category: str | None) -> CategoryName:
    """Return the display label for a category, defaulting blanks to Other."""
    if category is None or not str(category).strip():
        return DEFAULT_CATEGORY
    return CategoryName(str(category))


def build_report_rows(
    records: Sequence[CostRecord],
    target_currency: str,
    rates: Mapping[str, Any] | None,
    aliases: Mapping[str, str] = CURRENCY_ALIASES,
) -> list[ReportRow]:
    """Convert every record into a report row.

    Args:
        records: Records for the period.
        target_currency: Currency to convert to.
        rates: Rate table, or None when no record needs conversion.
        aliases: Mapping of alternative spellings to canonical codes.

    Returns:
        Report rows in record order.

    Raises:
        UnsupportedCurrency: If any record cannot be converted.
    """
    target = CurrencyCode(target_currency)
    return [
        ReportRow(
            record=record,
            day=resolve_day(record),
            sum_in_target=Money(convert(record.sum, record.currency, target, rates, aliases)),
            target_currency=target,
        )
        for record in records
    ]


def create_report(year: int, month: int, rows: list[ReportRow], target_currency: str) -> Report:
    """Create a report with its total rounded to cents.

    Args:
        year: Report year.
        month: Report month (1-12).
        rows: Converted report rows.
        target_currency: Currency of the total.

    Returns:
        Report for the period.
    """
    total = sum((coerce_amount(row.sum_in_target) for row in rows), 0.0)
    return Report(
        year=year,
        month=month,
        costs=rows,
        total=ReportTotal(currency=CurrencyCode(target_currency), total=round_money(total)),
    )


def group_category_totals(rows: Sequence[ReportRow]) -> list[CategoryTotal]:
    """Sum converted amounts per category.

    Args:
        rows: Converted report rows.

    Returns:
        One total per category, in order of first appearance, each rounded
        to cents independently.
    """
    totals: dict[CategoryName, float] = {}
    for row in rows:
        label = category_label(row.record.category)
        totals[label] = totals.get(label, 0.0) + coerce_amount(row.sum_in_target)

    return [CategoryTotal(category=label, total=round_money(total)) for label, total in totals.items()]


def sort_category_totals(totals: Sequence[CategoryTotal], sort_by: str = "value") -> list[CategoryTotal]:
    """Sort category totals by value (largest first) or alphabetically.

    Args:
        totals: Category totals.
        sort_by: Sort method - "value" or "alpha".

    Returns:
        Sorted list of category totals.
    """
    if sort_by == "alpha":
        return sorted(totals, key=lambda x: x.category.lower())
    else:
        return sorted(totals, key=lambda x: x.total, reverse=True)


def calculate_histogram_bar_length(
    amount: float,
    max_amount: float,
    bar_width: int,
) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)
