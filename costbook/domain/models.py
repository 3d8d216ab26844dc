"""Domain type definitions for costbook.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in currency units (float, rounded only for display)
- CurrencyCode: Currency code as entered or as found in a rate table
- CategoryName: Name of a cost category
- Description: Free-text note attached to a cost
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import NewType, TypedDict

Money = NewType("Money", float)

CurrencyCode = NewType("CurrencyCode", str)

CategoryName = NewType("CategoryName", str)

Description = NewType("Description", str)

# Units of each currency equal to one unit of the reference currency
RateTable = Mapping[str, float]


class CostInput(TypedDict):
    """Cost entry as submitted by the entry collaborator."""

    sum: float | str
    currency: str
    category: str
    description: str


@dataclass(frozen=True)
class CostRecord:
    """Immutable stored cost."""

    id: int
    sum: Money
    currency: CurrencyCode
    category: CategoryName
    description: Description
    created_at: str
    year: int
    month: int
    day: int | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "sum": self.sum,
            "currency": self.currency,
            "category": self.category,
            "description": self.description,
            "createdAt": self.created_at,
            "year": self.year,
            "month": self.month,
            "day": self.day,
        }
