"""Domain models and types for costbook.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from costbook.domain.models import CategoryName, CostInput, CostRecord, CurrencyCode, Description, Money, RateTable

__all__ = ["Money", "CurrencyCode", "CategoryName", "Description", "RateTable", "CostInput", "CostRecord"]
