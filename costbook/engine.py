"""Report engine: the operations the entry, report and chart views call.

Each report reads the month's costs with a single query and fetches a fresh
rate table only when some cost is in another currency. Any failure aborts the
whole call; there are no partial totals.
"""

import logging
from collections.abc import Mapping
from typing import Any

from costbook.domain.currency import CURRENCY_ALIASES, needs_conversion
from costbook.domain.models import CostRecord
from costbook.domain.report import (
    CategoryTotal,
    Report,
    build_report_rows,
    create_report,
    group_category_totals,
)
from costbook.rates import RateSource
from costbook.store.ledger import LedgerStore

logger = logging.getLogger(__name__)

MONTHS_IN_YEAR = 12


class ReportEngine:
    """Composes the ledger, the rate source and the currency converter."""

    def __init__(
        self,
        store: LedgerStore,
        rate_source: RateSource,
        aliases: Mapping[str, str] = CURRENCY_ALIASES,
    ) -> None:
        self.store = store
        self.rate_source = rate_source
        self.aliases = aliases

    def add_cost(self, cost: Mapping[str, Any]) -> CostRecord:
        """Store a new cost. See LedgerStore.add_cost."""
        return self.store.add_cost(cost)

    def get_report(self, year: int, month: int, target_currency: str) -> Report:
        """Build the itemized report for a calendar month.

        Args:
            year: Calendar year.
            month: Calendar month (1-12).
            target_currency: Currency to convert every cost to.

        Returns:
            Report with converted rows and a total rounded to cents.

        Raises:
            NotOpen: If the store has not been opened.
            RatesFetchFailed: If rates are needed and cannot be fetched.
            RatesParseFailed: If rates are needed and the response is invalid.
            UnsupportedCurrency: If a cost or the target currency has no rate.
        """
        year, month = int(year), int(month)
        records = self.store.query_by_year_month(year, month)

        rates = None
        if needs_conversion(records, target_currency, self.aliases):
            rates = self.rate_source.fetch_rates()

        rows = build_report_rows(records, target_currency, rates, self.aliases)
        report = create_report(year, month, rows, target_currency)
        logger.debug(
            "Report %d-%02d: %d costs, total %s %s",
            year,
            month,
            len(rows),
            report.total.total,
            report.total.currency,
        )
        return report

    def get_category_totals(self, year: int, month: int, target_currency: str) -> list[CategoryTotal]:
        """Sum a month's converted costs per category.

        Costs with a blank category are counted under "Other".

        Args:
            year: Calendar year.
            month: Calendar month (1-12).
            target_currency: Currency to convert every cost to.

        Returns:
            One total per category in order of first appearance.
        """
        report = self.get_report(year, month, target_currency)
        return group_category_totals(report.costs)

    def get_year_monthly_totals(self, year: int, target_currency: str) -> list[float]:
        """Get the report total for every month of a year.

        Each month is an independent report, with its own rate fetch when
        needed.

        Args:
            year: Calendar year.
            target_currency: Currency to convert every cost to.

        Returns:
            Twelve totals, January first.
        """
        return [
            self.get_report(year, month, target_currency).total.total for month in range(1, MONTHS_IN_YEAR + 1)
        ]
