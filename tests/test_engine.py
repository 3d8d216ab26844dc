"""Tests for the report engine."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from costbook.domain.errors import NotOpen, RatesFetchFailed, UnsupportedCurrency
from costbook.domain.models import RateTable
from costbook.domain.report import CategoryTotal
from costbook.engine import ReportEngine
from costbook.store.ledger import LedgerStore, open_store

RATES = {"USD": 1, "GBP": 0.6, "EURO": 0.7, "ILS": 3.4}


class FakeRateSource:
    """Rate source that counts fetches."""

    def __init__(self, rates: RateTable | None = None, error: Exception | None = None) -> None:
        self.rates = RATES if rates is None else rates
        self.error = error
        self.calls = 0

    def fetch_rates(self) -> RateTable:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.rates


def add(store: LedgerStore, amount: float, currency: str, category: str, month: int = 1, year: int = 2025) -> None:
    store.add_cost(
        {"sum": amount, "currency": currency, "category": category, "description": ""},
        now=datetime(year, month, 10, 12, tzinfo=timezone.utc),
    )


@pytest.fixture
def store(tmp_path: Path) -> LedgerStore:
    return open_store(db_path=tmp_path / "costsdb.db")


@pytest.fixture
def rates() -> FakeRateSource:
    return FakeRateSource()


@pytest.fixture
def engine(store: LedgerStore, rates: FakeRateSource) -> ReportEngine:
    return ReportEngine(store, rates)


class TestGetReport:
    """Tests for ReportEngine.get_report."""

    def test_no_fetch_when_all_in_target(self, engine: ReportEngine, store: LedgerStore, rates: FakeRateSource) -> None:
        """Should not fetch rates when every cost is already in the target currency."""
        add(store, 10, "USD", "Food")
        add(store, 2.5, "USD", "Food")

        report = engine.get_report(2025, 1, "USD")

        assert rates.calls == 0
        assert report.total.total == 12.5

    def test_fetches_once_when_converting(
        self, engine: ReportEngine, store: LedgerStore, rates: FakeRateSource
    ) -> None:
        """Should fetch one fresh table per report."""
        add(store, 100, "USD", "Food")
        add(store, 340, "ILS", "Food")

        report = engine.get_report(2025, 1, "USD")
        engine.get_report(2025, 1, "USD")

        assert report.total.total == 200.0
        assert report.total.currency == "USD"
        assert rates.calls == 2

    def test_rows_keep_original_amounts(self, engine: ReportEngine, store: LedgerStore) -> None:
        """Should keep the stored sum and currency next to the converted amount."""
        add(store, 34, "ILS", "Food")

        row = engine.get_report(2025, 1, "USD").costs[0]

        assert row.record.sum == 34
        assert row.record.currency == "ILS"
        assert row.sum_in_target == pytest.approx(10)
        assert row.day == 10

    def test_empty_month(self, engine: ReportEngine, rates: FakeRateSource) -> None:
        """Should return an empty report with a zero total."""
        report = engine.get_report(2099, 1, "USD")

        assert report.to_dict() == {
            "year": 2099,
            "month": 1,
            "costs": [],
            "total": {"currency": "USD", "total": 0.0},
        }
        assert rates.calls == 0

    def test_fetch_failure_propagates(self, store: LedgerStore) -> None:
        """Should fail the whole report when rates cannot be fetched."""
        add(store, 10, "ILS", "Food")
        engine = ReportEngine(store, FakeRateSource(error=RatesFetchFailed("down")))

        with pytest.raises(RatesFetchFailed):
            engine.get_report(2025, 1, "USD")

    def test_unsupported_currency(self, engine: ReportEngine, store: LedgerStore) -> None:
        """Should fail the whole report when one cost has no rate."""
        add(store, 10, "USD", "Food")
        add(store, 10, "JPY", "Food")

        with pytest.raises(UnsupportedCurrency):
            engine.get_report(2025, 1, "ILS")

    def test_alias_currency_needs_no_fetch(
        self, engine: ReportEngine, store: LedgerStore, rates: FakeRateSource
    ) -> None:
        """Should treat EURO costs as already in EUR."""
        add(store, 7, "EURO", "Food")

        report = engine.get_report(2025, 1, "EUR")

        assert rates.calls == 0
        assert report.total.total == 7.0

    def test_store_not_open(self, tmp_path: Path, rates: FakeRateSource) -> None:
        """Should surface NotOpen from an unopened store."""
        engine = ReportEngine(LedgerStore(db_path=tmp_path / "costsdb.db"), rates)

        with pytest.raises(NotOpen):
            engine.get_report(2025, 1, "USD")


class TestGetCategoryTotals:
    """Tests for ReportEngine.get_category_totals."""

    def test_totals_per_category(self, engine: ReportEngine, store: LedgerStore) -> None:
        """Should sum converted costs per category."""
        add(store, 10, "USD", "Food")
        add(store, 6, "GBP", "Travel")
        add(store, 34, "ILS", "Food")
        add(store, 5, "USD", "")

        totals = engine.get_category_totals(2025, 1, "USD")

        assert [t.category for t in totals] == ["Food", "Travel", "Other"]
        assert [t.total for t in totals] == pytest.approx([20.0, 10.0, 5.0])

    def test_repeatable(self, engine: ReportEngine, store: LedgerStore) -> None:
        """Should give the same totals for the same data and rates."""
        add(store, 10, "USD", "Food")
        add(store, 6, "GBP", "Travel")

        assert engine.get_category_totals(2025, 1, "USD") == engine.get_category_totals(2025, 1, "USD")

    def test_empty_month(self, engine: ReportEngine) -> None:
        """Should return no totals for an empty month."""
        assert engine.get_category_totals(2099, 1, "USD") == []

    def test_matches_report_total(self, engine: ReportEngine, store: LedgerStore) -> None:
        """Should add up to the report total."""
        add(store, 12.34, "USD", "Food")
        add(store, 56.78, "ILS", "Rent")

        totals: list[CategoryTotal] = engine.get_category_totals(2025, 1, "USD")
        report = engine.get_report(2025, 1, "USD")

        assert round(sum(t.total for t in totals), 2) == report.total.total


class TestGetYearMonthlyTotals:
    """Tests for ReportEngine.get_year_monthly_totals."""

    def test_twelve_months(self, engine: ReportEngine, store: LedgerStore) -> None:
        """Should return a total for every month, January first."""
        add(store, 10, "USD", "Food", month=1)
        add(store, 5, "USD", "Food", month=3)
        add(store, 99, "USD", "Food", month=3, year=2024)

        totals = engine.get_year_monthly_totals(2025, "USD")

        assert len(totals) == 12
        assert totals[0] == 10.0
        assert totals[2] == 5.0
        assert sum(totals) == 15.0

    def test_empty_year(self, engine: ReportEngine) -> None:
        """Should return twelve zeros for a year without costs."""
        assert engine.get_year_monthly_totals(2099, "USD") == [0.0] * 12

    def test_fetches_per_month(self, engine: ReportEngine, store: LedgerStore, rates: FakeRateSource) -> None:
        """Should fetch rates once for each month that needs conversion."""
        add(store, 34, "ILS", "Food", month=2)
        add(store, 6, "GBP", "Food", month=5)

        totals = engine.get_year_monthly_totals(2025, "USD")

        assert rates.calls == 2
        assert totals[1] == 10.0
        assert totals[4] == 10.0
