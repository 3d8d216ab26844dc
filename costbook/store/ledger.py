"""Ledger store: the durable, append-only collection of costs."""

import logging
import sqlite3
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from costbook.domain.costs import stamp_cost
from costbook.domain.errors import NotOpen, StorageUnavailable
from costbook.domain.models import CostRecord
from costbook.store.queries import get_costs_by_year_month, insert_cost
from costbook.store.schema import DEFAULT_DB_NAME, SCHEMA_VERSION, get_db_path, init_database

logger = logging.getLogger(__name__)


class LedgerStore:
    """Cost ledger backed by a SQLite file.

    The store starts unopened. add_cost and query_by_year_month raise NotOpen
    until open() has completed.
    """

    def __init__(self, name: str = DEFAULT_DB_NAME, db_path: Path | None = None) -> None:
        self.name = name
        self.db_path = db_path if db_path is not None else get_db_path(name)
        self.schema_version: int | None = None

    @property
    def is_open(self) -> bool:
        return self.schema_version is not None

    def open(self, schema_version: int = SCHEMA_VERSION) -> "LedgerStore":
        """Open the ledger, creating or migrating its schema as needed.

        Safe to call repeatedly.

        Args:
            schema_version: Schema version to open at.

        Returns:
            The store itself.

        Raises:
            StorageUnavailable: If the database cannot be opened or created.
        """
        try:
            version = init_database(self.db_path, schema_version)
        except (sqlite3.Error, OSError, ValueError) as e:
            raise StorageUnavailable(f"Could not open ledger '{self.name}' at {self.db_path}: {e}") from e

        self.schema_version = version
        logger.debug("Opened ledger %s at %s (schema version %d)", self.name, self.db_path, version)
        return self

    def _require_open(self) -> None:
        if not self.is_open:
            raise NotOpen(f"Ledger '{self.name}' is not open yet")

    def add_cost(self, cost: Mapping[str, Any], now: datetime | None = None) -> CostRecord:
        """Store a new cost stamped with the current time.

        Args:
            cost: Cost entry with sum, currency, category and description.
            now: Capture instant. Defaults to the current local time.

        Returns:
            The stored record, including its generated id.

        Raises:
            NotOpen: If the store has not been opened.
            InvalidInput: If a field is missing or sum is not numeric.
            StorageUnavailable: If the write fails.
        """
        self._require_open()
        stamped = stamp_cost(cost, now if now is not None else datetime.now().astimezone())
        try:
            return insert_cost(stamped, self.db_path, store_day=(self.schema_version or 0) >= 2)
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Could not write to ledger '{self.name}': {e}") from e

    def query_by_year_month(self, year: int, month: int) -> list[CostRecord]:
        """Get all costs recorded in a calendar month.

        Args:
            year: Calendar year.
            month: Calendar month (1-12).

        Returns:
            Matching records in no particular order, or an empty list.

        Raises:
            NotOpen: If the store has not been opened.
            StorageUnavailable: If the read fails.
        """
        self._require_open()
        try:
            return get_costs_by_year_month(int(year), int(month), self.db_path)
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Could not read from ledger '{self.name}': {e}") from e


def open_store(
    name: str = DEFAULT_DB_NAME,
    schema_version: int = SCHEMA_VERSION,
    db_path: Path | None = None,
) -> LedgerStore:
    """Open a named ledger.

    Args:
        name: Ledger name; the database file is <data dir>/<name>.db.
        schema_version: Schema version to open at.
        db_path: Explicit database path, overriding the name-based location.

    Returns:
        An open LedgerStore.

    Raises:
        StorageUnavailable: If the database cannot be opened or created.
    """
    return LedgerStore(name, db_path).open(schema_version)
