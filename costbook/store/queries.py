"""Database query functions."""

import logging
import sqlite3
from contextlib import closing
from pathlib import Path

from costbook.domain.costs import StampedCost
from costbook.domain.models import CategoryName, CostRecord, CurrencyCode, Description, Money
from costbook.store.schema import get_db_path

logger = logging.getLogger(__name__)


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _row_to_record(row: sqlite3.Row) -> CostRecord:
    # Databases still on schema version 1 have no day column
    day = row["day"] if "day" in row.keys() else None
    return CostRecord(
        id=row["id"],
        sum=Money(row["sum"]),
        currency=CurrencyCode(row["currency"]),
        category=CategoryName(row["category"]),
        description=Description(row["description"]),
        created_at=row["created_at"],
        year=row["year"],
        month=row["month"],
        day=day,
    )


def insert_cost(cost: StampedCost, db_path: Path | None = None, store_day: bool = True) -> CostRecord:
    """Insert a cost into the database.

    Args:
        cost: Stamped cost to store.
        db_path: Path to the database file. If None, uses default location.
        store_day: Whether the schema has a day column to fill.

    Returns:
        The stored record, including its generated id.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    columns = ["sum", "currency", "category", "description", "created_at", "year", "month"]
    values: list[object] = [
        cost.sum,
        cost.currency,
        cost.category,
        cost.description,
        cost.created_at,
        cost.year,
        cost.month,
    ]
    if store_day:
        columns.append("day")
        values.append(cost.day)

    placeholders = ", ".join("?" for _ in columns)
    query = f"INSERT INTO costs ({', '.join(columns)}) VALUES ({placeholders})"

    with closing(_connect(db_path)) as conn, conn:
        cursor = conn.cursor()
        try:
            cursor.execute(query, values)
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

        cost_id = cursor.lastrowid
        logger.debug("Inserted cost %s for %d-%02d", cost_id, cost.year, cost.month)
        return CostRecord(
            id=int(cost_id),
            sum=cost.sum,
            currency=cost.currency,
            category=cost.category,
            description=cost.description,
            created_at=cost.created_at,
            year=cost.year,
            month=cost.month,
            day=cost.day if store_day else None,
        )


def get_costs_by_year_month(year: int, month: int, db_path: Path | None = None) -> list[CostRecord]:
    """Get all costs recorded in a calendar month.

    Args:
        year: Calendar year.
        month: Calendar month (1-12).
        db_path: Path to the database file. If None, uses default location.

    Returns:
        List of cost records. No ordering is guaranteed.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with closing(_connect(db_path)) as conn, conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT * FROM costs INDEXED BY idx_costs_year_month WHERE year = ? AND month = ?",
            (year, month),
        )
        rows = cursor.fetchall()
        logger.debug("Found %d costs for %d-%02d", len(rows), year, month)
        return [_row_to_record(row) for row in rows]
