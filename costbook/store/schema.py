"""Database schema initialization and migrations."""

import logging
import os
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "costsdb"

# Version 1: costs table and (year, month) index
# Version 2: day column
SCHEMA_VERSION = 2


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_data_dir() -> Path:
    """Get the costbook data directory (XDG compliant)."""
    return get_xdg_data_home() / "costbook"


def get_db_path(name: str = DEFAULT_DB_NAME) -> Path:
    """Get the database path for a named ledger (XDG compliant)."""
    return get_data_dir() / f"{name}.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the schema version recorded in the database."""
    return int(conn.execute("PRAGMA user_version").fetchone()[0])


def _create_schema_v1(cursor: sqlite3.Cursor) -> None:
    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS costs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            sum REAL NOT NULL,
            currency TEXT NOT NULL,
            category TEXT NOT NULL,
            description TEXT NOT NULL,
            created_at TEXT NOT NULL,
            year INTEGER NOT NULL,
            month INTEGER NOT NULL
        )
    """
    )
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_costs_year_month ON costs(year, month)")


def _migrate_v2(cursor: sqlite3.Cursor) -> None:
    cursor.execute("PRAGMA table_info(costs)")
    columns = [row[1] for row in cursor.fetchall()]

    # Migration: Add 'day' column if missing. Older rows keep NULL and
    # readers derive the day from created_at.
    if "day" not in columns:
        cursor.execute("ALTER TABLE costs ADD COLUMN day INTEGER")


_MIGRATIONS = {
    1: _create_schema_v1,
    2: _migrate_v2,
}


def init_database(db_path: Path | None = None, schema_version: int = SCHEMA_VERSION) -> int:
    """Initialize the database with the required schema.

    Schema creation runs inside an immediate transaction, so concurrent
    callers against the same file serialize and each migration runs once.
    Calling it again at the same version changes nothing.

    Args:
        db_path: Path to the database file. If None, uses default location.
        schema_version: Schema version to upgrade to.

    Returns:
        The schema version of the database after initialization.

    Raises:
        ValueError: If schema_version is out of range or older than the
            version already stored.
        sqlite3.Error: If database initialization fails.
    """
    if not 1 <= schema_version <= SCHEMA_VERSION:
        raise ValueError(f"Unknown schema version {schema_version} (latest is {SCHEMA_VERSION})")

    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, isolation_level=None)
    cursor = conn.cursor()

    try:
        cursor.execute("BEGIN IMMEDIATE")
        current = get_schema_version(conn)

        if current > schema_version:
            cursor.execute("ROLLBACK")
            raise ValueError(f"Database schema version {current} is newer than requested {schema_version}")

        for version in range(current + 1, schema_version + 1):
            logger.info("Applying schema version %d to %s", version, db_path)
            _MIGRATIONS[version](cursor)

        if schema_version > current:
            # PRAGMA does not accept bound parameters
            cursor.execute(f"PRAGMA user_version = {int(schema_version)}")

        cursor.execute("COMMIT")
        return max(current, schema_version)

    except sqlite3.Error:
        if conn.in_transaction:
            cursor.execute("ROLLBACK")
        raise
    finally:
        conn.close()
