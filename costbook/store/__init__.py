"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

from costbook.store.ledger import LedgerStore, open_store
from costbook.store.queries import get_costs_by_year_month, insert_cost
from costbook.store.schema import (
    DEFAULT_DB_NAME,
    SCHEMA_VERSION,
    database_exists,
    get_data_dir,
    get_db_path,
    init_database,
)

__all__ = [
    # Schema
    "DEFAULT_DB_NAME",
    "SCHEMA_VERSION",
    "database_exists",
    "get_data_dir",
    "get_db_path",
    "init_database",
    # Queries
    "get_costs_by_year_month",
    "insert_cost",
    # Ledger
    "LedgerStore",
    "open_store",
]
