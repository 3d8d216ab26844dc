"""Shared helpers for commands: engine wiring and error display."""

import sys
from datetime import datetime
from typing import NoReturn

from rich.console import Console

from costbook.config import TomlSettings, get_config_path, get_currency_aliases, get_default_currency
from costbook.domain.errors import (
    ConfigError,
    CostbookError,
    InvalidInput,
    NotOpen,
    RatesError,
    StorageUnavailable,
    UnsupportedCurrency,
)
from costbook.engine import ReportEngine
from costbook.rates import RateSource
from costbook.store.ledger import open_store
from costbook.store.schema import get_data_dir, get_db_path

console = Console()


def open_engine() -> ReportEngine:
    """Open the default ledger and wire it to the configured rate source.

    Raises:
        StorageUnavailable: If the ledger cannot be opened.
        ConfigError: If the config file cannot be parsed.
    """
    config_path = get_config_path()
    store = open_store(db_path=get_db_path())
    rate_source = RateSource(TomlSettings(config_path), data_dir=get_data_dir())
    return ReportEngine(store, rate_source, aliases=get_currency_aliases(config_path))


def resolve_currency(currency: str | None) -> str:
    """Get the requested currency, or the configured default."""
    if currency and currency.strip():
        return currency.strip()
    return get_default_currency(get_config_path())


def resolve_period(year: int | None, month: int | None) -> tuple[int, int]:
    """Fill in the current year and month where not given."""
    now = datetime.now()
    return (year if year is not None else now.year, month if month is not None else now.month)


def format_error(error: CostbookError) -> str:
    """Format an error for the user."""
    if isinstance(error, ConfigError):
        return f"Could not read settings: {error}"
    if isinstance(error, StorageUnavailable):
        return f"Could not open the ledger, please try again. ({error})"
    if isinstance(error, NotOpen):
        return "Database not ready yet. Try again in a second."
    if isinstance(error, RatesError):
        return f"Could not get exchange rates: {error}"
    if isinstance(error, UnsupportedCurrency):
        return f"{error}. Check the rates endpoint in settings."
    if isinstance(error, InvalidInput):
        return str(error)
    return f"Error: {error}"


def fail(error: CostbookError) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]{format_error(error)}[/red]", style="bold")
    sys.exit(1)
