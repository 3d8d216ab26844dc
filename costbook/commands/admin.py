"""Admin commands for initialization and settings."""

import sys

from costbook.commands.common import console, fail
from costbook.config import (
    DEFAULT_RATES_ENDPOINT,
    TomlSettings,
    clear_rates_url,
    create_default_config,
    get_config_path,
    get_currency_aliases,
    get_default_currency,
    set_rates_url,
)
from costbook.domain.errors import CostbookError
from costbook.rates import RateSource, is_remote_endpoint, write_default_rates
from costbook.store.ledger import open_store
from costbook.store.schema import database_exists, get_data_dir, get_db_path


def init_command(force: bool = False) -> None:
    """Initialize the costbook database, configuration and default rates."""
    db_path = get_db_path()
    config_path = get_config_path()
    rates_path = get_data_dir() / DEFAULT_RATES_ENDPOINT.lstrip("/")

    db_exists = database_exists(db_path)
    config_exists = config_path.exists()

    # Guard: refuse to overwrite without force flag
    if not force and (db_exists or config_exists):
        console.print("[red]Initialization failed:[/red]", style="bold")
        if db_exists:
            console.print(f"  Database already exists: {db_path}")
        if config_exists:
            console.print(f"  Config already exists: {config_path}")
        console.print("\n[yellow]Use 'costbook init --force' to overwrite[/yellow]")
        sys.exit(1)

    try:
        if force and db_exists:
            db_path.unlink()

        console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
        open_store(db_path=db_path)
        console.print("[green]✓[/green] Database initialized")

        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")

        write_default_rates(rates_path)
        console.print(f"[green]✓[/green] Default rates written to {rates_path}")

    except CostbookError as e:
        fail(e)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("\n[green]Initialization complete![/green]", style="bold")


def show_settings_command() -> None:
    """Show the current settings."""
    config_path = get_config_path()
    rate_source = RateSource(TomlSettings(config_path), data_dir=get_data_dir())
    try:
        endpoint = rate_source.resolve_endpoint()
        default_currency = get_default_currency(config_path)
        aliases = get_currency_aliases(config_path)
    except CostbookError as e:
        fail(e)

    console.print(f"[bold]Config:[/bold] {config_path}")
    console.print(f"[bold]Rates endpoint:[/bold] {endpoint}")
    if endpoint == DEFAULT_RATES_ENDPOINT:
        console.print(f"  [dim]served from {rate_source.local_path(endpoint)}[/dim]")
    console.print(f"[bold]Default currency:[/bold] {default_currency}")

    alias_display = ", ".join(f"{alias} → {code}" for alias, code in sorted(aliases.items()))
    console.print(f"[bold]Currency aliases:[/bold] {alias_display or '-'}")


def set_rates_url_command(url: str) -> None:
    """Save the rates endpoint URL."""
    try:
        stored = set_rates_url(url, get_config_path())
    except CostbookError as e:
        fail(e)

    console.print(f"[green]✓[/green] Rates endpoint saved: {stored}")
    if is_remote_endpoint(stored):
        console.print("[dim]Rates are fetched from this URL every time a report needs conversion.[/dim]")


def reset_rates_url_command() -> None:
    """Reset the rates endpoint to the default."""
    try:
        clear_rates_url(get_config_path())
    except CostbookError as e:
        fail(e)

    console.print(f"[green]✓[/green] Reset to default ({DEFAULT_RATES_ENDPOINT})")
