"""CLI entry point for costbook."""

import typer

from costbook.commands.admin import (
    init_command,
    reset_rates_url_command,
    set_rates_url_command,
    show_settings_command,
)
from costbook.commands.costs import add_command
from costbook.commands.report import categories_command, report_command, year_command
from costbook.log import configure_logging

app = typer.Typer(
    name="costbook",
    help="Costbook - a personal expense tracker with currency-converted reports",
    add_completion=False,
)

settings_app = typer.Typer(help="Show and change settings.")
app.add_typer(settings_app, name="settings")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Costbook - a personal expense tracker with currency-converted reports."""
    configure_logging(verbose)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize costbook database, configuration and default rates."""
    init_command(force)


@app.command()
def add(
    amount: str = typer.Argument(..., help="Sum of the cost (positive number)"),
    currency: str = typer.Argument(..., help="Currency code (USD, ILS, GBP, EURO)"),
    category: str = typer.Argument(..., help="Category label"),
    description: str = typer.Option("", "--description", "-d", help="Optional note"),
    any_currency: bool = typer.Option(False, "--any-currency", help="Accept any currency code"),
) -> None:
    """Record a new cost."""
    add_command(amount, currency, category, description, any_currency)


@app.command()
def report(
    year: int = typer.Option(None, "--year", "-y", help="Year (default: current)"),
    month: int = typer.Option(None, "--month", "-m", min=1, max=12, help="Month 1-12 (default: current)"),
    currency: str = typer.Option(None, "--currency", "-c", help="Currency to report in (default: from config)"),
) -> None:
    """Show the itemized report for a month."""
    report_command(year, month, currency)


@app.command()
def categories(
    year: int = typer.Option(None, "--year", "-y", help="Year (default: current)"),
    month: int = typer.Option(None, "--month", "-m", min=1, max=12, help="Month 1-12 (default: current)"),
    currency: str = typer.Option(None, "--currency", "-c", help="Currency to report in (default: from config)"),
    sort_by: str = typer.Option("value", help="Sort by 'value' or 'alpha'"),
    histogram: bool = typer.Option(True, help="Show histogram bars"),
) -> None:
    """Show costs by category for a month."""
    categories_command(year, month, currency, sort_by, histogram)


@app.command()
def year(
    year: int = typer.Option(None, "--year", "-y", help="Year (default: current)"),
    currency: str = typer.Option(None, "--currency", "-c", help="Currency to report in (default: from config)"),
    histogram: bool = typer.Option(True, help="Show histogram bars"),
) -> None:
    """Show monthly totals for a year."""
    year_command(year, currency, histogram)


@settings_app.command(name="show")
def settings_show() -> None:
    """Show the current settings."""
    show_settings_command()


@settings_app.command(name="set-rates-url")
def settings_set_rates_url(
    url: str = typer.Argument(..., help="URL or path of the rates JSON"),
) -> None:
    """Set the exchange rates endpoint."""
    set_rates_url_command(url)


@settings_app.command(name="reset-rates-url")
def settings_reset_rates_url() -> None:
    """Use the default exchange rates endpoint."""
    reset_rates_url_command()


if __name__ == "__main__":
    app()
