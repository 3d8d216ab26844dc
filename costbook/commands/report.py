"""Report and chart commands for viewing costs."""

import calendar

from rich.table import Table

from costbook.commands.common import console, fail, open_engine, resolve_currency, resolve_period
from costbook.domain.errors import CostbookError
from costbook.domain.report import (
    ReportRow,
    calculate_histogram_bar_length,
    group_category_totals,
    round_money,
    sort_category_totals,
)


def format_month_display(year: int, month: int) -> str:
    """Format a month for display, e.g. "January 2025"."""
    return f"{calendar.month_name[month]} {year}"


def format_day(row: ReportRow, year: int, month: int) -> str:
    """Format the date of a report row as d/m/yyyy."""
    if row.day is None:
        return ""
    return f"{row.day}/{month}/{year}"


def render_bar(amount: float, max_amount: float, bar_width: int) -> str:
    return "█" * calculate_histogram_bar_length(amount, max_amount, bar_width)


def report_command(
    year: int | None = None,
    month: int | None = None,
    currency: str | None = None,
) -> None:
    """Show the itemized report for a month."""
    year, month = resolve_period(year, month)
    try:
        target = resolve_currency(currency)
        report = open_engine().get_report(year, month, target)
    except CostbookError as e:
        fail(e)

    period = format_month_display(year, month)

    if not report.costs:
        console.print(f"[dim]No costs recorded for {period}[/dim]")
        console.print(f"\n[bold]Total:[/bold] {report.total.total:,.2f} {report.total.currency}")
        return

    table = Table(title=f"{period} ({len(report.costs)} costs)")
    table.add_column("Date", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Description", style="white")
    table.add_column("Sum", justify="right")
    table.add_column("Currency", style="dim")
    table.add_column(f"In {report.total.currency}", justify="right")

    rows = sorted(report.costs, key=lambda r: (r.day or 0, r.record.id))
    for row in rows:
        table.add_row(
            format_day(row, year, month),
            row.record.category,
            row.record.description,
            f"{row.record.sum:,.2f}",
            row.record.currency,
            f"{row.sum_in_target:,.2f}",
        )

    console.print(table)
    console.print(f"\n[bold]Total:[/bold] {report.total.total:,.2f} {report.total.currency}")


def categories_command(
    year: int | None = None,
    month: int | None = None,
    currency: str | None = None,
    sort_by: str = "value",
    histogram: bool = True,
) -> None:
    """Show converted totals per category for a month."""
    year, month = resolve_period(year, month)
    try:
        target = resolve_currency(currency)
        report = open_engine().get_report(year, month, target)
    except CostbookError as e:
        fail(e)

    # The grand total is the report total, not a sum of rounded category totals
    totals = group_category_totals(report.costs)
    period = format_month_display(year, month)

    if not totals:
        console.print(f"[dim]No costs recorded for {period}[/dim]")
        return

    console.print(f"[bold cyan]Costs by category - {period} ({target})[/bold cyan]\n")

    ordered = sort_category_totals(totals, sort_by)
    max_amount = max(t.total for t in ordered)
    bar_width = 30

    for item in ordered:
        amount_display = f"{item.total:,.2f}"
        if histogram:
            bar = render_bar(item.total, max_amount, bar_width)
            console.print(f"  {item.category:20} {amount_display:>12} {bar}")
        else:
            console.print(f"  {item.category}: {amount_display}")

    console.print(f"\n  [bold]Total:[/bold] {report.total.total:,.2f} {report.total.currency}")


def year_command(
    year: int | None = None,
    currency: str | None = None,
    histogram: bool = True,
) -> None:
    """Show the total of every month of a year."""
    year, _ = resolve_period(year, None)
    try:
        target = resolve_currency(currency)
        totals = open_engine().get_year_monthly_totals(year, target)
    except CostbookError as e:
        fail(e)

    console.print(f"[bold cyan]Monthly totals - {year} ({target})[/bold cyan]\n")

    max_amount = max(totals)
    bar_width = 40

    for month, total in enumerate(totals, 1):
        amount_display = f"{total:,.2f}"
        label = calendar.month_abbr[month]
        if histogram:
            bar = render_bar(total, max_amount, bar_width)
            console.print(f"  {label:4} {amount_display:>12} {bar}")
        else:
            console.print(f"  {label}: {amount_display}")

    console.print(f"\n  [bold]Year total:[/bold] {round_money(sum(totals)):,.2f} {target}")
