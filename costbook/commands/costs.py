"""Entry command for recording costs."""

from costbook.commands.common import console, fail, open_engine
from costbook.domain.costs import SUPPORTED_CURRENCIES, validate_cost_input
from costbook.domain.errors import CostbookError


def add_command(
    amount: str,
    currency: str,
    category: str,
    description: str = "",
    any_currency: bool = False,
) -> None:
    """Validate and store a cost.

    Args:
        amount: Sum as typed.
        currency: Currency code.
        category: Category label.
        description: Optional note.
        any_currency: Accept currency codes outside the supported list.
    """
    try:
        cost = validate_cost_input(
            amount,
            currency,
            category,
            description,
            allowed_currencies=None if any_currency else SUPPORTED_CURRENCIES,
        )
        engine = open_engine()
        added = engine.add_cost(cost)
    except CostbookError as e:
        fail(e)

    console.print("[green]✓[/green] Cost added:")
    console.print(f"  Sum: {added.sum:,.2f} {added.currency}")
    console.print(f"  Category: {added.category}")
    if added.description:
        console.print(f"  Description: {added.description}")
    console.print(f"  Date: {added.day}/{added.month}/{added.year}")
    console.print(f"[dim]ID: {added.id}[/dim]")
