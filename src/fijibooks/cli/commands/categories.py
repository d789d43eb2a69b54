"""Category listing command."""

import click
from fijibooks.domain.categories import EXPENSE_CATEGORIES, INCOME_CATEGORIES


@click.command("categories")
@click.option(
    "--type",
    "entry_type",
    type=click.Choice(["income", "expense"], case_sensitive=False),
    help="Only list categories for one entry type",
)
def list_categories(entry_type: str | None):
    """List the suggested income and expense categories.

    Any other category text is accepted when recording an entry.
    """
    sections = [("Income", INCOME_CATEGORIES), ("Expense", EXPENSE_CATEGORIES)]
    if entry_type:
        sections = [s for s in sections if s[0].lower() == entry_type.lower()]

    for title, names in sections:
        click.echo(f"\n{title} categories:")
        for name in names:
            click.echo(f"  {name}")


def register_commands(cli):
    """Register categories command with main CLI."""
    cli.add_command(list_categories)
