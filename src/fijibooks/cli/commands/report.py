"""Report commands."""

from datetime import date

import click
from fijibooks.domain.access import Capability
from fijibooks.domain.aggregation import previous_month, return_due_date, vat_summary
from fijibooks.domain.entities import TaxPeriod
from fijibooks.domain.errors import DomainError
from fijibooks.cli.error_handling import handle_domain_error
from fijibooks.cli.session_guard import (
    active_company_or_exit,
    format_money,
    require_user_or_exit,
)


@click.group()
def report_group():
    """Generate tax reports."""
    pass


@report_group.command("vat")
@click.option("--month", type=int, help="Month (1-12), defaults to last month")
@click.option("--year", type=int, help="Year, defaults to the year of last month")
@click.pass_context
def vat_report(ctx, month: int | None, year: int | None):
    """Show the monthly VAT return figures for the active company.

    Examples:
        fijibooks report vat
        fijibooks report vat --month 3 --year 2025
    """
    require_user_or_exit(ctx, Capability.REPORTS)
    company = active_company_or_exit(ctx)
    bookkeeper = ctx.obj["bookkeeper"]

    previous = previous_month(date.today())
    period = TaxPeriod(
        company_id=company.id,
        month=month if month is not None else previous.month,
        year=year if year is not None else previous.year,
    )

    try:
        summary = vat_summary(bookkeeper.company_entries(company.id), period)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nVAT Return - {company.name} (TIN: {company.tin})")
    click.echo(f"Period: {date(period.year, period.month, 1).strftime('%B %Y')} ({period.key})")
    click.echo(f"Due: {return_due_date(period.year, period.month)}")
    click.echo("=" * 60)
    click.echo(f"{'Output VAT (sales)':<30} {format_money(summary.output_vat):>25}")
    click.echo(f"{'Input VAT (purchases)':<30} {format_money(summary.input_vat):>25}")
    click.echo("-" * 60)
    label = "VAT Payable" if summary.vat_payable >= 0 else "VAT Refundable"
    click.echo(f"{label:<30} {format_money(abs(summary.vat_payable)):>25}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
