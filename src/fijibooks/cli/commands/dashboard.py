"""Dashboard command."""

import click
from fijibooks.domain.access import Capability
from fijibooks.domain.aggregation import build_dashboard
from fijibooks.domain.entities import AlertStatus
from fijibooks.cli.session_guard import (
    active_company_or_exit,
    format_money,
    require_user_or_exit,
)


@click.command("dashboard")
@click.pass_context
def dashboard(ctx):
    """Show totals, VAT position, top expenses and filing alerts."""
    require_user_or_exit(ctx, Capability.DASHBOARD)
    company = active_company_or_exit(ctx)
    bookkeeper = ctx.obj["bookkeeper"]

    summary = build_dashboard(bookkeeper.company_entries(company.id))

    click.echo(f"\nDashboard - {company.name} (TIN: {company.tin})")
    click.echo("=" * 60)
    click.echo(f"{'Total Income':<30} {format_money(summary.total_income):>25}")
    click.echo(f"{'Total Expenses':<30} {format_money(summary.total_expense):>25}")
    label = "VAT Payable" if summary.vat_payable >= 0 else "VAT Refundable"
    click.echo(f"{label:<30} {format_money(abs(summary.vat_payable)):>25}")
    click.echo(f"{'Entries':<30} {summary.entry_count:>25}")

    if summary.top_expense_categories:
        click.echo("\nTop expense categories:")
        for item in summary.top_expense_categories:
            click.echo(f"  {item.category:<40} {format_money(item.total):>16}")

    if summary.monthly_trend:
        click.echo("\nMonthly trend:")
        click.echo(f"  {'Month':<10} {'Income':>16} {'Expenses':>16}")
        for month in summary.monthly_trend:
            click.echo(f"  {month.month:<10} {month.income:>16,.2f} {month.expense:>16,.2f}")

    click.echo("\nAlerts:")
    for alert in summary.alerts:
        marker = "!" if alert.status == AlertStatus.URGENT else "-"
        click.echo(f"  {marker} {alert.title} (due {alert.due_date}) [{alert.status.value}]")


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
