"""Company profile commands."""

import click
from fijibooks.domain.access import Capability
from fijibooks.domain.errors import DomainError
from fijibooks.cli.error_handling import handle_domain_error
from fijibooks.cli.session_guard import active_company_or_exit, require_user_or_exit


@click.group()
def company_group():
    """Manage company profiles."""
    pass


@company_group.command("register")
@click.option("--name", required=True, help="Legal business name")
@click.option("--tin", required=True, help="Taxpayer Identification Number")
@click.option("--address", default="", help="Business address")
@click.option("--phone", default="", help="Contact phone")
@click.option("--email", default="", help="Business email")
@click.option("--vat-rate", default="0.125", show_default=True, help="VAT rate as a fraction")
@click.option("--not-vat-registered", is_flag=True, help="Company is not registered for VAT")
@click.pass_context
def register_company(
    ctx,
    name: str,
    tin: str,
    address: str,
    phone: str,
    email: str,
    vat_rate: str,
    not_vat_registered: bool,
):
    """Register a new business and make it the active company.

    Examples:
        fijibooks company register --name "Bula Trading Limited" --tin 50-12345-0-1
        fijibooks company register --name "Nadi Tours" --tin 50-99999-0-2 --vat-rate 0.15
    """
    require_user_or_exit(ctx, Capability.DASHBOARD)
    bookkeeper = ctx.obj["bookkeeper"]

    try:
        state = bookkeeper.register_company(
            name=name,
            tin=tin,
            address=address,
            phone=phone,
            email=email,
            vat_registered=not not_vat_registered,
            vat_rate=vat_rate,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    company = state.active_company
    click.echo(f"Registered company '{company.name}' (ID: {company.id})")
    click.echo(f"VAT rate: {company.vat_rate * 100:.1f}%")


@company_group.command("update")
@click.option("--name", help="Legal business name")
@click.option("--tin", help="Taxpayer Identification Number")
@click.option("--address", help="Business address")
@click.option("--phone", help="Contact phone")
@click.option("--email", help="Business email")
@click.option("--vat-rate", help="VAT rate as a fraction")
@click.option("--vat-registered/--not-vat-registered", default=None, help="VAT registration status")
@click.pass_context
def update_company(ctx, vat_registered: bool | None, **fields):
    """Update the active company's profile (boss only).

    Only the options given are changed.

    Examples:
        fijibooks company update --phone "+679 700 0000"
        fijibooks company update --vat-rate 0.15
    """
    require_user_or_exit(ctx, Capability.SETTINGS)
    company = active_company_or_exit(ctx)
    bookkeeper = ctx.obj["bookkeeper"]

    changes = {key: value for key, value in fields.items() if value is not None}
    if vat_registered is not None:
        changes["vat_registered"] = vat_registered
    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        bookkeeper.update_company(company.id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated company '{bookkeeper.state.active_company.name}'")


@company_group.command("list")
@click.pass_context
def list_companies(ctx):
    """List registered companies."""
    require_user_or_exit(ctx, Capability.DASHBOARD)
    state = ctx.obj["bookkeeper"].state

    if not state.companies:
        click.echo("No companies registered.")
        return

    click.echo("\nCompanies:")
    click.echo("-" * 70)
    for company in state.companies:
        marker = "*" if company.id == state.active_company_id else " "
        click.echo(f"{marker} ID: {company.id:<10} | {company.name:30s} | TIN: {company.tin}")


@company_group.command("switch")
@click.argument("company_id")
@click.pass_context
def switch_company(ctx, company_id: str):
    """Make another company the active one."""
    require_user_or_exit(ctx, Capability.DASHBOARD)
    bookkeeper = ctx.obj["bookkeeper"]
    try:
        state = bookkeeper.switch_company(company_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Switched to '{state.active_company.name}'")


@company_group.command("show")
@click.pass_context
def show_company(ctx):
    """Show the active company's profile."""
    require_user_or_exit(ctx, Capability.DASHBOARD)
    company = active_company_or_exit(ctx)

    click.echo(f"\n{company.name} (ID: {company.id})")
    click.echo(f"  TIN: {company.tin}")
    if company.address:
        click.echo(f"  Address: {company.address}")
    if company.phone:
        click.echo(f"  Phone: {company.phone}")
    if company.email:
        click.echo(f"  Email: {company.email}")
    status = "registered" if company.vat_registered else "not registered"
    click.echo(f"  VAT: {status}, rate {company.vat_rate * 100:.1f}%")


def register_commands(cli):
    """Register company commands with main CLI."""
    cli.add_command(company_group, name="company")
