"""Customer and supplier commands."""

import click
from fijibooks.domain.access import Capability
from fijibooks.domain.entities import ContactRole
from fijibooks.domain.errors import DomainError
from fijibooks.cli.error_handling import handle_domain_error
from fijibooks.cli.session_guard import active_company_or_exit, require_user_or_exit

ROLE_CHOICES = {"customer": ContactRole.CUSTOMER, "supplier": ContactRole.SUPPLIER}


@click.group()
def contact_group():
    """Manage customers and suppliers."""
    pass


@contact_group.command("add")
@click.argument("role", type=click.Choice(list(ROLE_CHOICES), case_sensitive=False))
@click.argument("name")
@click.option("--tin", default="", help="Contact TIN (e.g. 12-345-6)")
@click.pass_context
def add_contact(ctx, role: str, name: str, tin: str):
    """Add a customer or supplier to the active company.

    Examples:
        fijibooks contact add customer "Lautoka Hardware" --tin 50-11111-0-1
        fijibooks contact add supplier "Energy Fiji Limited"
    """
    require_user_or_exit(ctx, Capability.CONTACTS)
    active_company_or_exit(ctx)
    bookkeeper = ctx.obj["bookkeeper"]

    try:
        state = bookkeeper.add_contact(ROLE_CHOICES[role.lower()], name=name, tin=tin)
    except DomainError as e:
        handle_domain_error(ctx, e)

    contact = state.contacts[-1]
    click.echo(f"Added {role.lower()} '{contact.name}' (ID: {contact.id})")


@contact_group.command("list")
@click.option(
    "--role",
    type=click.Choice(list(ROLE_CHOICES), case_sensitive=False),
    help="Only list customers or suppliers",
)
@click.pass_context
def list_contacts(ctx, role: str | None):
    """List the active company's customers and suppliers."""
    require_user_or_exit(ctx, Capability.CONTACTS)
    active_company_or_exit(ctx)
    bookkeeper = ctx.obj["bookkeeper"]

    roles = [ROLE_CHOICES[role.lower()]] if role else list(ROLE_CHOICES.values())
    for contact_role in roles:
        title = "Customers" if contact_role == ContactRole.CUSTOMER else "Suppliers"
        contacts = bookkeeper.contacts_for(contact_role)
        click.echo(f"\n{title}:")
        click.echo("-" * 60)
        if not contacts:
            click.echo(f"No {title.lower()} added.")
            continue
        for c in contacts:
            click.echo(f"ID: {c.id:<10} | {c.name:30s} | TIN: {c.tin or '-'}")


def register_commands(cli):
    """Register contact commands with main CLI."""
    cli.add_command(contact_group, name="contact")
