"""CLI helpers for session, role and active-company checks.

These keep error messaging and exit behavior consistent across commands.
"""

from __future__ import annotations

import click

from fijibooks.domain.access import Capability, require
from fijibooks.domain.entities import Company, User
from fijibooks.domain.errors import DomainError
from fijibooks.domain.state import Bookkeeper
from fijibooks.cli.error_handling import handle_domain_error


def require_user_or_exit(ctx: click.Context, capability: Capability) -> User:
    """Return the signed-in user if their role allows ``capability``."""
    bookkeeper: Bookkeeper = ctx.obj["bookkeeper"]
    user = bookkeeper.current_user()
    if user is None:
        click.echo("Error: Not signed in. Run 'fijibooks login' first.", err=True)
        ctx.exit(1)
    try:
        require(user.role, capability)
    except DomainError as e:
        handle_domain_error(ctx, e)
    return user


def active_company_or_exit(ctx: click.Context) -> Company:
    """Return the active company, or exit with a CLI error."""
    bookkeeper: Bookkeeper = ctx.obj["bookkeeper"]
    try:
        return bookkeeper.require_active_company()
    except DomainError as e:
        handle_domain_error(ctx, e)


def format_money(amount) -> str:
    return f"FJD {amount:,.2f}"
