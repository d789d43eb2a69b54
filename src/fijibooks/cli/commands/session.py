"""Sign-in commands for the local session."""

import click
from fijibooks.domain.entities import UserRole
from fijibooks.domain.errors import DomainError
from fijibooks.cli.error_handling import handle_domain_error


@click.command("login")
@click.argument("name")
@click.argument("email")
@click.option(
    "--role",
    type=click.Choice([r.value for r in UserRole], case_sensitive=False),
    default=UserRole.BOSS.value,
    show_default=True,
    help="Role for this session",
)
@click.pass_context
def login(ctx, name: str, email: str, role: str):
    """Sign in locally. No password is checked; data stays on this machine.

    Examples:
        fijibooks login "Mere Tui" mere@bula.com.fj
        fijibooks login "Ravi Prasad" ravi@accounts.fj --role accountant
    """
    bookkeeper = ctx.obj["bookkeeper"]
    try:
        user = bookkeeper.login(name=name, email=email, role=UserRole(role.upper()))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Signed in as {user.name} ({user.role.value})")
    if not bookkeeper.state.companies:
        click.echo("No company registered yet. Run 'fijibooks company register' to set one up.")


@click.command("logout")
@click.pass_context
def logout(ctx):
    """Sign out. Company data is kept."""
    ctx.obj["bookkeeper"].logout()
    click.echo("Signed out.")


@click.command("whoami")
@click.pass_context
def whoami(ctx):
    """Show the signed-in user."""
    user = ctx.obj["bookkeeper"].current_user()
    if user is None:
        click.echo("Not signed in.")
        return
    click.echo(f"{user.name} <{user.email}> ({user.role.value})")


def register_commands(cli):
    """Register session commands with main CLI."""
    cli.add_command(login)
    cli.add_command(logout)
    cli.add_command(whoami)
