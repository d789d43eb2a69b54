"""Main CLI entry point."""

import click
from fijibooks.database.factories import create_sqlite_database
from fijibooks.domain.state import Bookkeeper
from fijibooks.log import configure_logging

# Import and register all commands at module level
from fijibooks.cli.commands import (
    session,
    company,
    contact,
    entry,
    categories,
    dashboard,
    report,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FIJIBOOKS_DB_PATH environment variable)",
    envvar="FIJIBOOKS_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log informational events to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """fijibooks - VAT bookkeeping for Fiji small businesses.

    Register your company, record sales and expenses with VAT worked out at
    your rate, keep customers and suppliers, and see what VAT you owe.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["bookkeeper"] = Bookkeeper(db)
        ctx.call_on_close(db.disconnect)


# Register all commands
session.register_commands(cli)
company.register_commands(cli)
contact.register_commands(cli)
entry.register_commands(cli)
categories.register_commands(cli)
dashboard.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
