"""Main CLI entry point."""

import click
from cuotas.database.factories import create_database
from cuotas.logging_config import configure_logging

# Import and register all commands at module level
from cuotas.cli.commands import (
    contract,
    schedule,
    payment,
    deliverable,
    collaborator,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CUOTAS_DB_PATH environment variable)",
    envvar="CUOTAS_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL (overrides --db-path and CUOTAS_DATABASE_URL)",
    envvar="CUOTAS_DATABASE_URL",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    envvar="CUOTAS_LOG_LEVEL",
    help="Log level for diagnostic output on stderr",
)
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, log_level: str):
    """Cuotas - Contract installment and payment tracking.

    Split contract totals into installments, record payment claims against
    them, verify those claims, and follow contract progress.
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_url=database_url, database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
contract.register_commands(cli)
schedule.register_commands(cli)
payment.register_commands(cli)
deliverable.register_commands(cli)
collaborator.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
