"""Main CLI entry point."""

import logging

import click
from shopledger.database.factories import create_database, create_sqlite_database

# Import and register all commands at module level
from shopledger.cli.commands import (
    customer,
    product,
    order,
    purchase,
    expense,
    journal,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SHOPLEDGER_DB_PATH environment variable)",
    envvar="SHOPLEDGER_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL (overrides --db-path)",
    envvar="SHOPLEDGER_DATABASE_URL",
)
@click.option(
    "--no-atomic",
    is_flag=True,
    default=False,
    help="Use read-modify-write for balance and stock updates instead of atomic increments",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    envvar="SHOPLEDGER_LOG_LEVEL",
    help="Logging level (default: WARNING)",
)
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, no_atomic: bool, log_level: str):
    """Shopledger - sales, purchases, inventory and customer ledgers.

    Keeps orders, customer balances and stock levels consistent across
    order creation, edits, deletion and customer payments.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        atomic = False if no_atomic else None
        if database_url:
            db = create_database(database_url, atomic_increments=atomic)
        else:
            db = create_sqlite_database(database_path=db_path, atomic_increments=atomic)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
customer.register_commands(cli)
product.register_commands(cli)
order.register_commands(cli)
purchase.register_commands(cli)
expense.register_commands(cli)
journal.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
