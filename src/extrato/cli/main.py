"""Main CLI entry point."""

import logging

import click
from extrato.database.factories import create_database
from extrato.domain.entities import ActorContext

# Import and register all commands at module level
from extrato.cli.commands import (
    account,
    batch,
    category,
    classify,
    import_cmd,
    override,
    rule,
    transaction,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides EXTRATO_DB_PATH environment variable)",
    envvar="EXTRATO_DB_PATH",
)
@click.option(
    "--actor",
    default="cli",
    show_default=True,
    help="Identity recorded on imports, rules and overrides",
    envvar="EXTRATO_ACTOR",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="EXTRATO_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, actor: str, log_level: str):
    """Extrato - Bank statement import and classification.

    Import pt-BR bank statement CSV files, classify transactions with
    versioned rules and correct them by hand with an audit trail.

    Set EXTRATO_DATABASE_URL to use any SQLAlchemy database instead of SQLite.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["actor"] = ActorContext(actor=actor)


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
import_cmd.register_commands(cli)
batch.register_commands(cli)
rule.register_commands(cli)
classify.register_commands(cli)
override.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
