"""Main CLI entry point."""

import logging

import click
from renqing.database.factories import create_sqlite_storage

# Import and register all commands at module level
from renqing.cli.commands import (
    add,
    transaction,
    person,
    import_cmd,
    export,
    tag,
    stats,
    reset,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides RENQING_DB_PATH environment variable)",
    envvar="RENQING_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="RENQING_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Renqing - Gift ledger.

    Record gifts given to and received from your contacts, see who you owe,
    and import or export your ledger as JSON or CSV.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Open storage only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        storage = create_sqlite_storage(database_path=db_path)
        storage.connect()
        ctx.obj["storage"] = storage
        ctx.call_on_close(storage.disconnect)


# Register all commands
add.register_commands(cli)
transaction.register_commands(cli)
person.register_commands(cli)
import_cmd.register_commands(cli)
export.register_commands(cli)
tag.register_commands(cli)
stats.register_commands(cli)
reset.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
