"""Reset command."""

import click
from renqing.domain.ledger import LedgerService


@click.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset(ctx, yes: bool):
    """Delete all transactions and tags.

    Export a JSON backup first if you may want the data back.
    """
    if not yes and not click.confirm("Delete ALL ledger data and tags? This cannot be undone"):
        click.echo("Reset cancelled.")
        return

    LedgerService(ctx.obj["storage"]).clear()
    click.echo("All data cleared.")


def register_commands(cli):
    """Register reset command with main CLI."""
    cli.add_command(reset)
