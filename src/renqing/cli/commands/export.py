"""Export commands."""

from pathlib import Path

import click
from renqing.domain.export import default_export_filename, export_csv, export_json
from renqing.domain.ledger import LedgerService
from renqing.domain.tags import TagService


@click.command("export")
@click.argument("export_format", type=click.Choice(["json", "csv"], case_sensitive=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    help="Output file (default: relationship_ledger_<date>.<format> in the current directory)",
)
@click.pass_context
def export_ledger(ctx, export_format: str, output: str | None):
    """Export the ledger as JSON (full backup) or CSV (for spreadsheets).

    Examples:
        renqing export json
        renqing export csv -o gifts.csv
    """
    storage = ctx.obj["storage"]
    state = LedgerService(storage).load()
    export_format = export_format.lower()

    if export_format == "json":
        content = export_json(state, custom_tags=TagService(storage).list_tags())
    else:
        content = export_csv(state)

    path = Path(output or default_export_filename(export_format))
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        click.echo(f"Error: Could not write {path}: {e}", err=True)
        ctx.exit(1)

    click.echo(f"Exported {len(state.transactions)} transactions to {path}")


def register_commands(cli):
    """Register export command with main CLI."""
    cli.add_command(export_ledger)
