"""JSON import command."""

import click
from renqing.domain.json_import import ImportService
from renqing.domain.merge import ImportStatus


@click.command("import")
@click.argument("json_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_json(ctx, json_file: str):
    """Import transactions from a ledger JSON file.

    Transactions whose ID is already in the ledger are skipped, so importing
    the same file twice is safe.
    """
    service = ImportService(ctx.obj["storage"])
    result = service.import_file(json_file)

    if result.status == ImportStatus.ALL_DUPLICATES:
        click.echo(f"Nothing imported: {result.error}")
        return

    if not result.ok:
        click.echo(f"Error: Import failed: {result.error}", err=True)
        ctx.exit(1)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.added} transactions")
    click.echo(f"  Skipped: {result.skipped} duplicates")
    if result.custom_tags:
        click.echo(f"  Tags: {len(result.custom_tags)} merged into vocabulary")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_json)
