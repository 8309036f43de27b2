"""Add transaction command."""

import click
from renqing.cli.error_handling import handle_domain_error
from renqing.cli.formatting import OCCASION_CHOICES, format_amount, format_type
from renqing.domain.errors import DomainError
from renqing.domain.ledger import LedgerService
from renqing.domain.tags import TagService
from renqing.utils.date_parser import parse_date


@click.command("add")
@click.option("--person", required=True, help="Contact name (reuses an existing contact with the same name)")
@click.option("--amount", required=True, help="Gift amount (e.g., 200 or 88.88)")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice(["give", "receive"], case_sensitive=False),
    default="give",
    show_default=True,
    help="Whether you gave or received the gift",
)
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Gift date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option(
    "--occasion",
    type=click.Choice(OCCASION_CHOICES, case_sensitive=False),
    default="other",
    show_default=True,
    help="Occasion for the gift",
)
@click.option("--notes", help="Notes")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.pass_context
def add_transaction(
    ctx,
    person: str,
    amount: str,
    txn_type: str,
    date: str,
    occasion: str,
    notes: str | None,
    tags: tuple[str, ...],
):
    """Record a gift.

    Examples:
        renqing add --person "Alice" --amount 200 --occasion wedding
        renqing add --person "Bob" --amount 100 --type receive --date 2024-02-10 --tag colleague
    """
    storage = ctx.obj["storage"]
    ledger_service = LedgerService(storage)
    tag_service = TagService(storage)

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        txn = ledger_service.add_transaction(
            person_name=person,
            amount=amount,
            date=txn_date,
            type=txn_type,
            occasion=occasion,
            notes=notes,
            tags=tags,
        )
        if txn.tags:
            tag_service.merge_tags(txn.tags)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  {format_type(txn.type)}: {txn.person_name}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Amount: {format_amount(txn.amount)}")
    click.echo(f"  Occasion: {txn.occasion.value}")
    if txn.notes:
        click.echo(f"  Notes: {txn.notes}")
    if txn.tags:
        click.echo(f"  Tags: {', '.join(txn.tags)}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
