"""Transaction management commands."""

import click
from renqing.cli.error_handling import handle_domain_error
from renqing.cli.formatting import OCCASION_CHOICES, format_amount, format_signed, format_type
from renqing.cli.person_resolution import resolve_person_or_exit
from renqing.domain.analytics import search_transactions
from renqing.domain.errors import DomainError
from renqing.domain.ledger import LedgerService, ledger_totals
from renqing.domain.tags import TagService
from renqing.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--person", help="Contact name (moves the gift to that contact)")
@click.option("--amount", help="Gift amount")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice(["give", "receive"], case_sensitive=False),
    help="Whether you gave or received the gift",
)
@click.option("--date", help="Gift date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--occasion", type=click.Choice(OCCASION_CHOICES, case_sensitive=False), help="Occasion")
@click.option("--notes", help="Notes")
@click.option("--tag", "tags", multiple=True, help="Replace tags (repeatable)")
@click.option("--clear-tags", is_flag=True, help="Remove all tags")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    person: str | None,
    amount: str | None,
    txn_type: str | None,
    date: str | None,
    occasion: str | None,
    notes: str | None,
    tags: tuple[str, ...],
    clear_tags: bool,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. The creation time is kept.

    Examples:
        renqing transaction update lq2x9k0abc --amount 300
        renqing transaction update lq2x9k0abc --occasion festival --tag family
    """
    storage = ctx.obj["storage"]
    ledger_service = LedgerService(storage)

    if tags and clear_tags:
        click.echo("Error: --tag cannot be combined with --clear-tags", err=True)
        ctx.exit(1)

    txn_date = None
    if date is not None:
        try:
            txn_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    new_tags = None
    if clear_tags:
        new_tags = []
    elif tags:
        new_tags = list(tags)

    try:
        txn = ledger_service.update_transaction(
            transaction_id,
            person_name=person,
            amount=amount,
            date=txn_date,
            type=txn_type,
            occasion=occasion,
            notes=notes,
            tags=new_tags,
        )
        if txn.tags:
            TagService(storage).merge_tags(txn.tags)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated transaction {txn.id}")


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--person", help="Contact name or ID")
@click.option("--search", help="Search contact name, occasion and notes")
@click.option("--limit", type=int, help="Show at most this many transactions")
@click.option("--verbose", "-v", is_flag=True, help="Show all fields including notes, tags and creation time")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    person: str | None,
    search: str | None,
    limit: int | None,
    verbose: bool,
):
    """List transactions, newest first."""
    storage = ctx.obj["storage"]
    service = LedgerService(storage)

    start = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    end = None
    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    person_id = None
    if person:
        person_id = resolve_person_or_exit(ctx, service, person).id

    transactions = service.list_transactions(start_date=start, end_date=end, person_id=person_id)
    if search:
        transactions = search_transactions(transactions, search)

    if not transactions:
        click.echo("No transactions found.")
        return

    totals = ledger_totals(transactions)
    if limit is not None:
        transactions = transactions[:limit]

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    if verbose:
        click.echo("=" * 100)
        for txn in transactions:
            click.echo(f"\nTransaction ID: {txn.id}")
            click.echo(f"  Date: {txn.date}")
            click.echo(f"  Type: {format_type(txn.type)}")
            click.echo(f"  Person: {txn.person_name} (ID: {txn.person_id})")
            click.echo(f"  Amount: {format_amount(txn.amount)}")
            click.echo(f"  Occasion: {txn.occasion.value}")
            if txn.notes:
                click.echo(f"  Notes: {txn.notes}")
            if txn.tags:
                click.echo(f"  Tags: {', '.join(txn.tags)}")
            click.echo(f"  Created: {txn.created_at.isoformat()}")
            click.echo("-" * 100)
    else:
        click.echo("-" * 100)
        click.echo(
            f"{'ID':<24} {'Date':<12} {'Type':<8} {'Person':<20} {'Amount':>12}  {'Occasion':<10}"
        )
        click.echo("-" * 100)
        for txn in transactions:
            click.echo(
                f"{txn.id:<24} {str(txn.date):<12} {format_type(txn.type):<8} "
                f"{txn.person_name[:20]:<20} {format_amount(txn.amount):>12}  {txn.occasion.value:<10}"
            )

    click.echo("-" * 100)
    click.echo(
        f"Given: {format_amount(totals.given)} | Received: {format_amount(totals.received)} | "
        f"Net: {format_signed(totals.net)}"
    )


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        renqing transaction delete lq2x9k0abc
    """
    storage = ctx.obj["storage"]
    service = LedgerService(storage)

    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction '{transaction_id}' not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Delete {format_type(txn.type).lower()} of {format_amount(txn.amount)} "
        f"with {txn.person_name} on {txn.date}?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
