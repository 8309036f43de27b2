"""Contact commands."""

import click
from renqing.cli.error_handling import handle_domain_error
from renqing.cli.formatting import format_amount, format_signed, format_type
from renqing.cli.person_resolution import resolve_person_or_exit
from renqing.domain.errors import DomainError
from renqing.domain.ledger import LedgerService


@click.group()
def person_group():
    """View and rename contacts."""
    pass


@person_group.command("list")
@click.pass_context
def list_people(ctx):
    """List contacts, most active first.

    Balance is received minus given: positive means you received more.
    """
    service = LedgerService(ctx.obj["storage"])
    people = service.list_people()

    if not people:
        click.echo("No contacts found. Record a gift with 'add' first.")
        return

    click.echo(f"\nFound {len(people)} contact(s):")
    click.echo("-" * 90)
    click.echo(
        f"{'Name':<20} {'Given':>12} {'Received':>12} {'Balance':>12}  {'Last':<12} {'ID':<20}"
    )
    click.echo("-" * 90)
    for person in people:
        click.echo(
            f"{person.name[:20]:<20} {format_amount(person.total_given):>12} "
            f"{format_amount(person.total_received):>12} {format_signed(person.balance):>12}  "
            f"{str(person.last_interaction):<12} {person.id:<20}"
        )


@person_group.command("show")
@click.argument("person")
@click.pass_context
def show_person(ctx, person: str):
    """Show a contact and their gift history.

    PERSON may be a contact ID or exact name.
    """
    service = LedgerService(ctx.obj["storage"])
    found = resolve_person_or_exit(ctx, service, person)

    click.echo(f"\n{found.name} (ID: {found.id})")
    click.echo(f"  Given: {format_amount(found.total_given)}")
    click.echo(f"  Received: {format_amount(found.total_received)}")
    click.echo(f"  Balance: {format_signed(found.balance)}")
    click.echo(f"  Last interaction: {found.last_interaction}")

    transactions = service.person_transactions(found.id)
    click.echo(f"\nHistory ({len(transactions)}):")
    for txn in transactions:
        notes = f"  {txn.notes}" if txn.notes else ""
        click.echo(
            f"  {txn.date}  {format_type(txn.type):<8} {format_amount(txn.amount):>10}  "
            f"{txn.occasion.value}{notes}"
        )


@person_group.command("rename")
@click.argument("person")
@click.argument("new_name")
@click.pass_context
def rename_person(ctx, person: str, new_name: str):
    """Rename a contact on every transaction.

    PERSON may be a contact ID or exact name.
    """
    service = LedgerService(ctx.obj["storage"])
    found = resolve_person_or_exit(ctx, service, person)

    try:
        renamed = service.rename_person(found.id, new_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Renamed '{found.name}' to '{renamed.name}'")


def register_commands(cli):
    """Register contact commands with main CLI."""
    cli.add_command(person_group, name="person")
