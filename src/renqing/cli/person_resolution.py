"""CLI helpers for contact resolution."""

from __future__ import annotations

import click

from renqing.domain.entities import Person
from renqing.domain.errors import NotFoundError, person_not_found
from renqing.domain.ledger import LedgerService


def resolve_person(service: LedgerService, person: str) -> Person:
    """Resolve a contact by ID or exact name.

    Raises:
        NotFoundError: If no contact matches
    """
    found = service.get_person(person) or service.find_person_by_name(person)
    if found is None:
        raise NotFoundError(person_not_found(person))
    return found


def resolve_person_or_exit(ctx: click.Context, service: LedgerService, person: str) -> Person:
    """Resolve a contact by ID or name, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_person(service, person)
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
