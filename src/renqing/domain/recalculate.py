"""Derive the people view from the transaction log."""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable

from renqing.domain.entities import AppState, Person, Transaction, TransactionType


def sort_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Sort transactions by date, newest first.

    The sort is stable, so transactions sharing a date keep their input order.
    Re-sorting an already sorted log is a no-op.
    """
    return sorted(transactions, key=lambda txn: txn.date, reverse=True)


def recalculate(transactions: Iterable[Transaction]) -> AppState:
    """Rebuild the full application state from a transaction log.

    People are grouped by ``person_id`` in a single walk over the sorted log,
    oldest first. A contact's name follows last-write-wins: the name on the
    last transaction walked (the most recently dated one) becomes the
    contact's name, and is written back onto every transaction of that
    contact so no stale copies remain.

    This function is pure and total over well-typed input. Amounts are not
    validated here; entry points do that before building a Transaction.

    Args:
        transactions: Transactions in any order, possibly empty

    Returns:
        AppState with transactions sorted by date descending and people
        ordered by most recent interaction
    """
    ordered = sort_transactions(transactions)

    totals: dict[str, dict] = {}
    for txn in reversed(ordered):
        entry = totals.get(txn.person_id)
        if entry is None:
            entry = {
                "name": txn.person_name,
                "given": Decimal("0"),
                "received": Decimal("0"),
                "last_interaction": txn.date,
            }
            totals[txn.person_id] = entry

        entry["name"] = txn.person_name
        if txn.date > entry["last_interaction"]:
            entry["last_interaction"] = txn.date

        if txn.type == TransactionType.GIVE:
            entry["given"] += txn.amount
        else:
            entry["received"] += txn.amount

    people = [
        Person(
            id=person_id,
            name=entry["name"],
            total_given=entry["given"],
            total_received=entry["received"],
            balance=entry["received"] - entry["given"],
            last_interaction=entry["last_interaction"],
        )
        for person_id, entry in totals.items()
    ]
    people.sort(key=_last_interaction, reverse=True)

    canonical_names = {person.id: person.name for person in people}
    normalized = tuple(
        txn
        if txn.person_name == canonical_names[txn.person_id]
        else replace(txn, person_name=canonical_names[txn.person_id])
        for txn in ordered
    )

    return AppState(transactions=normalized, people=tuple(people))


def _last_interaction(person: Person) -> date:
    return person.last_interaction
