"""Ledger domain operations and service.

Every operation takes the current AppState and returns a new one built by
``recalculate``; nothing here touches storage. ``LedgerService`` adds the
load, compute, save cycle on top.
"""

import logging
from dataclasses import replace
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Iterable, Optional

from renqing.database.base import Storage
from renqing.database.mappers import normalize_tags, parse_occasion, parse_transaction_type
from renqing.domain.entities import (
    AppState,
    LedgerTotals,
    Occasion,
    Person,
    Transaction,
    TransactionType,
)
from renqing.domain.errors import (
    NotFoundError,
    ValidationError,
    person_not_found,
    transaction_not_found,
)
from renqing.domain.recalculate import recalculate
from renqing.utils.amount_parser import coerce_amount
from renqing.utils.ids import generate_id

logger = logging.getLogger(__name__)


def validate_entry(
    person_name: Optional[str],
    amount: object,
    type: object = TransactionType.GIVE,
    occasion: object = Occasion.OTHER,
    tags: Optional[Iterable[str]] = None,
) -> tuple[str, Decimal, TransactionType, Occasion, tuple[str, ...]]:
    """Validate manual entry fields.

    Returns:
        Tuple of (person_name, amount, type, occasion, tags) in canonical form

    Raises:
        ValidationError: If the name is blank, the amount is missing,
            non-numeric or negative, or type/occasion/tags are invalid
    """
    if person_name is None or not person_name.strip():
        raise ValidationError("Person name is required")
    if amount is None or amount == "":
        raise ValidationError("Amount is required")

    try:
        parsed_amount = coerce_amount(amount)
        parsed_type = parse_transaction_type(type)
        parsed_occasion = parse_occasion(occasion)
        parsed_tags = normalize_tags(list(tags) if tags is not None else None)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    return person_name.strip(), parsed_amount, parsed_type, parsed_occasion, parsed_tags


def resolve_person_id(
    state: AppState, person_name: str, fallback_id: Optional[str] = None
) -> str:
    """Find the contact ID to use for a name.

    An exact name match on an existing contact reuses that contact's ID.
    Otherwise ``fallback_id`` is used when given, else a new ID is generated.
    """
    for person in state.people:
        if person.name == person_name:
            return person.id
    return fallback_id or generate_id()


def build_transaction(
    state: AppState,
    person_name: Optional[str],
    amount: object,
    date: date,
    type: object = TransactionType.GIVE,
    occasion: object = Occasion.OTHER,
    notes: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
    person_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Transaction:
    """Validate entry fields and build a new Transaction.

    The ID is freshly generated and ``created_at`` is stamped with ``now``
    (defaults to the current UTC time). When ``person_id`` is not given, it is
    resolved from the name.

    Raises:
        ValidationError: If the entry is invalid
    """
    name, parsed_amount, parsed_type, parsed_occasion, parsed_tags = validate_entry(
        person_name, amount, type, occasion, tags
    )
    return Transaction(
        id=generate_id(),
        type=parsed_type,
        person_id=person_id or resolve_person_id(state, name),
        person_name=name,
        amount=parsed_amount,
        date=date,
        occasion=parsed_occasion,
        created_at=now or datetime.now(UTC),
        notes=notes or "",
        tags=parsed_tags,
    )


def add_transaction(state: AppState, transaction: Transaction) -> AppState:
    """Return a new state with the transaction added.

    Raises:
        ValidationError: If a transaction with the same ID already exists
    """
    if state.find_transaction(transaction.id) is not None:
        raise ValidationError(f"Transaction '{transaction.id}' already exists")
    return recalculate([transaction, *state.transactions])


def update_transaction(state: AppState, transaction: Transaction) -> AppState:
    """Return a new state with the stored transaction of the same ID replaced.

    The stored ``created_at`` is kept regardless of what the update carries.

    Raises:
        NotFoundError: If no transaction has that ID
    """
    existing = state.find_transaction(transaction.id)
    if existing is None:
        raise NotFoundError(transaction_not_found(transaction.id))

    updated = replace(transaction, created_at=existing.created_at)
    return recalculate(
        updated if txn.id == transaction.id else txn for txn in state.transactions
    )


def delete_transaction(state: AppState, transaction_id: str) -> AppState:
    """Return a new state without the given transaction.

    Raises:
        NotFoundError: If no transaction has that ID
    """
    if state.find_transaction(transaction_id) is None:
        raise NotFoundError(transaction_not_found(transaction_id))
    return recalculate(txn for txn in state.transactions if txn.id != transaction_id)


def rename_person(state: AppState, person_id: str, new_name: str) -> AppState:
    """Return a new state with a contact renamed on all of its transactions.

    Raises:
        NotFoundError: If the contact does not exist
        ValidationError: If the new name is blank
    """
    if state.find_person(person_id) is None:
        raise NotFoundError(person_not_found(person_id))
    if not new_name or not new_name.strip():
        raise ValidationError("Person name is required")

    name = new_name.strip()
    return recalculate(
        replace(txn, person_name=name) if txn.person_id == person_id else txn
        for txn in state.transactions
    )


def ledger_totals(transactions: Iterable[Transaction]) -> LedgerTotals:
    """Sum given and received amounts."""
    given = Decimal("0")
    received = Decimal("0")
    for txn in transactions:
        if txn.type == TransactionType.GIVE:
            given += txn.amount
        else:
            received += txn.amount
    return LedgerTotals(given=given, received=received)


class LedgerService:
    """Service for managing the ledger against a storage backend."""

    def __init__(self, storage: Storage):
        """Initialize ledger service.

        Args:
            storage: Storage instance
        """
        self.storage = storage

    def load(self) -> AppState:
        """Load the current ledger state."""
        return self.storage.load()

    def _commit(self, state: AppState) -> AppState:
        self.storage.save(state)
        return state

    def add_transaction(
        self,
        person_name: Optional[str],
        amount: object,
        date: date,
        type: object = TransactionType.GIVE,
        occasion: object = Occasion.OTHER,
        notes: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> Transaction:
        """Record a new gift.

        Args:
            person_name: Contact name; reuses an existing contact on exact match
            amount: Gift amount (Decimal, number or string)
            date: Date of the gift
            type: GIVE or RECEIVE
            occasion: Occasion enum member, label or name
            notes: Optional notes
            tags: Optional tags

        Returns:
            The stored transaction

        Raises:
            ValidationError: If the entry is invalid
        """
        state = self.load()
        txn = build_transaction(
            state,
            person_name=person_name,
            amount=amount,
            date=date,
            type=type,
            occasion=occasion,
            notes=notes,
            tags=tags,
        )
        new_state = self._commit(add_transaction(state, txn))
        logger.info("Added transaction %s for %s", txn.id, txn.person_name)
        return new_state.find_transaction(txn.id) or txn

    def update_transaction(
        self,
        transaction_id: str,
        person_name: Optional[str] = None,
        amount: object = None,
        date: Optional[date] = None,
        type: object = None,
        occasion: object = None,
        notes: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> Transaction:
        """Update fields of an existing transaction.

        Only provided fields change. Changing the name reassigns the
        transaction to the contact with that exact name, or to a new contact
        if there is none; use ``rename_person`` to rename a contact everywhere.

        Raises:
            NotFoundError: If the transaction doesn't exist
            ValidationError: If the resulting entry is invalid
        """
        state = self.load()
        existing = state.find_transaction(transaction_id)
        if existing is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        name = existing.person_name if person_name is None else person_name
        name, parsed_amount, parsed_type, parsed_occasion, parsed_tags = validate_entry(
            name,
            existing.amount if amount is None else amount,
            existing.type if type is None else type,
            existing.occasion if occasion is None else occasion,
            existing.tags if tags is None else tags,
        )

        person_id = existing.person_id
        if name != existing.person_name:
            person_id = resolve_person_id(state, name)

        updated = replace(
            existing,
            person_id=person_id,
            person_name=name,
            amount=parsed_amount,
            date=existing.date if date is None else date,
            type=parsed_type,
            occasion=parsed_occasion,
            notes=existing.notes if notes is None else notes,
            tags=parsed_tags,
        )
        new_state = self._commit(update_transaction(state, updated))
        logger.info("Updated transaction %s", transaction_id)
        return new_state.find_transaction(transaction_id) or updated

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        state = self.load()
        self._commit(delete_transaction(state, transaction_id))
        logger.info("Deleted transaction %s", transaction_id)

    def rename_person(self, person_id: str, new_name: str) -> Person:
        """Rename a contact on all of its transactions.

        Raises:
            NotFoundError: If the contact doesn't exist
            ValidationError: If the name is blank
        """
        new_state = self._commit(rename_person(self.load(), person_id, new_name))
        person = new_state.find_person(person_id)
        if person is None:
            raise NotFoundError(person_not_found(person_id))
        return person

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        return self.load().find_transaction(transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        person_id: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions, newest first, with optional filters."""
        transactions = []
        for txn in self.load().transactions:
            if start_date is not None and txn.date < start_date:
                continue
            if end_date is not None and txn.date > end_date:
                continue
            if person_id is not None and txn.person_id != person_id:
                continue
            transactions.append(txn)
        return transactions

    def person_transactions(self, person_id: str) -> list[Transaction]:
        """List one contact's transactions, newest first."""
        return self.list_transactions(person_id=person_id)

    def get_person(self, person_id: str) -> Optional[Person]:
        """Get a contact by ID."""
        return self.load().find_person(person_id)

    def find_person_by_name(self, name: str) -> Optional[Person]:
        """Get a contact by exact name."""
        for person in self.load().people:
            if person.name == name:
                return person
        return None

    def list_people(self) -> list[Person]:
        """List contacts, highest total volume first."""
        return sorted(
            self.load().people,
            key=lambda p: p.total_given + p.total_received,
            reverse=True,
        )

    def totals(self) -> LedgerTotals:
        """Owner-wide given/received totals."""
        return ledger_totals(self.load().transactions)

    def clear(self) -> None:
        """Delete all ledger data and the tag vocabulary."""
        self.storage.clear()
