"""Mapper functions to convert between domain entities and ledger records.

Ledger records are the JSON-ready dictionaries stored in the database and
written to export files. Field names are camelCase so files from earlier
versions of the ledger stay readable.
"""

from datetime import datetime, time, timezone
from decimal import Decimal
from typing import Any, Optional, Union

from renqing.domain import entities as domain
from renqing.utils.amount_parser import coerce_amount
from renqing.utils.date_parser import parse_iso_date, parse_iso_datetime

REQUIRED_TRANSACTION_FIELDS = ("id", "type", "personId", "personName", "amount", "date")


def amount_to_json(amount: Decimal) -> Union[int, float, str]:
    """Render a Decimal amount for a ledger record.

    Whole amounts become ints and amounts a float holds exactly become
    floats. Anything else is written as its decimal text, which
    ``coerce_amount`` reads back without loss.
    """
    if amount == amount.to_integral_value():
        return int(amount)
    as_float = float(amount)
    if Decimal(repr(as_float)) == amount:
        return as_float
    return str(amount)


def transaction_to_record(txn: domain.Transaction) -> dict[str, Any]:
    """Convert a Transaction entity to a ledger record."""
    return {
        "id": txn.id,
        "type": txn.type.value,
        "personId": txn.person_id,
        "personName": txn.person_name,
        "amount": amount_to_json(txn.amount),
        "date": txn.date.isoformat(),
        "occasion": txn.occasion.value,
        "notes": txn.notes,
        "tags": list(txn.tags),
        "createdAt": txn.created_at.isoformat(),
    }


def person_to_record(person: domain.Person) -> dict[str, Any]:
    """Convert a Person entity to a ledger record."""
    return {
        "id": person.id,
        "name": person.name,
        "tags": list(person.tags),
        "totalGiven": amount_to_json(person.total_given),
        "totalReceived": amount_to_json(person.total_received),
        "lastInteraction": person.last_interaction.isoformat(),
        "balance": amount_to_json(person.balance),
    }


def state_to_document(
    state: domain.AppState, custom_tags: Optional[list[str]] = None
) -> dict[str, Any]:
    """Convert an AppState to the persisted/exported document layout."""
    document: dict[str, Any] = {
        "people": [person_to_record(p) for p in state.people],
        "transactions": [transaction_to_record(t) for t in state.transactions],
    }
    if custom_tags is not None:
        document["customTags"] = list(custom_tags)
    return document


def parse_transaction_type(value: Any) -> domain.TransactionType:
    """Parse a transaction direction ("GIVE"/"RECEIVE", case-insensitive)."""
    if isinstance(value, domain.TransactionType):
        return value
    if isinstance(value, str):
        try:
            return domain.TransactionType(value.strip().upper())
        except ValueError:
            pass
    raise ValueError(f"Invalid transaction type: {value!r}")


def parse_occasion(value: Any) -> domain.Occasion:
    """Parse an occasion given either its stored label or its name.

    Raises:
        ValueError: If the value matches no known occasion
    """
    if isinstance(value, domain.Occasion):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return domain.Occasion(text)
        except ValueError:
            pass
        try:
            return domain.Occasion[text.upper().replace("-", "_").replace(" ", "_")]
        except KeyError:
            pass
    raise ValueError(f"Unknown occasion: {value!r}")


def normalize_tags(tags: Any) -> tuple[str, ...]:
    """Return tags as a tuple of stripped, unique, non-empty labels in order."""
    if tags is None:
        return ()
    if isinstance(tags, str) or not isinstance(tags, (list, tuple)):
        raise ValueError(f"Tags must be a list, got {tags!r}")
    seen: list[str] = []
    for tag in tags:
        if not isinstance(tag, str):
            raise ValueError(f"Invalid tag: {tag!r}")
        label = tag.strip()
        if label and label not in seen:
            seen.append(label)
    return tuple(seen)


def transaction_from_record(record: Any) -> domain.Transaction:
    """Convert a ledger record to a Transaction entity.

    Missing optional fields take defaults: occasion OTHER, empty notes and
    tags, and a creation time of midnight UTC on the transaction date.

    Raises:
        ValueError: If the record is not a mapping, lacks a required field,
            or holds a value that cannot be converted
    """
    if not isinstance(record, dict):
        raise ValueError(f"Expected an object, got {type(record).__name__}")

    missing = [name for name in REQUIRED_TRANSACTION_FIELDS if record.get(name) in (None, "")]
    if missing:
        raise ValueError(f"Missing required fields: {', '.join(missing)}")

    for name in ("id", "personId", "personName"):
        if not isinstance(record[name], str):
            raise ValueError(f"Field '{name}' must be a string")

    txn_date = parse_iso_date(record["date"])
    created_raw = record.get("createdAt")
    if created_raw:
        created_at = parse_iso_datetime(created_raw)
    else:
        created_at = datetime.combine(txn_date, time.min, tzinfo=timezone.utc)

    occasion_raw = record.get("occasion")
    occasion = parse_occasion(occasion_raw) if occasion_raw else domain.Occasion.OTHER

    notes = record.get("notes") or ""
    if not isinstance(notes, str):
        raise ValueError("Field 'notes' must be a string")

    return domain.Transaction(
        id=record["id"],
        type=parse_transaction_type(record["type"]),
        person_id=record["personId"],
        person_name=record["personName"],
        amount=coerce_amount(record["amount"]),
        date=txn_date,
        occasion=occasion,
        created_at=created_at,
        notes=notes,
        tags=normalize_tags(record.get("tags")),
    )
