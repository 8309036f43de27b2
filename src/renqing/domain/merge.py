"""Import and merge of external ledger files.

Merging is ID-based: an incoming transaction whose ID is already in the
ledger is skipped, everything else is added and the state is recalculated.
Two records with different IDs but identical content are both kept.

The functions here compute the new state only. Persisting it is left to the
caller (see ``ImportService``).
"""

import json
import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Sequence

from renqing.database.mappers import normalize_tags, transaction_from_record
from renqing.domain.entities import AppState, Transaction
from renqing.domain.errors import (
    AllDuplicatesError,
    FormatError,
    LedgerImportError,
    ParseError,
    all_duplicates,
    invalid_import_record,
    unknown_import_format,
)
from renqing.domain.recalculate import recalculate

logger = logging.getLogger(__name__)


class ImportStatus(str, Enum):
    """Outcome of an import attempt."""

    IMPORTED = "imported"
    ALL_DUPLICATES = "all_duplicates"
    PARSE_ERROR = "parse_error"
    FORMAT_ERROR = "format_error"
    READ_ERROR = "read_error"


@dataclass(frozen=True)
class ImportDocument:
    """Transactions and tag vocabulary extracted from an import file."""

    transactions: tuple[Transaction, ...]
    custom_tags: Optional[tuple[str, ...]] = None


@dataclass(frozen=True)
class ImportResult:
    """Result of merging a batch into the ledger.

    ``state`` is always usable: on any outcome other than IMPORTED it is the
    unchanged input state.
    """

    status: ImportStatus
    state: AppState
    added: int = 0
    skipped: int = 0
    error: Optional[LedgerImportError] = None
    custom_tags: Optional[tuple[str, ...]] = None

    @property
    def ok(self) -> bool:
        """True unless the input could not be read or understood."""
        return self.status in (ImportStatus.IMPORTED, ImportStatus.ALL_DUPLICATES)

    @property
    def changed(self) -> bool:
        """True if the ledger state differs from the input state."""
        return self.status == ImportStatus.IMPORTED


def extract_transaction_records(document: Any) -> list[Any]:
    """Pick the transaction list out of a supported container shape.

    Supported shapes, tried in order:
    1. ``{"transactions": [...]}``
    2. ``{"payload": {"transactions": [...]}}`` (legacy exports)

    Raises:
        FormatError: If the document matches neither shape
    """
    if isinstance(document, dict):
        transactions = document.get("transactions")
        if isinstance(transactions, list):
            return transactions

        payload = document.get("payload")
        if isinstance(payload, dict) and isinstance(payload.get("transactions"), list):
            return payload["transactions"]

    raise FormatError(unknown_import_format())


def parse_import_document(text: str) -> ImportDocument:
    """Parse the text of an import file.

    Every record must map to a valid Transaction; one bad record rejects the
    whole document.

    Raises:
        ParseError: If the text is not valid JSON
        FormatError: If the container shape or any record is invalid
    """
    try:
        document = json.loads(text, parse_float=Decimal)
    except (json.JSONDecodeError, TypeError, RecursionError) as e:
        raise ParseError(f"Invalid JSON: {e}") from e

    records = extract_transaction_records(document)

    transactions = []
    for index, record in enumerate(records):
        try:
            transactions.append(transaction_from_record(record))
        except ValueError as e:
            raise FormatError(invalid_import_record(index, str(e))) from e

    custom_tags = None
    raw_tags = document.get("customTags")
    if isinstance(raw_tags, list):
        try:
            custom_tags = normalize_tags(raw_tags)
        except ValueError as e:
            raise FormatError(f"Invalid customTags: {e}") from e

    return ImportDocument(transactions=tuple(transactions), custom_tags=custom_tags)


def import_batch(
    current_state: AppState, incoming: Sequence[Transaction]
) -> ImportResult:
    """Merge a batch of transactions into the current state.

    Transactions whose ID already exists in ``current_state`` are discarded.
    Repeated IDs inside the batch keep their first occurrence. If nothing is
    left, the result has status ALL_DUPLICATES and carries ``current_state``
    itself, without recalculating.

    Args:
        current_state: The ledger as it is now
        incoming: Transactions to merge

    Returns:
        ImportResult with the merged state
    """
    seen = current_state.transaction_ids()
    new_transactions = []
    for txn in incoming:
        if txn.id in seen:
            continue
        seen.add(txn.id)
        new_transactions.append(txn)

    skipped = len(incoming) - len(new_transactions)
    if not new_transactions:
        logger.info("Import skipped: all %d transactions already exist", len(incoming))
        return ImportResult(
            status=ImportStatus.ALL_DUPLICATES,
            state=current_state,
            skipped=skipped,
            error=AllDuplicatesError(all_duplicates(len(incoming))),
        )

    new_state = recalculate([*current_state.transactions, *new_transactions])
    logger.info("Imported %d transactions, skipped %d", len(new_transactions), skipped)
    return ImportResult(
        status=ImportStatus.IMPORTED,
        state=new_state,
        added=len(new_transactions),
        skipped=skipped,
    )


def import_json(current_state: AppState, text: str) -> ImportResult:
    """Parse an import file and merge it into the current state.

    Never raises for bad input: parse and format failures are reported on the
    result and the state is returned unchanged.
    """
    try:
        document = parse_import_document(text)
    except ParseError as e:
        logger.warning("Import failed: %s", e)
        return ImportResult(status=ImportStatus.PARSE_ERROR, state=current_state, error=e)
    except FormatError as e:
        logger.warning("Import failed: %s", e)
        return ImportResult(status=ImportStatus.FORMAT_ERROR, state=current_state, error=e)

    result = import_batch(current_state, document.transactions)
    return replace(result, custom_tags=document.custom_tags)
