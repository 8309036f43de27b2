"""Ledger export serializers.

These build the file contents only. Writing them somewhere is up to the
caller.
"""

import json
from datetime import date
from typing import Optional

from renqing.database.mappers import amount_to_json, state_to_document
from renqing.domain.entities import AppState, TransactionType

CSV_HEADERS = ["Date", "Type", "Person", "Amount", "Occasion", "Notes", "Tags"]

DEFAULT_TYPE_LABELS = {
    TransactionType.GIVE: "送出",
    TransactionType.RECEIVE: "收到",
}

UTF8_BOM = "\ufeff"


def export_json(state: AppState, custom_tags: Optional[list[str]] = None) -> str:
    """Serialize the full ledger, plus the tag vocabulary, as pretty JSON."""
    document = state_to_document(state, custom_tags=list(custom_tags or []))
    return json.dumps(document, ensure_ascii=False, indent=2)


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def export_csv(
    state: AppState, type_labels: Optional[dict[TransactionType, str]] = None
) -> str:
    """Serialize transactions as CSV for spreadsheets.

    The output starts with a UTF-8 byte-order mark. Person, notes and tags are
    always double-quoted with embedded quotes doubled; tags are joined with
    ``;``.

    Args:
        state: Ledger to export
        type_labels: Display strings for GIVE/RECEIVE

    Returns:
        CSV text
    """
    labels = type_labels or DEFAULT_TYPE_LABELS
    lines = [",".join(CSV_HEADERS)]
    for txn in state.transactions:
        lines.append(
            ",".join(
                [
                    txn.date.isoformat(),
                    labels[txn.type],
                    _quote(txn.person_name),
                    str(amount_to_json(txn.amount)),
                    txn.occasion.value,
                    _quote(txn.notes),
                    _quote(";".join(txn.tags)),
                ]
            )
        )
    return UTF8_BOM + "\n".join(lines)


def default_export_filename(extension: str, today: Optional[date] = None) -> str:
    """Return the conventional export file name for a given day."""
    today = today or date.today()
    return f"relationship_ledger_{today.isoformat()}.{extension}"
