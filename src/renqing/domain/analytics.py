"""Analytics domain service."""

from collections import defaultdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from dateutil.relativedelta import relativedelta

from renqing.database.base import Storage
from renqing.domain.entities import (
    AnalyticsFilter,
    AnalyticsReport,
    AppState,
    Archetype,
    Occasion,
    PersonAggregate,
    Transaction,
    TransactionType,
)
from renqing.domain.ledger import ledger_totals

DEFAULT_TOP_N = 10

BALANCED_LOW = Decimal("0.8")
BALANCED_HIGH = Decimal("1.2")


def filter_transactions(
    transactions: Sequence[Transaction], filters: AnalyticsFilter
) -> list[Transaction]:
    """Apply date range, contact, occasion and tag filters."""
    result = []
    for txn in transactions:
        if filters.start_date is not None and txn.date < filters.start_date:
            continue
        if filters.end_date is not None and txn.date > filters.end_date:
            continue
        if filters.person_id is not None and txn.person_id != filters.person_id:
            continue
        if filters.occasion is not None and txn.occasion != filters.occasion:
            continue
        if filters.tag is not None and filters.tag not in txn.tags:
            continue
        result.append(txn)
    return result


def rank_people(transactions: Sequence[Transaction]) -> list[PersonAggregate]:
    """Aggregate volume per contact, highest total first.

    Ties keep the order in which contacts first appear.
    """
    grouped: dict[str, dict] = {}
    for txn in transactions:
        entry = grouped.setdefault(
            txn.person_id,
            {"name": txn.person_name, "given": Decimal("0"), "received": Decimal("0")},
        )
        if txn.type == TransactionType.GIVE:
            entry["given"] += txn.amount
        else:
            entry["received"] += txn.amount

    aggregates = [
        PersonAggregate(
            person_id=person_id,
            name=entry["name"],
            total=entry["given"] + entry["received"],
            given=entry["given"],
            received=entry["received"],
        )
        for person_id, entry in grouped.items()
    ]
    aggregates.sort(key=lambda a: a.total, reverse=True)
    return aggregates


def concentration(aggregates: Sequence[PersonAggregate], top_n: int = DEFAULT_TOP_N) -> int:
    """Percentage of total volume that comes from the top N contacts.

    Args:
        aggregates: Per-contact aggregates sorted by total, highest first
        top_n: Size of the core circle

    Returns:
        Whole percentage (rounded half up), 0 when there is no volume
    """
    total_volume = sum((a.total for a in aggregates), Decimal("0"))
    if total_volume <= 0:
        return 0
    top_volume = sum((a.total for a in aggregates[:top_n]), Decimal("0"))
    percent = (top_volume / total_volume) * 100
    return int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def occasion_breakdown(
    transactions: Sequence[Transaction],
) -> list[tuple[Occasion, Decimal]]:
    """Total amount per occasion, highest first."""
    totals: dict[Occasion, Decimal] = defaultdict(lambda: Decimal("0"))
    for txn in transactions:
        totals[txn.occasion] += txn.amount
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)


def classify_archetype(transactions: Sequence[Transaction], today: date) -> Archetype:
    """Classify the owner's gift flow.

    A non-empty ledger with nothing in the past year is DORMANT. Otherwise the
    received/given ratio decides: 0.8 to 1.2 is BALANCED, above is INFLOW,
    below is OUTFLOW. With nothing given, the ratio is 99 if anything was
    received, else 1.
    """
    one_year_ago = today - relativedelta(years=1)
    if transactions and not any(txn.date > one_year_ago for txn in transactions):
        return Archetype.DORMANT

    totals = ledger_totals(transactions)
    if totals.given == 0:
        ratio = Decimal("99") if totals.received > 0 else Decimal("1")
    else:
        ratio = totals.received / totals.given

    if BALANCED_LOW <= ratio <= BALANCED_HIGH:
        return Archetype.BALANCED
    if ratio > BALANCED_HIGH:
        return Archetype.INFLOW
    return Archetype.OUTFLOW


def search_transactions(
    transactions: Sequence[Transaction], query: str
) -> list[Transaction]:
    """Case-insensitive search over contact name, occasion and notes.

    A blank query returns every transaction.
    """
    needle = query.strip().lower()
    if not needle:
        return list(transactions)
    return [
        txn
        for txn in transactions
        if needle in txn.person_name.lower()
        or needle in txn.occasion.value.lower()
        or needle in txn.occasion.name.lower()
        or needle in txn.notes.lower()
    ]


def build_report(
    state: AppState,
    filters: Optional[AnalyticsFilter] = None,
    today: Optional[date] = None,
    top_n: int = DEFAULT_TOP_N,
) -> AnalyticsReport:
    """Build an analytics report for formatting.

    Rankings, concentration, occasions and totals cover the filtered
    transactions; the archetype always covers the whole ledger.
    """
    filters = filters or AnalyticsFilter()
    today = today or date.today()

    filtered = filter_transactions(state.transactions, filters)
    rankings = rank_people(filtered)

    return AnalyticsReport(
        filters=filters,
        transactions=tuple(filtered),
        totals=ledger_totals(filtered),
        rankings=tuple(rankings),
        concentration=concentration(rankings, top_n),
        top_n=top_n,
        occasions=tuple(occasion_breakdown(filtered)),
        archetype=classify_archetype(state.transactions, today),
    )


class AnalyticsService:
    """Service for building analytics over the stored ledger."""

    def __init__(self, storage: Storage):
        """Initialize analytics service.

        Args:
            storage: Storage instance
        """
        self.storage = storage

    def build_report(
        self,
        filters: Optional[AnalyticsFilter] = None,
        today: Optional[date] = None,
        top_n: int = DEFAULT_TOP_N,
    ) -> AnalyticsReport:
        """Build an analytics report from the stored ledger."""
        return build_report(self.storage.load(), filters, today, top_n)
