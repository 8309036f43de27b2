"""Domain model entities for renqing.

These are pure data classes representing ledger concepts, independent of the
storage format. People are never stored on their own; they are always derived
from the transaction log by the recalculator.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a gift relative to the ledger owner."""

    GIVE = "GIVE"
    RECEIVE = "RECEIVE"


class Occasion(str, Enum):
    """Closed vocabulary of social events that prompt a gift.

    Values are the labels stored in ledger files, so older exports load
    without translation.
    """

    BIRTHDAY = "生日"
    FULL_MOON = "满月宴"
    WEDDING = "婚礼"
    HOUSEWARMING = "乔迁新房"
    ACADEMIC = "升学宴"
    FESTIVAL = "节日"
    VISIT_SICK = "生病探望"
    DINNER = "请客吃饭"
    OTHER = "其他"


@dataclass(frozen=True)
class Transaction:
    """A single gift event."""

    id: str
    type: TransactionType
    person_id: str
    person_name: str
    amount: Decimal
    date: date
    occasion: Occasion
    created_at: datetime
    notes: str = ""
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Person:
    """Aggregate view of one contact, derived from transactions."""

    id: str
    name: str
    total_given: Decimal
    total_received: Decimal
    balance: Decimal
    last_interaction: date
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class AppState:
    """Aggregate root: the transaction log and the people derived from it."""

    transactions: tuple[Transaction, ...] = ()
    people: tuple[Person, ...] = ()

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Return the transaction with the given ID, if any."""
        for txn in self.transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def find_person(self, person_id: str) -> Optional[Person]:
        """Return the derived person with the given ID, if any."""
        for person in self.people:
            if person.id == person_id:
                return person
        return None

    def transaction_ids(self) -> set[str]:
        return {txn.id for txn in self.transactions}


@dataclass(frozen=True)
class LedgerTotals:
    """Owner-wide totals across a set of transactions."""

    given: Decimal
    received: Decimal

    @property
    def net(self) -> Decimal:
        """Net inflow (received minus given)."""
        return self.received - self.given


@dataclass(frozen=True)
class PersonAggregate:
    """Per-contact volume over a filtered set of transactions."""

    person_id: str
    name: str
    total: Decimal
    given: Decimal
    received: Decimal


class Archetype(str, Enum):
    """Coarse classification of the owner's overall gift flow."""

    DORMANT = "Dormant"
    BALANCED = "Balanced"
    INFLOW = "Inflow"
    OUTFLOW = "Outflow"


@dataclass(frozen=True)
class AnalyticsFilter:
    """Filters applied before computing analytics."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    person_id: Optional[str] = None
    occasion: Optional[Occasion] = None
    tag: Optional[str] = None


@dataclass(frozen=True)
class AnalyticsReport:
    """Analytics model for formatting."""

    filters: AnalyticsFilter
    transactions: tuple[Transaction, ...]
    totals: LedgerTotals
    rankings: tuple[PersonAggregate, ...]
    concentration: int
    top_n: int
    occasions: tuple[tuple[Occasion, Decimal], ...]
    # Computed over the full ledger, not the filtered view.
    archetype: Archetype
