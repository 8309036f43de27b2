"""Shared pytest fixtures for renqing tests."""

import tempfile
import os
from datetime import date, datetime, UTC
from decimal import Decimal
import pytest

from renqing.database.factories import create_sqlite_storage
from renqing.domain.entities import Occasion, Transaction, TransactionType
from renqing.domain.json_import import ImportService
from renqing.domain.ledger import LedgerService
from renqing.domain.recalculate import recalculate
from renqing.domain.tags import TagService


@pytest.fixture
def temp_storage():
    """Create a temporary SQLite storage for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    storage = create_sqlite_storage(database_path=db_path)
    # Store the path for tests that need it
    storage.database_path = db_path
    storage.connect()

    yield storage

    storage.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def ledger_service(temp_storage):
    """Create a LedgerService with a temporary storage."""
    return LedgerService(temp_storage)


@pytest.fixture
def import_service(temp_storage):
    """Create an ImportService with a temporary storage."""
    return ImportService(temp_storage)


@pytest.fixture
def tag_service(temp_storage):
    """Create a TagService with a temporary storage."""
    return TagService(temp_storage)


@pytest.fixture
def make_txn():
    """Factory for Transaction entities with sensible defaults."""

    def _make(
        id,
        person_id="p1",
        person_name="Alice",
        amount="100",
        date=date(2024, 1, 1),
        type=TransactionType.GIVE,
        occasion=Occasion.OTHER,
        notes="",
        tags=(),
    ):
        return Transaction(
            id=id,
            type=type,
            person_id=person_id,
            person_name=person_name,
            amount=Decimal(amount),
            date=date,
            occasion=occasion,
            created_at=datetime(2024, 1, 1, 12, 0, tzinfo=UTC),
            notes=notes,
            tags=tuple(tags),
        )

    return _make


@pytest.fixture
def sample_state(make_txn):
    """A small ledger with two contacts."""
    return recalculate(
        [
            make_txn("t1", amount="100", date=date(2024, 1, 1)),
            make_txn(
                "t2",
                amount="40",
                date=date(2024, 2, 1),
                type=TransactionType.RECEIVE,
                occasion=Occasion.BIRTHDAY,
            ),
            make_txn(
                "t3",
                person_id="p2",
                person_name="Bob",
                amount="500",
                date=date(2024, 3, 15),
                occasion=Occasion.WEDDING,
                notes="Cousin's wedding",
                tags=["family"],
            ),
        ]
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
