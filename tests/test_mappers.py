"""Tests for ledger record mappers."""

from datetime import date
from decimal import Decimal

import pytest

from renqing.database.mappers import (
    amount_to_json,
    normalize_tags,
    parse_occasion,
    parse_transaction_type,
    person_to_record,
    transaction_from_record,
    transaction_to_record,
)
from renqing.domain.entities import Occasion, TransactionType
from renqing.utils.ids import generate_id


def test_amount_to_json():
    """Test ints for whole amounts, floats when exact, text otherwise."""
    assert amount_to_json(Decimal("200")) == 200
    assert isinstance(amount_to_json(Decimal("200.00")), int)
    assert amount_to_json(Decimal("88.88")) == 88.88
    assert amount_to_json(Decimal("12345678901234567.89")) == "12345678901234567.89"


def test_amount_string_record_roundtrip(make_txn):
    """Test that an amount written as text maps back exactly."""
    txn = make_txn("t1", amount="0.123456789012345678")
    record = transaction_to_record(txn)

    assert record["amount"] == "0.123456789012345678"
    assert transaction_from_record(record) == txn


def test_transaction_to_record(make_txn):
    """Test the camelCase record layout."""
    record = transaction_to_record(
        make_txn("t1", amount="66", occasion=Occasion.HOUSEWARMING, tags=["neighbours"])
    )

    assert record == {
        "id": "t1",
        "type": "GIVE",
        "personId": "p1",
        "personName": "Alice",
        "amount": 66,
        "date": "2024-01-01",
        "occasion": "乔迁新房",
        "notes": "",
        "tags": ["neighbours"],
        "createdAt": "2024-01-01T12:00:00+00:00",
    }


def test_transaction_record_roundtrip(make_txn):
    """Test that a record maps back to the same transaction."""
    txn = make_txn("t1", amount="12.5", notes="tea", tags=["a", "b"])
    assert transaction_from_record(transaction_to_record(txn)) == txn


def test_person_to_record(sample_state):
    """Test the person record layout."""
    record = person_to_record(sample_state.find_person("p1"))

    assert record == {
        "id": "p1",
        "name": "Alice",
        "tags": [],
        "totalGiven": 100,
        "totalReceived": 40,
        "lastInteraction": "2024-02-01",
        "balance": -60,
    }


@pytest.mark.parametrize(
    "value,expected",
    [
        ("婚礼", Occasion.WEDDING),
        ("wedding", Occasion.WEDDING),
        ("Full Moon", Occasion.FULL_MOON),
        ("visit-sick", Occasion.VISIT_SICK),
        (Occasion.DINNER, Occasion.DINNER),
    ],
)
def test_parse_occasion(value, expected):
    """Test occasions by label or by name."""
    assert parse_occasion(value) == expected


@pytest.mark.parametrize("value", ["funeral", "", None, 3])
def test_parse_occasion_invalid(value):
    """Test that unknown occasions are rejected."""
    with pytest.raises(ValueError, match="Unknown occasion"):
        parse_occasion(value)


def test_parse_transaction_type():
    """Test case-insensitive direction parsing."""
    assert parse_transaction_type("give") == TransactionType.GIVE
    assert parse_transaction_type(" RECEIVE ") == TransactionType.RECEIVE
    with pytest.raises(ValueError):
        parse_transaction_type("LEND")


def test_normalize_tags():
    """Test tag cleanup."""
    assert normalize_tags(None) == ()
    assert normalize_tags([" a", "a", "", "b "]) == ("a", "b")
    with pytest.raises(ValueError):
        normalize_tags([1])


def test_transaction_from_record_requires_fields():
    """Test that missing required fields are listed."""
    with pytest.raises(ValueError, match="personName, amount"):
        transaction_from_record(
            {"id": "x", "type": "GIVE", "personId": "p1", "personName": "", "date": "2024-01-01"}
        )


def test_transaction_from_record_truncates_timestamps():
    """Test that a full timestamp in the date field keeps only the date."""
    txn = transaction_from_record(
        {
            "id": "x",
            "type": "GIVE",
            "personId": "p1",
            "personName": "Alice",
            "amount": "100",
            "date": "2024-01-01T00:00:00.000Z",
        }
    )
    assert txn.date == date(2024, 1, 1)


def test_generate_id_is_unique():
    """Test that generated IDs are distinct lowercase base-36 strings."""
    ids = {generate_id() for _ in range(500)}

    assert len(ids) == 500
    assert all(i.isalnum() and i == i.lower() for i in ids)
