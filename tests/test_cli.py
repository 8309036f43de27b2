"""Tests for CLI commands."""

import json
import re

from renqing.cli.main import cli
from renqing.domain.export import UTF8_BOM


def _invoke(cli_runner, temp_storage, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_storage.database_path, *args], **kwargs)


def _created_id(output):
    match = re.search(r"Created transaction (\S+)", output)
    assert match, output
    return match.group(1)


def test_help_does_not_need_database(cli_runner):
    """Test that --help works without opening storage."""
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "Gift ledger" in result.output


def test_add_transaction_minimal(cli_runner, temp_storage):
    """Test adding a gift with only the required fields."""
    result = _invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "200")

    assert result.exit_code == 0
    assert "Created transaction" in result.output
    assert "Give: Alice" in result.output
    assert "¥200" in result.output


def test_add_transaction_all_fields(cli_runner, temp_storage, tag_service):
    """Test adding a gift with every option."""
    result = _invoke(
        cli_runner,
        temp_storage,
        "add",
        "--person", "Bob",
        "--amount", "88.88",
        "--type", "receive",
        "--date", "2024-02-10",
        "--occasion", "full_moon",
        "--notes", "Baby's first month",
        "--tag", "colleague",
    )

    assert result.exit_code == 0
    assert "Receive: Bob" in result.output
    assert "Date: 2024-02-10" in result.output
    assert "Occasion: 满月宴" in result.output
    assert "Tags: colleague" in result.output
    assert tag_service.list_tags() == ["colleague"]


def test_add_transaction_invalid_amount(cli_runner, temp_storage):
    """Test that a bad amount is reported and nothing is saved."""
    result = _invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "lots")

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert temp_storage.load().transactions == ()


def test_add_transaction_invalid_date(cli_runner, temp_storage):
    """Test that a bad date is reported."""
    result = _invoke(
        cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "1", "--date", "not-a-date"
    )

    assert result.exit_code == 1
    assert "Invalid date format" in result.output


def test_list_transactions(cli_runner, temp_storage):
    """Test listing gifts with the totals footer."""
    _invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "100", "--date", "2024-01-01")
    _invoke(
        cli_runner, temp_storage,
        "add", "--person", "Alice", "--amount", "40", "--type", "receive", "--date", "2024-02-01",
    )

    result = _invoke(cli_runner, temp_storage, "transaction", "list")

    assert result.exit_code == 0
    assert "Found 2 transaction(s):" in result.output
    assert "Given: ¥100 | Received: ¥40 | Net: -¥60" in result.output
    assert result.output.index("2024-02-01") < result.output.index("2024-01-01")


def test_list_transactions_empty(cli_runner, temp_storage):
    """Test listing an empty ledger."""
    result = _invoke(cli_runner, temp_storage, "transaction", "list")

    assert result.exit_code == 0
    assert "No transactions found." in result.output


def test_list_transactions_search(cli_runner, temp_storage):
    """Test searching while listing."""
    _invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "100", "--notes", "red envelope")
    _invoke(cli_runner, temp_storage, "add", "--person", "Bob", "--amount", "50")

    result = _invoke(cli_runner, temp_storage, "transaction", "list", "--search", "ENVELOPE", "-v")

    assert "Found 1 transaction(s):" in result.output
    assert "Notes: red envelope" in result.output
    assert "Bob" not in result.output


def test_list_transactions_unknown_person(cli_runner, temp_storage):
    """Test filtering by a contact that does not exist."""
    result = _invoke(cli_runner, temp_storage, "transaction", "list", "--person", "Nobody")

    assert result.exit_code == 1
    assert "Person 'Nobody' not found" in result.output


def test_update_transaction(cli_runner, temp_storage):
    """Test updating a gift amount and occasion."""
    txn_id = _created_id(_invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "100").output)

    result = _invoke(
        cli_runner, temp_storage, "transaction", "update", txn_id, "--amount", "300", "--occasion", "wedding"
    )

    assert result.exit_code == 0
    assert f"Updated transaction {txn_id}" in result.output
    txn = temp_storage.load().find_transaction(txn_id)
    assert txn.amount == 300
    assert txn.occasion.value == "婚礼"


def test_update_transaction_not_found(cli_runner, temp_storage):
    """Test updating an unknown transaction."""
    result = _invoke(cli_runner, temp_storage, "transaction", "update", "missing", "--amount", "1")

    assert result.exit_code == 1
    assert "Transaction 'missing' not found" in result.output


def test_update_transaction_conflicting_tag_flags(cli_runner, temp_storage):
    """Test that --tag and --clear-tags cannot be combined."""
    txn_id = _created_id(_invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "1").output)

    result = _invoke(
        cli_runner, temp_storage, "transaction", "update", txn_id, "--tag", "a", "--clear-tags"
    )

    assert result.exit_code == 1


def test_delete_transaction(cli_runner, temp_storage):
    """Test deleting a gift without confirmation."""
    txn_id = _created_id(_invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "100").output)

    result = _invoke(cli_runner, temp_storage, "transaction", "delete", txn_id, "--yes")

    assert result.exit_code == 0
    assert f"Deleted transaction {txn_id}" in result.output
    assert temp_storage.load().people == ()


def test_delete_transaction_cancelled(cli_runner, temp_storage):
    """Test declining the delete confirmation."""
    txn_id = _created_id(_invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "100").output)

    result = _invoke(cli_runner, temp_storage, "transaction", "delete", txn_id, input="n\n")

    assert "Deletion cancelled." in result.output
    assert temp_storage.load().find_transaction(txn_id) is not None


def test_delete_transaction_not_found(cli_runner, temp_storage):
    """Test deleting an unknown transaction."""
    result = _invoke(cli_runner, temp_storage, "transaction", "delete", "missing", "--yes")

    assert result.exit_code == 1
    assert "Transaction 'missing' not found" in result.output


def test_person_list_and_show(cli_runner, temp_storage):
    """Test contact listing and detail view."""
    _invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "100", "--date", "2024-01-01")
    _invoke(
        cli_runner, temp_storage,
        "add", "--person", "Alice", "--amount", "40", "--type", "receive", "--date", "2024-02-01",
    )

    result = _invoke(cli_runner, temp_storage, "person", "list")
    assert result.exit_code == 0
    assert "Found 1 contact(s):" in result.output
    assert "-¥60" in result.output

    result = _invoke(cli_runner, temp_storage, "person", "show", "Alice")
    assert result.exit_code == 0
    assert "Balance: -¥60" in result.output
    assert "Last interaction: 2024-02-01" in result.output
    assert "History (2):" in result.output


def test_person_list_empty(cli_runner, temp_storage):
    """Test listing contacts in an empty ledger."""
    result = _invoke(cli_runner, temp_storage, "person", "list")

    assert "No contacts found." in result.output


def test_person_rename(cli_runner, temp_storage):
    """Test renaming a contact."""
    _invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "100")

    result = _invoke(cli_runner, temp_storage, "person", "rename", "Alice", "Alicia")

    assert result.exit_code == 0
    assert "Renamed 'Alice' to 'Alicia'" in result.output
    assert temp_storage.load().people[0].name == "Alicia"


def test_import_command(cli_runner, temp_storage, tmp_path):
    """Test importing a ledger file twice."""
    path = tmp_path / "backup.json"
    path.write_text(
        json.dumps(
            {
                "payload": {
                    "transactions": [
                        {
                            "id": "abc",
                            "type": "RECEIVE",
                            "personId": "p1",
                            "personName": "Alice",
                            "amount": 600,
                            "date": "2024-05-20",
                            "occasion": "婚礼",
                        }
                    ]
                }
            }
        ),
        encoding="utf-8",
    )

    result = _invoke(cli_runner, temp_storage, "import", str(path))
    assert result.exit_code == 0
    assert "Imported: 1 transactions" in result.output
    assert "Skipped: 0 duplicates" in result.output

    result = _invoke(cli_runner, temp_storage, "import", str(path))
    assert result.exit_code == 0
    assert "Nothing imported" in result.output
    assert len(temp_storage.load().transactions) == 1


def test_import_command_bad_file(cli_runner, temp_storage, tmp_path):
    """Test importing a file in an unknown format."""
    path = tmp_path / "bad.json"
    path.write_text('{"rows": []}', encoding="utf-8")

    result = _invoke(cli_runner, temp_storage, "import", str(path))

    assert result.exit_code == 1
    assert "Import failed: Unknown file format" in result.output


def test_export_json_and_reimport(cli_runner, temp_storage, tmp_path):
    """Test exporting a JSON backup and importing it into a fresh ledger."""
    _invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "100", "--tag", "family")
    out = tmp_path / "backup.json"

    result = _invoke(cli_runner, temp_storage, "export", "json", "-o", str(out))
    assert result.exit_code == 0
    assert f"Exported 1 transactions to {out}" in result.output

    document = json.loads(out.read_text(encoding="utf-8"))
    assert document["customTags"] == ["family"]

    _invoke(cli_runner, temp_storage, "reset", "--yes")
    result = _invoke(cli_runner, temp_storage, "import", str(out))
    assert "Imported: 1 transactions" in result.output
    assert temp_storage.load_tags() == ["family"]


def test_export_csv(cli_runner, temp_storage, tmp_path):
    """Test exporting CSV."""
    _invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "100", "--date", "2024-01-01")
    out = tmp_path / "gifts.csv"

    result = _invoke(cli_runner, temp_storage, "export", "csv", "-o", str(out))

    assert result.exit_code == 0
    content = out.read_text(encoding="utf-8")
    assert content.startswith(UTF8_BOM)
    assert '2024-01-01,送出,"Alice",100,其他,"",""' in content


def test_tag_commands(cli_runner, temp_storage):
    """Test adding, listing and removing tags."""
    assert "No tags defined." in _invoke(cli_runner, temp_storage, "tag", "list").output

    result = _invoke(cli_runner, temp_storage, "tag", "add", "family")
    assert "Added tag 'family'" in result.output
    assert "family" in _invoke(cli_runner, temp_storage, "tag", "list").output

    result = _invoke(cli_runner, temp_storage, "tag", "remove", "family")
    assert "Removed tag 'family'" in result.output

    result = _invoke(cli_runner, temp_storage, "tag", "remove", "family")
    assert result.exit_code == 1


def test_tag_add_blank(cli_runner, temp_storage):
    """Test that a blank tag is rejected."""
    result = _invoke(cli_runner, temp_storage, "tag", "add", "  ")

    assert result.exit_code == 1
    assert "Tag cannot be empty" in result.output


def test_stats(cli_runner, temp_storage):
    """Test the analytics report."""
    _invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "100", "--occasion", "wedding")
    _invoke(cli_runner, temp_storage, "add", "--person", "Bob", "--amount", "300", "--occasion", "birthday")

    result = _invoke(cli_runner, temp_storage, "stats", "--top", "1")

    assert result.exit_code == 0
    assert "Archetype: Outflow" in result.output
    assert "Core concentration: 75%" in result.output
    assert result.output.index("Bob") < result.output.index("Alice")
    assert "生日" in result.output


def test_stats_empty(cli_runner, temp_storage):
    """Test the report on an empty ledger."""
    result = _invoke(cli_runner, temp_storage, "stats")

    assert result.exit_code == 0
    assert "No transactions found." in result.output


def test_stats_conflicting_periods(cli_runner, temp_storage):
    """Test that only one period flag is allowed."""
    result = _invoke(cli_runner, temp_storage, "stats", "--this-month", "--last-year")

    assert result.exit_code == 1
    assert "Only one period option" in result.output


def test_reset(cli_runner, temp_storage):
    """Test clearing all data."""
    _invoke(cli_runner, temp_storage, "add", "--person", "Alice", "--amount", "100", "--tag", "family")

    result = _invoke(cli_runner, temp_storage, "reset", "--yes")

    assert result.exit_code == 0
    assert "All data cleared." in result.output
    assert temp_storage.load().transactions == ()
    assert temp_storage.load_tags() == []
