"""End-to-end tests for the command-line interface."""

import json

import pytest

from bizledger.cli.main import cli
from bizledger.domain.repository import StorageRepository
from bizledger.storage.factories import create_sqlite_store


@pytest.fixture
def run(cli_runner, db_path):
    """Invoke the CLI against the temporary database."""

    def _run(*args, input=None):
        return cli_runner.invoke(cli, ["--db-path", db_path, *args], input=input)

    return _run


def _added_id(result):
    # "Added transaction txn_abc123: +..."
    return result.output.split("Added transaction ", 1)[1].split(":", 1)[0]


def _add(run, *extra):
    result = run("add", "--type", "income", "--amount", "1500", "--category", "sales", *extra)
    assert result.exit_code == 0, result.output
    return _added_id(result)


def test_help_does_not_touch_storage(cli_runner, tmp_path):
    result = cli_runner.invoke(cli, ["--db-path", str(tmp_path / "never.db"), "--help"])

    assert result.exit_code == 0
    assert "Bizledger" in result.output
    assert not (tmp_path / "never.db").exists()


def test_init_creates_default_business(run):
    result = run("init")

    assert result.exit_code == 0
    assert "Current business: My Business (biz_1)" in result.output
    assert "0 transaction(s)" in result.output


def test_init_with_sample_data(run):
    result = run("init", "--sample-data")

    assert result.exit_code == 0
    assert "0 transaction(s)" not in result.output

    listing = run("transaction", "list", "--limit", "5")
    assert "Found 5 transaction(s)" in listing.output


def test_add_list_and_dashboard(run):
    txn_id = _add(run, "--description", "Shop sales")

    listing = run("transaction", "list")
    assert listing.exit_code == 0
    assert txn_id in listing.output
    assert "+৳1,500.00" in listing.output

    dashboard = run("dashboard")
    assert dashboard.exit_code == 0
    assert "My Business" in dashboard.output
    assert "৳1,500.00" in dashboard.output


def test_add_rejects_bad_amount(run):
    result = run("add", "--type", "income", "--amount", "-5", "--category", "sales")

    assert result.exit_code == 1
    assert "Invalid amount" in result.output


def test_add_rejects_unknown_business(run):
    result = run(
        "add", "--type", "expense", "--amount", "5", "--category", "food", "--business", "biz_nope"
    )

    assert result.exit_code == 1
    assert "Error: Business 'biz_nope' not found" in result.output


def test_add_rejects_bad_time(run):
    result = run("add", "--type", "expense", "--amount", "5", "--category", "food", "--time", "7pm")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_transaction_show_update_delete(run):
    txn_id = _add(run, "--date", "2024-01-10", "--notes", "cash")

    shown = run("transaction", "show", txn_id)
    assert shown.exit_code == 0
    assert "Date: 2024-01-10" in shown.output
    assert "Notes: cash" in shown.output

    updated = run("transaction", "update", txn_id, "--amount", "99", "--status", "pending")
    assert updated.exit_code == 0
    shown = run("transaction", "show", txn_id)
    assert "Amount: ৳99.00" in shown.output
    assert "Status: pending" in shown.output

    cancelled = run("transaction", "delete", txn_id, input="n\n")
    assert "Deletion cancelled." in cancelled.output

    deleted = run("transaction", "delete", txn_id, input="y\n")
    assert deleted.exit_code == 0
    assert f"Deleted transaction {txn_id}" in deleted.output
    assert "No transactions found." in run("transaction", "list").output


def test_transaction_show_unknown(run):
    result = run("transaction", "show", "txn_missing")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_transaction_list_filters(run):
    _add(run, "--description", "Office Rent Payment", "--category", "rent")
    run("add", "--type", "expense", "--amount", "10", "--category", "food", "--description", "Lunch")

    result = run("transaction", "list", "--search", "RENT")
    assert "Found 1 transaction(s)" in result.output
    assert "Office Rent" in result.output

    result = run("transaction", "list", "--type", "expense")
    assert "Found 1 transaction(s)" in result.output
    assert "Lunch" in result.output


def test_business_lifecycle(run):
    created = run("business", "create", "Corner Shop", "--owner", "Rahim", "--switch")
    assert created.exit_code == 0
    assert "Switched to 'Corner Shop'" in created.output
    business_id = created.output.split("(ID: ", 1)[1].split(")", 1)[0]

    listing = run("business", "list")
    assert "* " in listing.output
    current_line = next(line for line in listing.output.splitlines() if line.startswith("*"))
    assert business_id in current_line

    renamed = run("business", "update", business_id, "--name", "Big Shop")
    assert "Updated business 'Big Shop'" in renamed.output

    deleted = run("business", "delete", business_id, input="y\n")
    assert deleted.exit_code == 0
    assert "Current business: My Business" in deleted.output

    switched = run("business", "switch", "biz_nope")
    assert switched.exit_code == 1


def test_cannot_delete_last_business(run):
    result = run("business", "delete", "biz_1", input="y\n")

    assert result.exit_code == 1
    assert "last business" in result.output
    assert "biz_1" in run("business", "list").output


def test_business_scoping(run):
    _add(run)
    run("business", "create", "Second", "--switch")

    assert "No transactions found." in run("transaction", "list").output


def test_report_for_explicit_range(run):
    _add(run, "--date", "2024-01-10")
    run("add", "--type", "expense", "--amount", "400", "--category", "rent", "--date", "2024-01-12")
    run("add", "--type", "expense", "--amount", "50", "--category", "food", "--date", "2024-01-13",
        "--status", "pending")

    result = run("report", "--start-date", "2024-01-01", "--end-date", "2024-01-31")

    assert result.exit_code == 0
    assert "2024-01-01 to 2024-01-31" in result.output
    assert "৳1,100.00" in result.output
    assert "Pending transactions" in result.output
    assert "rent" in result.output


def test_report_rejects_mixed_options(run):
    result = run("report", "--this-month", "--start-date", "2024-01-01")

    assert result.exit_code == 1
    assert "cannot be combined" in result.output


def test_report_requires_both_dates(run):
    result = run("report", "--start-date", "2024-01-01")

    assert result.exit_code == 1


def test_trends_shows_six_months(run):
    result = run("trends")

    assert result.exit_code == 0
    rows = [line for line in result.output.splitlines() if "৳" in line]
    assert len(rows) == 6


def test_backup_create_info_restore(run):
    _add(run)

    created = run("backup", "create")
    assert created.exit_code == 0
    assert "Backup created successfully" in created.output

    info = run("backup", "info")
    assert "Last backup:" in info.output
    assert "KB" in info.output

    txn_id = _add(run, "--amount", "20")
    restored = run("backup", "restore", input="y\n")
    assert restored.exit_code == 0
    assert "Data restored from backup" in restored.output
    assert txn_id not in run("transaction", "list").output


def test_backup_info_empty(cli_runner, db_path):
    result = cli_runner.invoke(cli, ["--db-path", db_path, "backup", "info"])

    assert result.exit_code == 0
    assert "No backup found." in result.output


def test_backup_export_and_import(run, tmp_path):
    txn_id = _add(run)
    export_path = tmp_path / "backup.json"

    exported = run("backup", "export", str(export_path))
    assert exported.exit_code == 0
    record = json.loads(export_path.read_text(encoding="utf-8"))
    assert record["version"]
    assert record["data"]["transactions"][0]["id"] == txn_id

    run("transaction", "delete", txn_id, input="y\n")
    imported = run("backup", "import", str(export_path))
    assert imported.exit_code == 0
    assert "Data imported successfully" in imported.output
    assert txn_id in run("transaction", "list").output


def test_backup_import_rejects_invalid_file(run, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text('{"data": {}}', encoding="utf-8")

    result = run("backup", "import", str(bad))

    assert result.exit_code == 1
    assert "Invalid backup file format." in result.output


def test_backup_export_to_stdout(run):
    result = run("backup", "export")

    assert result.exit_code == 0
    assert json.loads(result.output)["data"]["currentBusinessId"] == "biz_1"


def test_auto_backup_runs_on_regular_commands(run):
    run("init")

    assert "Last backup:" in run("backup", "info").output


def test_settings_set_show_reset(run):
    result = run("settings", "set", "currency_symbol", "$")
    assert result.exit_code == 0
    _add(run)
    assert "$1,500.00" in run("dashboard").output

    assert run("settings", "set", "backup_frequency", "daily").exit_code == 0
    shown = run("settings", "show")
    assert "backup_frequency" in shown.output
    assert "daily" in shown.output

    reset = run("settings", "reset", input="y\n")
    assert reset.exit_code == 0
    assert "৳" in run("settings", "show").output


@pytest.mark.parametrize(
    "name, value",
    [("font_size", "12"), ("backup_frequency", "hourly"), ("auto_backup", "sometimes")],
)
def test_settings_set_rejects_invalid(run, name, value):
    result = run("settings", "set", name, value)

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_pin_commands(run):
    assert "No PIN is set" in run("pin", "verify", "--pin", "1234").output

    set_result = run("pin", "set", "--pin", "1234")
    assert set_result.exit_code == 0

    assert run("pin", "verify", "--pin", "1234").exit_code == 0
    wrong = run("pin", "verify", "--pin", "9999")
    assert wrong.exit_code == 1
    assert "Incorrect PIN" in wrong.output

    assert run("pin", "set", "--pin", "12").exit_code == 1

    run("pin", "clear")
    assert run("pin", "verify", "--pin", "1234").exit_code == 1


def test_storage_info(run):
    result = run("storage", "info", "--keys")

    assert result.exit_code == 0
    assert "Namespace: bizledger" in result.output
    assert "businesses" in result.output


def test_reset_erases_data(run):
    txn_id = _add(run)
    run("business", "create", "Second")

    result = run("reset", "--yes")

    assert result.exit_code == 0
    assert "All data erased. Current business: My Business" in result.output
    assert txn_id not in run("transaction", "list").output
    assert "Second" not in run("business", "list").output


def test_namespaces_are_isolated(cli_runner, db_path):
    cli_runner.invoke(
        cli,
        ["--db-path", db_path, "--namespace", "shop-a", "add", "--type", "income", "--amount", "5",
         "--category", "sales"],
    )

    result = cli_runner.invoke(cli, ["--db-path", db_path, "--namespace", "shop-b", "transaction", "list"])

    assert "No transactions found." in result.output


def test_db_path_from_environment(cli_runner, db_path):
    result = cli_runner.invoke(cli, ["init"], env={"BIZLEDGER_DB_PATH": db_path})

    assert result.exit_code == 0
    assert "My Business" in result.output


def test_settings_set_biometric_updates_dedicated_key(run, db_path):
    result = run("settings", "set", "biometric_enabled", "true")
    assert result.exit_code == 0, result.output
    assert "biometric_enabled = True" in result.output

    store = create_sqlite_store(database_path=db_path)
    try:
        repository = StorageRepository(store)
        assert repository.get_biometric_enabled() is True
        assert repository.get_settings().biometric_enabled is True
    finally:
        store.disconnect()


def test_settings_set_pin_enabled_points_to_pin_commands(run):
    result = run("settings", "set", "pin_enabled", "true")

    assert result.exit_code == 1
    assert "pin set" in result.output
    shown = run("settings", "show").output.splitlines()
    assert ["pin_enabled", "False"] in [line.split() for line in shown]
