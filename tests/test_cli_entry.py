"""Tests for entry CLI commands."""

import pytest
from datetime import date
from decimal import Decimal

from fijibooks.cli.main import cli
from fijibooks.domain.receipts import ReceiptScan, ReceiptScanError


def _run(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


def _extract_id(output):
    return output.split("(ID: ")[1].split(")")[0]


@pytest.fixture
def registered(cli_runner, temp_db):
    _run(cli_runner, temp_db, "login", "Mere Tui", "mere@bula.com.fj")
    _run(cli_runner, temp_db, "company", "register", "--name", "Bula Trading", "--tin", "50-1")


class FakeScanner:
    def __init__(self, scan=None, error=None):
        self.result = scan
        self.error = error

    def scan(self, image, entry_type, categories, mime_type="image/jpeg"):
        if self.error is not None:
            raise self.error
        return self.result


class TestEntryAdd:
    """Tests for 'entry add'."""

    def test_add_income_by_total(self, cli_runner, temp_db, registered):
        result = _run(cli_runner, temp_db, "contact", "add", "customer", "Suva Bakery")
        contact_id = _extract_id(result.output)

        result = _run(
            cli_runner,
            temp_db,
            "entry",
            "add",
            "--type",
            "income",
            "--invoice",
            "INV-001",
            "--total",
            "112.50",
            "--contact",
            contact_id,
            "--date",
            "2024-03-15",
        )
        assert result.exit_code == 0
        assert "Saved sales invoice INV-001" in result.output
        assert "Contact: Suva Bakery" in result.output
        assert "Net: FJD 100.00" in result.output
        assert "VAT: FJD 12.50" in result.output
        assert "Total: FJD 112.50" in result.output

    def test_add_expense_by_net_with_new_contact(self, cli_runner, temp_db, registered):
        result = _run(
            cli_runner,
            temp_db,
            "entry",
            "add",
            "--type",
            "expense",
            "--invoice",
            "R-77",
            "--net",
            "200",
            "--new-contact",
            "Energy Fiji Limited",
            "--category",
            "Electricity & Water",
        )
        assert result.exit_code == 0
        assert "Saved purchase expense R-77" in result.output
        assert "Created new contact 'Energy Fiji Limited'" in result.output
        assert "Total: FJD 225.00" in result.output

        result = _run(cli_runner, temp_db, "contact", "list", "--role", "supplier")
        assert "Energy Fiji Limited" in result.output

    def test_add_requires_one_amount(self, cli_runner, temp_db, registered):
        result = _run(
            cli_runner, temp_db, "entry", "add", "--type", "income", "--invoice", "1", "--new-contact", "A"
        )
        assert result.exit_code == 1
        assert "exactly one of --total or --net" in result.output

    def test_add_rejects_zero_total(self, cli_runner, temp_db, registered):
        result = _run(
            cli_runner,
            temp_db,
            "entry",
            "add",
            "--type",
            "income",
            "--invoice",
            "1",
            "--total",
            "0",
            "--new-contact",
            "A",
        )
        assert result.exit_code == 1
        assert "greater than zero" in result.output

    def test_add_rejects_contact_of_wrong_role(self, cli_runner, temp_db, registered):
        result = _run(cli_runner, temp_db, "contact", "add", "customer", "Suva Bakery")
        contact_id = _extract_id(result.output)
        result = _run(
            cli_runner,
            temp_db,
            "entry",
            "add",
            "--type",
            "expense",
            "--invoice",
            "R-1",
            "--total",
            "10",
            "--contact",
            contact_id,
        )
        assert result.exit_code == 1
        assert "Supplier" in result.output
        assert "not found" in result.output

    def test_add_rejects_bad_date(self, cli_runner, temp_db, registered):
        result = _run(
            cli_runner,
            temp_db,
            "entry",
            "add",
            "--type",
            "income",
            "--invoice",
            "1",
            "--total",
            "10",
            "--new-contact",
            "A",
            "--date",
            "someday",
        )
        assert result.exit_code == 1
        assert "Invalid date format" in result.output

    def test_accountant_cannot_record(self, cli_runner, temp_db, registered):
        _run(cli_runner, temp_db, "login", "Ravi", "ravi@accounts.fj", "--role", "accountant")
        result = _run(
            cli_runner,
            temp_db,
            "entry",
            "add",
            "--type",
            "income",
            "--invoice",
            "1",
            "--total",
            "10",
            "--new-contact",
            "A",
        )
        assert result.exit_code == 1
        assert "not allowed" in result.output


def _add(cli_runner, temp_db, entry_type, invoice, total, contact, on):
    result = _run(
        cli_runner,
        temp_db,
        "entry",
        "add",
        "--type",
        entry_type,
        "--invoice",
        invoice,
        "--total",
        total,
        "--new-contact",
        contact,
        "--date",
        on,
    )
    assert result.exit_code == 0, result.output


class TestEntryList:
    """Tests for 'entry list' and 'entry export'."""

    def test_list_filters_by_type_and_date(self, cli_runner, temp_db, registered):
        _add(cli_runner, temp_db, "income", "INV-1", "112.50", "Suva Bakery", "2024-03-01")
        _add(cli_runner, temp_db, "expense", "R-1", "56.25", "Energy Fiji", "2024-03-02")
        _add(cli_runner, temp_db, "income", "INV-2", "10", "Suva Bakery", "2024-04-01")

        result = _run(cli_runner, temp_db, "entry", "list")
        assert result.exit_code == 0
        assert "3 record(s)" in result.output
        lines = result.output.splitlines()
        assert lines.index(next(l for l in lines if "INV-2" in l)) < lines.index(
            next(l for l in lines if "INV-1" in l)
        )

        result = _run(cli_runner, temp_db, "entry", "list", "--type", "income")
        assert "Sales Ledger" in result.output
        assert "R-1" not in result.output
        assert "2 record(s)" in result.output

        result = _run(
            cli_runner, temp_db, "entry", "list", "--start-date", "2024-03-01", "--end-date", "2024-03-31"
        )
        assert "2 record(s)" in result.output
        assert "INV-2" not in result.output

    def test_list_empty(self, cli_runner, temp_db, registered):
        result = _run(cli_runner, temp_db, "entry", "list", "--this-month")
        assert result.exit_code == 0
        assert "No records found" in result.output

    def test_list_rejects_two_periods(self, cli_runner, temp_db, registered):
        result = _run(cli_runner, temp_db, "entry", "list", "--this-month", "--last-year")
        assert result.exit_code == 1
        assert "Only one period option" in result.output

    def test_export_csv(self, cli_runner, temp_db, registered):
        _add(cli_runner, temp_db, "income", "INV-1", "112.50", "Suva Bakery", "2024-03-01")
        _add(cli_runner, temp_db, "expense", "R-1", "56.25", "Energy Fiji", "2024-03-02")

        result = _run(cli_runner, temp_db, "entry", "export")
        assert result.exit_code == 0
        rows = [line for line in result.output.splitlines() if line]
        assert rows[0].startswith("date,type,invoice_no")
        assert rows[1].startswith("2024-03-01,INCOME,INV-1,Suva Bakery")
        assert "100.00,12.50,112.50" in rows[1]
        assert rows[2].startswith("2024-03-02,EXPENSE,R-1")

    def test_staff_cannot_export(self, cli_runner, temp_db, registered):
        _run(cli_runner, temp_db, "login", "Sam", "sam@bula.com.fj", "--role", "staff")
        result = _run(cli_runner, temp_db, "entry", "export")
        assert result.exit_code == 1


class TestEntryScan:
    """Tests for 'entry scan'."""

    @pytest.fixture
    def receipt(self, tmp_path):
        path = tmp_path / "receipt.jpg"
        path.write_bytes(b"\xff\xd8fake")
        return path

    def test_scan_prefills_and_saves(self, cli_runner, temp_db, registered, receipt):
        scan = ReceiptScan(
            invoice_no="R-88",
            counterparty_name="Vodafone Fiji",
            date=date(2024, 3, 3),
            total_amount=Decimal("112.50"),
            suggested_category="Telecommunications",
        )
        result = _run(
            cli_runner,
            temp_db,
            "entry",
            "scan",
            str(receipt),
            "--type",
            "expense",
            input="y\n",
            obj={"scanner_factory": lambda: FakeScanner(scan)},
        )
        assert result.exit_code == 0, result.output
        assert "Ref #: R-88" in result.output
        assert "New contact: Vodafone Fiji" in result.output
        assert "Saved purchase expense R-88" in result.output
        assert "VAT: FJD 12.50" in result.output

    def test_scan_declined_saves_nothing(self, cli_runner, temp_db, registered, receipt):
        scan = ReceiptScan(invoice_no="R-88", counterparty_name="Vodafone Fiji", total_amount=Decimal("10"))
        result = _run(
            cli_runner,
            temp_db,
            "entry",
            "scan",
            str(receipt),
            "--type",
            "expense",
            input="n\n",
            obj={"scanner_factory": lambda: FakeScanner(scan)},
        )
        assert result.exit_code == 0
        assert "Discarded." in result.output
        result = _run(cli_runner, temp_db, "entry", "list")
        assert "No records found" in result.output

    def test_scan_failure_requires_manual_entry(self, cli_runner, temp_db, registered, receipt):
        result = _run(
            cli_runner,
            temp_db,
            "entry",
            "scan",
            str(receipt),
            "--type",
            "expense",
            obj={"scanner_factory": lambda: FakeScanner(error=ReceiptScanError("Scan failed: timeout"))},
        )
        assert result.exit_code == 1
        assert "Manual entry required" in result.output

    def test_scan_without_total_needs_override(self, cli_runner, temp_db, registered, receipt):
        scan = ReceiptScan(invoice_no="R-88", counterparty_name="Vodafone Fiji")
        factory = lambda: FakeScanner(scan)

        result = _run(
            cli_runner, temp_db, "entry", "scan", str(receipt), "--type", "expense", obj={"scanner_factory": factory}
        )
        assert result.exit_code == 1
        assert "No total found" in result.output

        result = _run(
            cli_runner,
            temp_db,
            "entry",
            "scan",
            str(receipt),
            "--type",
            "expense",
            "--total",
            "56.25",
            "--yes",
            obj={"scanner_factory": factory},
        )
        assert result.exit_code == 0, result.output
        assert "Total: FJD 56.25" in result.output
