"""Tests for receipt scanning and scan pre-fill."""

import json
import pytest
from datetime import date
from decimal import Decimal

from fijibooks.domain.categories import EXPENSE_CATEGORIES
from fijibooks.domain.entities import EntryType
from fijibooks.domain.entry import EntryDraft
from fijibooks.domain.receipts import ReceiptScan, ReceiptScanError, apply_scan
from fijibooks.ocr.gemini import (
    GeminiReceiptScanner,
    build_prompt,
    create_receipt_scanner,
    parse_scan_response,
)

RATE = Decimal("0.125")


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    """Stands in for a Gemini model, recording the last request."""

    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, contents, generation_config=None):
        self.calls.append((contents, generation_config))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.text)


class TestApplyScan:
    """Tests for pre-filling a draft from a scan."""

    def test_full_scan_prefills_draft(self):
        draft = EntryDraft.blank(EntryType.EXPENSE)
        scan = ReceiptScan(
            invoice_no="R-77",
            counterparty_name="Energy Fiji Limited",
            tin="50-00001-0-1",
            date=date(2024, 3, 1),
            total_amount=Decimal("56.25"),
            vat_amount=Decimal("9.99"),
            suggested_category="Electricity & Water",
        )
        result = apply_scan(draft, scan, RATE)

        assert result.invoice_no == "R-77"
        assert result.new_counterparty_name == "Energy Fiji Limited"
        assert result.new_counterparty_tin == "50-00001-0-1"
        assert result.date == date(2024, 3, 1)
        assert result.category == "Electricity & Water"
        assert result.total_amount == Decimal("56.25")
        # VAT is derived at the company rate
        assert result.vat_amount == Decimal("6.25")
        assert result.subtotal == Decimal("50.00")

    def test_missing_total_leaves_amounts_blank(self):
        draft = EntryDraft.blank(EntryType.EXPENSE)
        result = apply_scan(draft, ReceiptScan(invoice_no="R-1"), RATE)
        assert result.total_amount is None
        assert result.subtotal is None
        assert result.invoice_no == "R-1"

    def test_empty_scan_keeps_draft(self):
        draft = EntryDraft.blank(EntryType.INCOME, on=date(2024, 1, 1))
        assert ReceiptScan().is_empty
        assert apply_scan(draft, ReceiptScan(), RATE) == draft

    def test_scanned_name_replaces_selected_contact(self):
        draft = EntryDraft(type=EntryType.EXPENSE, date=date(2024, 1, 1), counterparty_id="s1")
        result = apply_scan(draft, ReceiptScan(counterparty_name="Vodafone Fiji"), RATE)
        assert result.counterparty_id is None
        assert result.new_counterparty_name == "Vodafone Fiji"
        assert draft.counterparty_id == "s1"


class TestParseScanResponse:
    """Tests for parsing the model reply."""

    def test_parses_fields(self):
        text = json.dumps(
            {
                "invoiceNo": " INV-9 ",
                "counterpartyName": "Suva Bakery",
                "date": "2024-03-05",
                "totalAmount": 112.5,
                "vatAmount": "12.50",
                "suggestedCategory": "Sales - Goods",
            }
        )
        scan = parse_scan_response(text)
        assert scan.invoice_no == "INV-9"
        assert scan.counterparty_name == "Suva Bakery"
        assert scan.tin is None
        assert scan.date == date(2024, 3, 5)
        assert scan.total_amount == Decimal("112.50")
        assert scan.vat_amount == Decimal("12.50")

    def test_drops_unusable_fields(self):
        text = '```json\n{"invoiceNo": "", "date": "not a date", "totalAmount": "abc", "vatAmount": -3}\n```'
        scan = parse_scan_response(text)
        assert scan.is_empty

    @pytest.mark.parametrize("text", ["", "no json here", "{broken", "[1, 2]"])
    def test_unusable_reply_raises(self, text):
        with pytest.raises(ReceiptScanError):
            parse_scan_response(text)


class TestGeminiReceiptScanner:
    """Tests for the Gemini scanner wrapper."""

    def test_scan_sends_image_and_prompt(self):
        model = FakeModel(text='{"invoiceNo": "R-77", "totalAmount": 56.25}')
        scanner = GeminiReceiptScanner(model=model)

        scan = scanner.scan(b"img", EntryType.EXPENSE, EXPENSE_CATEGORIES, mime_type="image/png")

        assert scan.invoice_no == "R-77"
        assert scan.total_amount == Decimal("56.25")
        contents, config = model.calls[0]
        assert contents[0] == {"mime_type": "image/png", "data": b"img"}
        assert "Money Out (Expense)" in contents[1]
        assert config["response_mime_type"] == "application/json"

    def test_model_failure_raises_scan_error(self):
        scanner = GeminiReceiptScanner(model=FakeModel(error=RuntimeError("quota exceeded")))
        with pytest.raises(ReceiptScanError, match="quota exceeded"):
            scanner.scan(b"img", EntryType.EXPENSE, EXPENSE_CATEGORIES)

    def test_missing_api_key_raises_scan_error(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with pytest.raises(ReceiptScanError, match="GEMINI_API_KEY"):
            create_receipt_scanner()


def test_build_prompt_lists_categories():
    prompt = build_prompt(EntryType.INCOME, ("Sales - Goods", "Other Income"))
    assert "Sales - Goods, Other Income" in prompt
    assert "Money In (Sales)" in prompt
