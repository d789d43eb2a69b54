"""Receipt scanning with Google Gemini.

The model reads a receipt or invoice image and returns a JSON object with the
fields of a ``ReceiptScan``. Any field may be missing or malformed; such
fields are dropped rather than guessed. Failures raise ``ReceiptScanError``
and are never retried automatically.
"""

import json
import os
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import google.generativeai as genai

from fijibooks.domain.entities import EntryType
from fijibooks.domain.receipts import ReceiptScan, ReceiptScanError
from fijibooks.log import get_logger
from fijibooks.utils.date_parser import parse_date

logger = get_logger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "invoiceNo": {"type": "STRING"},
        "counterpartyName": {"type": "STRING"},
        "tin": {"type": "STRING"},
        "date": {"type": "STRING"},
        "totalAmount": {"type": "NUMBER"},
        "vatAmount": {"type": "NUMBER"},
        "suggestedCategory": {"type": "STRING"},
    },
    "required": ["invoiceNo", "counterpartyName", "date", "totalAmount"],
}

PROMPT = """Analyze this receipt/invoice image for a Fiji business.
Extract the following details in JSON format:
- invoiceNo (string)
- counterpartyName (string)
- tin (string, if available)
- date (YYYY-MM-DD)
- totalAmount (number, inclusive of VAT)
- vatAmount (number, if explicitly stated, otherwise estimate at 12.5% of net)
- suggestedCategory (string, one of: {categories})

Context: This is for a {context} entry."""


def build_prompt(entry_type: EntryType, categories: tuple[str, ...]) -> str:
    context = "Money In (Sales)" if entry_type == EntryType.INCOME else "Money Out (Expense)"
    return PROMPT.format(categories=", ".join(categories), context=context)


def _safe_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _safe_decimal(value: Any) -> Optional[Decimal]:
    """Convert a number to a cent-rounded Decimal; None for anything unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).replace(",", "").strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0:
        return None
    return amount.quantize(Decimal("0.01"))


def _safe_date(value: Any) -> Optional[date]:
    text = _safe_text(value)
    if text is None:
        return None
    try:
        return parse_date(text)
    except ValueError:
        return None


def parse_scan_response(text: str) -> ReceiptScan:
    """Parse the model's JSON reply into a ReceiptScan.

    Raises:
        ReceiptScanError: If the reply holds no JSON object
    """
    start = text.find("{")
    end = text.rfind("}") + 1
    if start < 0 or end <= start:
        raise ReceiptScanError("Scan returned no data")
    try:
        data = json.loads(text[start:end])
    except json.JSONDecodeError as e:
        raise ReceiptScanError(f"Scan returned malformed data: {e}") from e
    if not isinstance(data, dict):
        raise ReceiptScanError("Scan returned malformed data")

    return ReceiptScan(
        invoice_no=_safe_text(data.get("invoiceNo")),
        counterparty_name=_safe_text(data.get("counterpartyName")),
        tin=_safe_text(data.get("tin")),
        date=_safe_date(data.get("date")),
        total_amount=_safe_decimal(data.get("totalAmount")),
        vat_amount=_safe_decimal(data.get("vatAmount")),
        suggested_category=_safe_text(data.get("suggestedCategory")),
    )


class GeminiReceiptScanner:
    """Extract entry fields from receipt images with a Gemini model."""

    def __init__(self, api_key: Optional[str] = None, model_name: str = DEFAULT_MODEL, model=None):
        """Initialize the scanner.

        Args:
            api_key: Gemini API key (ignored when ``model`` is given)
            model_name: Gemini model to use
            model: Pre-built model object exposing ``generate_content``
        """
        if model is None:
            if not api_key:
                raise ReceiptScanError("GEMINI_API_KEY is not set; receipt scanning is unavailable")
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(model_name=model_name)
        self.model = model
        self.model_name = model_name

    def scan(
        self,
        image: bytes,
        entry_type: EntryType,
        categories: tuple[str, ...],
        mime_type: str = "image/jpeg",
    ) -> ReceiptScan:
        """Scan a receipt image.

        Args:
            image: Raw image bytes
            entry_type: Whether the document is a sale or an expense
            categories: Category names the model may suggest
            mime_type: Image MIME type

        Returns:
            ReceiptScan with whatever fields could be read

        Raises:
            ReceiptScanError: If the call fails or the reply is unusable
        """
        try:
            response = self.model.generate_content(
                [
                    {"mime_type": mime_type, "data": image},
                    build_prompt(entry_type, categories),
                ],
                generation_config={
                    "temperature": 0.1,
                    "response_mime_type": "application/json",
                    "response_schema": RESPONSE_SCHEMA,
                },
            )
            text = response.text
        except Exception as e:
            logger.warning("receipt_scan_failed", model=self.model_name, error=str(e))
            raise ReceiptScanError(f"Scan failed: {e}") from e

        scan = parse_scan_response(text or "")
        logger.info("receipt_scanned", model=self.model_name, empty=scan.is_empty)
        return scan


def create_receipt_scanner(
    api_key: Optional[str] = None, model_name: Optional[str] = None
) -> GeminiReceiptScanner:
    """Create a scanner from arguments or GEMINI_API_KEY / FIJIBOOKS_GEMINI_MODEL."""
    if api_key is None:
        api_key = os.environ.get("GEMINI_API_KEY")
    if model_name is None:
        model_name = os.environ.get("FIJIBOOKS_GEMINI_MODEL", DEFAULT_MODEL)
    return GeminiReceiptScanner(api_key=api_key, model_name=model_name)
