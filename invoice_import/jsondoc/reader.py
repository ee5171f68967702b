from __future__ import annotations

import json
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from ..delimited.sniffer import ImportFileError
from ..models.invoice import DEFAULT_VAT_PERCENTAGE, InvoiceHeaderCandidate, InvoiceLineCandidate
from ..services.coercion import to_date, to_decimal, to_int, to_str

"""JSON document reader.

A document is either one invoice object or an array of invoice objects. Keys
are canonical, so no alias resolution happens here:

    {"invoice_number": "...", "company_name": "...", "invoice_date": "...",
     "company_npwp": "...", "due_date": "...", "vat_percentage": 11,
     "notes": "...",
     "lines": [{"tka_name": "...", "tka_passport": "...", "job_name": "...",
                "job_description": "...", "baris": 1, "quantity": 1,
                "unit_price": 1000, "line_total": 1000}]}

JSON numbers are taken as exact decimals; numeric strings go through the same
coercion as tabular cells.
"""

__all__ = [
    "JsonRecordError",
    "header_from_json",
    "lines_from_json",
    "read_json_document",
]


class JsonRecordError(Exception):
    """A single invoice object cannot be used; the record is counted as failed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


def read_json_document(path: Path) -> list[Any]:
    """Load ``path`` and return its invoice records.

    Raises:
        ImportFileError: unreadable file, invalid JSON, or a top-level value
            that is neither an object nor an array
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8-sig"))
    except (OSError, UnicodeDecodeError) as e:
        raise ImportFileError(f"cannot read file: {e}") from e
    except json.JSONDecodeError as e:
        raise ImportFileError(f"Invalid JSON: {e}") from e

    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return data
    raise ImportFileError("JSON document must be an object or an array of objects")


def _text(value: Any) -> str | None:
    if value is None:
        return None
    return to_str(str(value))


def _decimal(value: Any) -> Decimal | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            return None
        # json.loads accepts the NaN / Infinity literals
        return result if result.is_finite() else None
    if isinstance(value, str):
        return to_decimal(value)
    return None


def _int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return to_int(value)
    return None


def header_from_json(
    record: Any,
    record_number: int,
    *,
    default_vat: Decimal = DEFAULT_VAT_PERCENTAGE,
    today: date | None = None,
) -> InvoiceHeaderCandidate:
    """Build the header of one invoice object.

    Raises:
        JsonRecordError: not an object, or invoice number/company name missing
    """
    if not isinstance(record, dict):
        raise JsonRecordError("JSON", "Invoice record must be a JSON object")

    number = _text(record.get("invoice_number"))
    if number is None:
        raise JsonRecordError("invoice_number", "Invoice number is required")
    company = _text(record.get("company_name"))
    if company is None:
        raise JsonRecordError("company_name", "Company name is required")

    vat = _decimal(record.get("vat_percentage"))
    return InvoiceHeaderCandidate(
        invoice_number=number,
        company_name=company,
        company_tax_id=_text(record.get("company_npwp")) or "",
        invoice_date=to_date(_text(record.get("invoice_date"))) or today or date.today(),
        due_date=to_date(_text(record.get("due_date"))),
        vat_percentage=vat if vat is not None else default_vat,
        notes=_text(record.get("notes")),
        row_number=record_number,
    )


def lines_from_json(record: dict[str, Any], record_number: int) -> list[InvoiceLineCandidate]:
    """Build the lines of one invoice object; non-object entries are ignored."""
    raw_lines = record.get("lines")
    if not isinstance(raw_lines, list):
        return []

    lines: list[InvoiceLineCandidate] = []
    for item in raw_lines:
        if not isinstance(item, dict):
            continue
        quantity = _int(item.get("quantity"))
        if quantity is None:
            quantity = 1
        unit_price = _decimal(item.get("unit_price")) or Decimal("0")
        line_total = _decimal(item.get("line_total")) or Decimal("0")
        if line_total == 0 and unit_price > 0:
            line_total = unit_price * quantity
        baris = _int(item.get("baris"))
        lines.append(
            InvoiceLineCandidate(
                worker_name=_text(item.get("tka_name")) or "",
                worker_passport=_text(item.get("tka_passport")) or "",
                job_name=_text(item.get("job_name")) or "",
                job_description=_text(item.get("job_description")) or "",
                baris=baris if baris is not None else 1,
                quantity=quantity,
                unit_price=unit_price,
                line_total=line_total,
                row_number=record_number,
            )
        )
    return lines
