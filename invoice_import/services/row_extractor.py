from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from decimal import Decimal

from ..models.invoice import DEFAULT_VAT_PERCENTAGE, InvoiceHeaderCandidate, InvoiceLineCandidate
from .coercion import to_date, to_decimal, to_int, to_str
from .column_resolver import resolve_field

"""Row extraction: one table row -> header and/or line candidate.

Unparsable values fall back to the field default; only the invoice number is
mandatory (enforced by the caller, which decides whether a missing number is
an error for the current layout).
"""

__all__ = [
    "DEFAULT_COMPANY_NAME",
    "extract_header",
    "extract_invoice_number",
    "extract_line",
    "synthetic_header",
    "synthetic_invoice_number",
]

DEFAULT_COMPANY_NAME = "Imported Company"

Row = Mapping[str, str]


def extract_invoice_number(row: Row) -> str | None:
    return to_str(resolve_field(row, "invoice_number"))


def extract_header(
    row: Row,
    row_number: int,
    *,
    default_vat: Decimal = DEFAULT_VAT_PERCENTAGE,
    today: date | None = None,
) -> InvoiceHeaderCandidate | None:
    """Build a header candidate; None when the row has no invoice number."""
    number = extract_invoice_number(row)
    if number is None:
        return None
    vat = to_decimal(resolve_field(row, "vat_percentage"))
    return InvoiceHeaderCandidate(
        invoice_number=number,
        company_name=to_str(resolve_field(row, "company_name")) or "",
        company_tax_id=to_str(resolve_field(row, "company_tax_id")) or "",
        invoice_date=to_date(resolve_field(row, "invoice_date")) or today or date.today(),
        due_date=to_date(resolve_field(row, "due_date")),
        vat_percentage=vat if vat is not None else default_vat,
        notes=to_str(resolve_field(row, "notes")),
        row_number=row_number,
    )


def extract_line(row: Row, row_number: int) -> InvoiceLineCandidate | None:
    """Build a line candidate; None for rows with neither worker nor job name."""
    worker = to_str(resolve_field(row, "worker_name"))
    job = to_str(resolve_field(row, "job_name"))
    if worker is None and job is None:
        return None

    quantity = to_int(resolve_field(row, "quantity"))
    if quantity is None:
        quantity = 1
    unit_price = to_decimal(resolve_field(row, "unit_price")) or Decimal("0")
    line_total = to_decimal(resolve_field(row, "line_total")) or Decimal("0")
    if line_total == 0 and unit_price > 0:
        line_total = unit_price * quantity

    baris = to_int(resolve_field(row, "baris"))
    return InvoiceLineCandidate(
        worker_name=worker or "",
        worker_passport=to_str(resolve_field(row, "worker_passport")) or "",
        job_name=job or "",
        job_description=to_str(resolve_field(row, "job_description")) or "",
        baris=baris if baris is not None else 1,
        quantity=quantity,
        unit_price=unit_price,
        line_total=line_total,
        row_number=row_number,
    )


def synthetic_invoice_number(today: date | None = None) -> str:
    return f"IMP-{(today or date.today()):%Y%m%d}-001"


def synthetic_header(
    default_invoice_number: str | None = None,
    default_company_name: str | None = None,
    *,
    default_vat: Decimal = DEFAULT_VAT_PERCENTAGE,
    today: date | None = None,
) -> InvoiceHeaderCandidate:
    """Header for a table classified as a single invoice."""
    today = today or date.today()
    return InvoiceHeaderCandidate(
        invoice_number=default_invoice_number or synthetic_invoice_number(today),
        company_name=default_company_name or DEFAULT_COMPANY_NAME,
        invoice_date=today,
        vat_percentage=default_vat,
        row_number=0,
    )
