from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

"""Invoice candidate and aggregate models.

Header and line candidates are what the row extractor produces from one source
row. An InvoiceAggregate groups one header with its ordered lines; its totals
are filled in by the aggregator once every row has been consumed.
"""

__all__ = [
    "DEFAULT_VAT_PERCENTAGE",
    "InvoiceHeaderCandidate",
    "InvoiceLineCandidate",
    "InvoiceAggregate",
    "round_half_away_from_zero",
]

DEFAULT_VAT_PERCENTAGE = Decimal("11")


def round_half_away_from_zero(value: Decimal) -> Decimal:
    """Round to 0 decimal places, ties away from zero."""
    # ROUND_HALF_UP in the decimal module rounds ties away from zero
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class InvoiceHeaderCandidate:
    invoice_number: str
    company_name: str
    invoice_date: date
    company_tax_id: str = ""
    due_date: date | None = None
    vat_percentage: Decimal = DEFAULT_VAT_PERCENTAGE
    notes: str | None = None
    row_number: int = 0  # 1-based data row (0 = synthetic header)


@dataclass(frozen=True)
class InvoiceLineCandidate:
    worker_name: str = ""
    worker_passport: str = ""
    job_name: str = ""
    job_description: str = ""
    baris: int = 1
    quantity: int = 1
    unit_price: Decimal = Decimal("0")
    line_total: Decimal = Decimal("0")
    row_number: int = 0


@dataclass
class InvoiceAggregate:
    """One invoice header plus its lines in source row order."""
    header: InvoiceHeaderCandidate
    lines: list[InvoiceLineCandidate] = field(default_factory=list)
    subtotal: Decimal = Decimal("0")
    vat_amount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")

    @property
    def invoice_number(self) -> str:
        return self.header.invoice_number

    def compute_totals(self) -> None:
        self.subtotal = sum((line.line_total for line in self.lines), Decimal("0"))
        self.vat_amount = round_half_away_from_zero(
            self.subtotal * self.header.vat_percentage / Decimal("100")
        )
        self.total = self.subtotal + self.vat_amount
