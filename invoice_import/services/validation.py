from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from ..models.invoice import InvoiceAggregate

"""Business rules for finished invoice aggregates.

Validation only reports: aggregates are never modified or dropped, and several
messages may be produced for the same invoice.
"""

__all__ = [
    "ValidationResult",
    "validate_aggregate",
    "validate_aggregates",
]


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: tuple[str, ...] = ()


def validate_aggregate(aggregate: InvoiceAggregate) -> list[str]:
    header = aggregate.header
    number = header.invoice_number
    errors: list[str] = []

    if not number.strip():
        errors.append("Invoice number is required")
    if not header.company_name.strip():
        errors.append(f"Company name is required for invoice {number}")
    if not aggregate.lines:
        errors.append(f"Invoice {number} must have at least one line item")
    if not Decimal("0") <= header.vat_percentage <= Decimal("100"):
        errors.append(f"VAT percentage must be between 0 and 100 for invoice {number}")
    if header.due_date is not None and header.due_date < header.invoice_date:
        errors.append(f"Due date must be on or after invoice date for invoice {number}")

    for line in aggregate.lines:
        if not line.worker_name.strip():
            errors.append(f"TKA name is required for invoice {number}")
        if line.unit_price <= 0:
            errors.append(f"Unit price must be greater than 0 for invoice {number}")
        if line.quantity <= 0:
            errors.append(f"Quantity must be greater than 0 for invoice {number}")
    return errors


def validate_aggregates(aggregates: Iterable[InvoiceAggregate]) -> ValidationResult:
    errors: list[str] = []
    for aggregate in aggregates:
        errors.extend(validate_aggregate(aggregate))
    return ValidationResult(is_valid=not errors, errors=tuple(errors))
