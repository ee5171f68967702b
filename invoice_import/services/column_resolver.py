from __future__ import annotations

from collections.abc import Mapping, Sequence

"""Alias-based column resolution.

Each logical field owns an ordered alias list; the first alias whose column
exists (case-insensitive) with a non-blank value wins.
"""

__all__ = [
    "HEADER_ALIASES",
    "LINE_ALIASES",
    "resolve",
    "resolve_field",
]

HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "invoice_number": ("invoice_number", "invoice_no", "number"),
    "company_name": ("company_name", "company", "client"),
    "company_tax_id": ("company_npwp", "npwp", "tax_id"),
    "invoice_date": ("invoice_date", "date", "created_date"),
    "due_date": ("due_date", "payment_date"),
    "vat_percentage": ("vat_percentage", "vat_percent", "tax_rate"),
    "notes": ("notes", "description", "remarks"),
}

LINE_ALIASES: dict[str, tuple[str, ...]] = {
    "worker_name": ("tka_name", "worker_name", "employee", "name"),
    "worker_passport": ("tka_passport", "passport", "id"),
    "job_name": ("job_name", "job_description", "service", "item"),
    "job_description": ("job_description", "description"),
    "baris": ("baris", "group", "line_group"),
    "quantity": ("quantity", "qty", "amount"),
    "unit_price": ("unit_price", "price", "rate"),
    "line_total": ("line_total", "total", "subtotal"),
}


def resolve(row: Mapping[str, str | None], aliases: Sequence[str]) -> str | None:
    """Return the first non-empty value among ``aliases``, or None."""
    lowered = {str(k).lower(): v for k, v in row.items()}
    for alias in aliases:
        value = lowered.get(alias.lower())
        if value is not None and value.strip():
            return value
    return None


def resolve_field(row: Mapping[str, str | None], field_name: str) -> str | None:
    """Resolve a logical header or line field by name."""
    aliases = HEADER_ALIASES.get(field_name) or LINE_ALIASES.get(field_name)
    if aliases is None:
        raise KeyError(f"unknown logical field: {field_name}")
    return resolve(row, aliases)
