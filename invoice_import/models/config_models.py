from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any

from .invoice import DEFAULT_VAT_PERCENTAGE

"""Config dataclasses for the invoice import engine.

ImportOptions tunes a single import run; ImportConfig is the root object loaded
from ``config/import.yml`` by ``invoice_import.config.loader``.
"""

__all__ = [
    "ImportOptions",
    "ImportConfig",
]


@dataclass(frozen=True)
class ImportOptions:
    """Per-run options. Every field is optional.

    ``delimiter``/``encoding`` override the sniffer for delimited text.
    ``default_invoice_number``/``default_company_name`` feed the synthetic
    header used when a table is classified as a single invoice.
    ``validate_only`` and ``create_missing_entities`` are not interpreted by the
    engine itself; they are carried on the result for the persistence layer.
    ``skip_duplicates`` drops repeated invoices (header worksheet rows, JSON
    objects) with a warning instead of merging their lines.
    """
    delimiter: str | None = None
    encoding: str | None = None
    has_headers: bool = True
    default_invoice_number: str | None = None
    default_company_name: str | None = None
    default_vat_percentage: Decimal = DEFAULT_VAT_PERCENTAGE
    validate_only: bool = False
    skip_duplicates: bool = False
    create_missing_entities: bool = True

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> ImportOptions:
        """Build options from a (schema-validated) config mapping."""
        data = dict(data or {})
        if "default_vat_percentage" in data:
            data["default_vat_percentage"] = Decimal(str(data["default_vat_percentage"]))
        return cls(**data)

    def merged(self, **overrides: Any) -> ImportOptions:
        """Return a copy with the non-None overrides applied (CLI flags)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for directory imports."""
    source_directory: str  # Directory scanned for import files
    options: ImportOptions = field(default_factory=ImportOptions)
    error_log_dir: str = "logs"  # JSON Lines error logs land here
