from __future__ import annotations

from collections.abc import Iterable

from ..models.import_result import Structure

"""Structure classification for flat tables.

Keyword scoring over column names. A keyword scores when it is a substring of
any lower-cased column name; each keyword scores at most once. Ties go to the
multi-invoice layout.
"""

__all__ = [
    "MULTI_INVOICE_KEYWORDS",
    "SINGLE_INVOICE_KEYWORDS",
    "classify_structure",
    "structure_scores",
]

SINGLE_INVOICE_KEYWORDS: tuple[str, ...] = ("no", "item", "description", "quantity", "price", "total")
MULTI_INVOICE_KEYWORDS: tuple[str, ...] = ("invoice_number", "company_name", "date")


def structure_scores(columns: Iterable[str]) -> tuple[int, int]:
    """Return ``(single_score, multi_score)`` for ``columns``."""
    names = [c.lower() for c in columns]

    def score(keywords: tuple[str, ...]) -> int:
        return sum(1 for kw in keywords if any(kw in name for name in names))

    return score(SINGLE_INVOICE_KEYWORDS), score(MULTI_INVOICE_KEYWORDS)


def classify_structure(columns: Iterable[str]) -> Structure:
    single, multi = structure_scores(columns)
    return Structure.SINGLE_INVOICE if single > multi else Structure.MULTI_INVOICE
