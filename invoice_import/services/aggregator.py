from __future__ import annotations

from ..models.invoice import InvoiceAggregate, InvoiceHeaderCandidate, InvoiceLineCandidate

"""Row -> invoice grouping.

Aggregates are keyed on the exact invoice number string (case-sensitive). The
first header seen for a number wins; later headers for the same number only
reuse the existing aggregate. Lines keep source row order. Totals are
computed once, in ``finish``.
"""

__all__ = [
    "InvoiceAggregator",
]


class InvoiceAggregator:
    """Groups header and line candidates into InvoiceAggregate objects."""

    def __init__(self) -> None:
        self._aggregates: dict[str, InvoiceAggregate] = {}

    def __contains__(self, invoice_number: object) -> bool:
        return invoice_number in self._aggregates

    def __len__(self) -> int:
        return len(self._aggregates)

    def add_header(self, header: InvoiceHeaderCandidate) -> InvoiceAggregate:
        """Create the aggregate on first sight of the number, else reuse it."""
        aggregate = self._aggregates.get(header.invoice_number)
        if aggregate is None:
            aggregate = InvoiceAggregate(header=header)
            self._aggregates[header.invoice_number] = aggregate
        return aggregate

    def add_line(self, invoice_number: str, line: InvoiceLineCandidate) -> None:
        """Append ``line`` to an existing aggregate.

        Raises:
            KeyError: no header was added for ``invoice_number``
        """
        self._aggregates[invoice_number].lines.append(line)

    def finish(self) -> list[InvoiceAggregate]:
        aggregates = list(self._aggregates.values())
        for aggregate in aggregates:
            aggregate.compute_totals()
        return aggregates
