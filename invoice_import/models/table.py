from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

"""Table model: the common carrier between readers and row extraction.

A Table is built once per delimited file or worksheet and never changes
afterwards. Every row holds exactly the table's columns; short source rows
are padded with empty strings and long ones are truncated by the reader.
"""

__all__ = [
    "Table",
    "clean_column_name",
]


def clean_column_name(name: str | None) -> str:
    """Normalize a raw header cell: trim, spaces/hyphens -> '_', lower-case."""
    if name is None:
        return ""
    return name.strip().replace(" ", "_").replace("-", "_").lower()


@dataclass(frozen=True)
class Table:
    """Column-named, row-ordered grid of raw string cells."""
    source_name: str
    columns: tuple[str, ...]
    rows: tuple[Mapping[str, str], ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls,
        source_name: str,
        columns: Sequence[str],
        raw_rows: Iterable[Sequence[str]],
    ) -> Table:
        """Build a Table from positional rows, padding/truncating each row.

        Duplicate column names get a numeric suffix (``name_2``) so lookups
        stay unambiguous.
        """
        unique: list[str] = []
        seen: set[str] = set()
        for i, col in enumerate(columns):
            name = col or f"column{i + 1}"
            candidate = name
            n = 2
            while candidate.lower() in seen:
                candidate = f"{name}_{n}"
                n += 1
            seen.add(candidate.lower())
            unique.append(candidate)

        width = len(unique)
        rows: list[Mapping[str, str]] = []
        for raw in raw_rows:
            values = list(raw[:width]) + [""] * (width - len(raw))
            rows.append(MappingProxyType(dict(zip(unique, values))))
        return cls(source_name=source_name, columns=tuple(unique), rows=tuple(rows))

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Mapping[str, str]]:
        return iter(self.rows)

    def find_column(self, name: str) -> str | None:
        """Return the physical column matching ``name`` case-insensitively."""
        wanted = name.lower()
        for col in self.columns:
            if col.lower() == wanted:
                return col
        return None
