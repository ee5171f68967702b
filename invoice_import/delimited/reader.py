from __future__ import annotations

import logging
from pathlib import Path

from ..models.table import Table, clean_column_name
from .sniffer import ImportFileError
from .tokenizer import tokenize_line

"""Delimited text -> Table.

The file is streamed line by line. The first non-blank line is the header
(cleaned column names) when ``has_headers`` is set; otherwise synthetic
``column1..columnN`` names are used and that line is data. Blank lines are
skipped everywhere.
"""

__all__ = [
    "read_delimited_table",
]

logger = logging.getLogger(__name__)

BOM_CHAR = "\ufeff"


def read_delimited_table(
    path: Path,
    delimiter: str,
    encoding: str,
    has_headers: bool = True,
) -> Table:
    """Read ``path`` into a Table.

    Raises:
        ImportFileError: file missing, unreadable or not decodable with ``encoding``
    """
    columns: list[str] | None = None
    rows: list[list[str]] = []
    try:
        with open(path, encoding=encoding, newline="") as f:
            for raw_line in f:
                line = raw_line.rstrip("\r\n")
                if columns is None:
                    line = line.lstrip(BOM_CHAR)
                if not line.strip():
                    continue
                values = tokenize_line(line, delimiter)
                if columns is None:
                    if has_headers:
                        columns = [clean_column_name(v) for v in values]
                        continue
                    columns = [f"column{i + 1}" for i in range(len(values))]
                rows.append(values)
    except (OSError, UnicodeError, LookupError) as e:
        raise ImportFileError(f"cannot read file: {e}") from e

    table = Table.build(path.name, columns or [], rows)
    logger.debug("read %d rows x %d columns from %s", len(table), len(table.columns), path.name)
    return table
