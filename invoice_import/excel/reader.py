from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import pandas as pd

from ..delimited.sniffer import ImportFileError
from ..models.table import Table, clean_column_name

"""Spreadsheet workbook -> Tables.

Row 1 of every worksheet is the header row, later rows are data. Fully empty
rows are dropped. Cells are rendered to text so spreadsheet sources flow
through the same coercion path as delimited text:
- dates as ``yyyy-MM-dd`` (with `` HH:mm:ss`` when a time part is present)
- integral floats without the trailing ``.0``
- empty cells as ""

Worksheet roles are picked by case-insensitive substring: a name containing
"header" holds invoice headers, one containing "line" holds invoice lines.
"""

__all__ = [
    "SheetSelection",
    "cell_text",
    "read_workbook",
    "select_worksheets",
]


@dataclass(frozen=True)
class SheetSelection:
    """Worksheets chosen for an import.

    When both ``header`` and ``lines`` are set the workbook uses the split
    header/line layout; otherwise ``combined`` is the single flat source.
    """
    header: str | None = None
    lines: str | None = None
    combined: str | None = None

    @property
    def is_split(self) -> bool:
        return self.header is not None and self.lines is not None


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    if value is pd.NaT:
        return ""
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.strftime("%Y-%m-%d")
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def read_workbook(path: Path) -> dict[str, Table]:
    """Read every worksheet of ``path`` into a Table keyed by sheet name.

    Raises:
        ImportFileError: workbook cannot be opened, or has no worksheets
    """
    try:
        # .xlsx is read by openpyxl, legacy .xls by xlrd
        with pd.ExcelFile(path) as xls:
            raw = {
                str(name): xls.parse(name, header=None, dtype=object, keep_default_na=False)
                for name in xls.sheet_names
            }
    except Exception as e:
        raise ImportFileError(f"cannot read workbook: {e}") from e

    if not raw:
        raise ImportFileError("Excel file contains no worksheets")
    return {name: _sheet_to_table(name, df) for name, df in raw.items()}


def _sheet_to_table(sheet_name: str, df: pd.DataFrame) -> Table:
    if df.shape[0] == 0:
        return Table.build(sheet_name, [], [])
    columns = [clean_column_name(cell_text(c)) for c in df.iloc[0].tolist()]
    rows: list[list[str]] = []
    for raw in df.iloc[1:].itertuples(index=False):
        values = [cell_text(v) for v in raw]
        # Entirely empty rows are formatting leftovers
        if not any(values):
            continue
        rows.append(values)
    return Table.build(sheet_name, columns, rows)


def select_worksheets(sheet_names: list[str]) -> SheetSelection:
    header = next((n for n in sheet_names if "header" in n.lower()), None)
    lines = next((n for n in sheet_names if "line" in n.lower() and n != header), None)
    if header is not None and lines is not None:
        return SheetSelection(header=header, lines=lines)
    combined = header or lines or (sheet_names[0] if sheet_names else None)
    return SheetSelection(combined=combined)
