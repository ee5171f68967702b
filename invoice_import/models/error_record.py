from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""Error and warning records collected during one import run.

Row numbers are 1-based data rows (the header row is not counted). Use
``FILE_LEVEL_ROW`` (-1) for file-level errors where no row applies.

Each record serializes to one JSON line for the error log written by the CLI.
"""

__all__ = [
    "FILE_LEVEL_ROW",
    "ImportErrorRecord",
    "ImportWarningRecord",
]

FILE_LEVEL_ROW = -1


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ImportErrorRecord:
    """A row-level or file-level import failure.

    Attributes:
        row: Data row number (1-based). -1 for file-level errors
        field: Logical field or area the error relates to ("invoice_number", "File", ...)
        message: Human readable description
        value: Offending raw value, if any
        source: Table/worksheet the row came from ("" for single-table sources)
    """
    row: int
    field: str
    message: str
    value: str = ""
    source: str = ""

    @property
    def is_file_level(self) -> bool:
        return self.row == FILE_LEVEL_ROW

    def to_json_line(self, file: str) -> str:
        """Serialize to a JSON Lines entry, stamped with the current UTC time."""
        data = {"timestamp": _utc_timestamp(), "file": file, "severity": "error"}
        data.update(asdict(self))
        return json.dumps(data, ensure_ascii=False)


@dataclass(frozen=True)
class ImportWarningRecord:
    """A non-fatal finding (skipped duplicate, unresolved reference...)."""
    row: int
    field: str
    message: str
    value: str = ""
    source: str = ""

    def to_json_line(self, file: str) -> str:
        data = {"timestamp": _utc_timestamp(), "file": file, "severity": "warning"}
        data.update(asdict(self))
        return json.dumps(data, ensure_ascii=False)
