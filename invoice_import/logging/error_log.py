from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ImportErrorRecord, ImportWarningRecord
from ..models.import_result import ImportResult

"""Error log buffering.

Records from every imported file are buffered in memory and written as JSON
Lines to ``<logs_dir>/errors-YYYYMMDD-HHMMSS.log`` (UTC) on flush. The file is
only created when there is something to write. Serial use only.
"""

__all__ = [
    "ErrorLogBuffer",
    "TIMESTAMP_FMT",
]

TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer of error/warning records; flush writes JSON Lines."""

    def __init__(self, logs_dir: Path | str = "logs") -> None:
        self.logs_dir = Path(logs_dir)
        self._lines: list[str] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.logs_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, file_name: str, record: ImportErrorRecord | ImportWarningRecord) -> None:
        self._lines.append(record.to_json_line(file_name))

    def add_result(self, result: ImportResult) -> None:
        """Buffer every error and warning of one import result."""
        for error in result.errors:
            self.append(result.file_name, error)
        for warning in result.warnings:
            self.append(result.file_name, warning)

    def __len__(self) -> int:
        return len(self._lines)

    def flush(self) -> Path | None:
        """Write buffered lines; return the log path, or None when empty."""
        if not self._lines:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for line in self._lines:
                f.write(line + "\n")
        self._lines.clear()
        return fp
