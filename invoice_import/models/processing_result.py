from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .import_result import ImportResult

"""Processing result models for directory imports.

ProcessingResult aggregates the per-file ImportResults of one CLI run and
provides the numbers printed on the SUMMARY line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    invoices: int  # aggregates produced
    records: int  # total records read
    failed_records: int
    elapsed_seconds: float


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of importing every file of a run."""
    success_files: int
    failed_files: int
    total_invoices: int
    total_records: int
    failed_records: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] = field(default_factory=list)
    results: list[ImportResult] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
