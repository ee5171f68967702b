from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from .error_record import FILE_LEVEL_ROW, ImportErrorRecord, ImportWarningRecord
from .invoice import InvoiceAggregate

"""Import result models.

``ImportAccumulator`` is the append-only collector used while one import runs.
``ImportResult`` is the frozen snapshot handed back to the caller; timestamps
are excluded from equality so two runs over the same file compare equal.
"""

__all__ = [
    "FileType",
    "Structure",
    "ImportResult",
    "ImportAccumulator",
    "ValidationReport",
]


class FileType(Enum):
    """Source kind decided by the format sniffer."""
    DELIMITED_TEXT = "delimited_text"
    SPREADSHEET = "spreadsheet"
    JSON_DOCUMENT = "json_document"


class Structure(Enum):
    """Layout of a flat table.

    - SINGLE_INVOICE: every row is a line of one invoice
    - MULTI_INVOICE: every row carries its own invoice number
    - HEADER_LINES: workbook with separate header and line worksheets
    """
    SINGLE_INVOICE = "single_invoice"
    MULTI_INVOICE = "multi_invoice"
    HEADER_LINES = "header_lines"


@dataclass(frozen=True)
class ImportResult:
    file_name: str
    file_type: FileType | None
    total_records: int
    success_records: int
    failed_records: int
    skipped_records: int = 0
    errors: tuple[ImportErrorRecord, ...] = ()
    warnings: tuple[ImportWarningRecord, ...] = ()
    aggregates: tuple[InvoiceAggregate, ...] = ()
    validation_errors: tuple[str, ...] = ()
    encoding: str | None = None
    delimiter: str | None = None
    structure: Structure | None = None
    cancelled: bool = False
    validate_only: bool = False
    create_missing_entities: bool = True
    start_time: datetime | None = field(default=None, compare=False)
    end_time: datetime | None = field(default=None, compare=False)
    elapsed_seconds: float = field(default=0.0, compare=False)

    @property
    def has_file_error(self) -> bool:
        return any(e.row == FILE_LEVEL_ROW for e in self.errors)

    @property
    def success(self) -> bool:
        """True when no record failed and the file itself could be read."""
        return self.failed_records == 0 and not self.has_file_error

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors

    @property
    def success_rate(self) -> float:
        if self.total_records <= 0:
            return 0.0
        return self.success_records / self.total_records * 100


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of a pre-flight file check (no aggregation performed)."""
    file_name: str
    file_type: FileType | None
    is_valid: bool
    estimated_record_count: int
    errors: tuple[str, ...] = ()


class ImportAccumulator:
    """Collects counters, errors and aggregates during a single import run."""

    def __init__(self, file_name: str, file_type: FileType | None = None) -> None:
        self.file_name = file_name
        self.file_type = file_type
        self.encoding: str | None = None
        self.delimiter: str | None = None
        self.structure: Structure | None = None
        self.total_records = 0
        self.success_records = 0
        self.failed_records = 0
        self.skipped_records = 0
        self.cancelled = False
        self.errors: list[ImportErrorRecord] = []
        self.warnings: list[ImportWarningRecord] = []
        self.aggregates: list[InvoiceAggregate] = []
        self.validation_errors: list[str] = []
        self.start_time = datetime.now(UTC)

    def add_error(
        self, row: int, field_name: str, message: str, value: str = "", source: str = ""
    ) -> None:
        """Record a row-level failure and count the row as failed."""
        self.errors.append(ImportErrorRecord(row, field_name, message, value, source))
        self.failed_records += 1

    def add_file_error(self, message: str) -> None:
        """Record a fatal error; the run produces no records."""
        self.errors.append(ImportErrorRecord(FILE_LEVEL_ROW, "File", message))

    def add_warning(
        self, row: int, field_name: str, message: str, value: str = "", source: str = ""
    ) -> None:
        self.warnings.append(ImportWarningRecord(row, field_name, message, value, source))

    def record_success(self) -> None:
        self.success_records += 1

    def record_skipped(self) -> None:
        self.skipped_records += 1

    def build(self, *, validate_only: bool = False, create_missing_entities: bool = True) -> ImportResult:
        end_time = datetime.now(UTC)
        return ImportResult(
            file_name=self.file_name,
            file_type=self.file_type,
            total_records=self.total_records,
            success_records=self.success_records,
            failed_records=self.failed_records,
            skipped_records=self.skipped_records,
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
            aggregates=tuple(self.aggregates),
            validation_errors=tuple(self.validation_errors),
            encoding=self.encoding,
            delimiter=self.delimiter,
            structure=self.structure,
            cancelled=self.cancelled,
            validate_only=validate_only,
            create_missing_entities=create_missing_entities,
            start_time=self.start_time,
            end_time=end_time,
            elapsed_seconds=(end_time - self.start_time).total_seconds(),
        )
