from __future__ import annotations

import asyncio
import logging
import threading
from pathlib import Path

from ..delimited.reader import read_delimited_table
from ..delimited.sniffer import (
    ImportFileError,
    detect_delimiter_in_file,
    detect_encoding,
    detect_file_type,
)
from ..excel.reader import read_workbook, select_worksheets
from ..jsondoc.reader import JsonRecordError, header_from_json, lines_from_json, read_json_document
from ..models.config_models import ImportOptions
from ..models.import_result import (
    FileType,
    ImportAccumulator,
    ImportResult,
    Structure,
    ValidationReport,
)
from ..models.table import Table
from .aggregator import InvoiceAggregator
from .classifier import classify_structure
from .row_extractor import extract_header, extract_invoice_number, extract_line, synthetic_header
from .validation import validate_aggregates

"""Single-file import pipeline.

One forward pass per call, no retries:

    Detect -> Parse -> Classify -> Extract (per row) -> Aggregate -> Validate -> Result

A failure while detecting or parsing the file ends the run with an empty
result carrying one file-level error. Row-level problems are recorded and the
run continues. Between rows the optional ``cancel_event`` is polled; once it
is set no further rows are consumed and the partial result is returned with
``cancelled=True``.

Counting: every data row (JSON: every top-level object) is one record; a row
that produced a row error is failed, a repeated invoice dropped by
``skip_duplicates`` is skipped, every other consumed row is a success.
"""

__all__ = [
    "import_file",
    "import_file_async",
    "validate_file",
]

logger = logging.getLogger(__name__)


class _Run:
    """State of one import call."""

    def __init__(
        self,
        acc: ImportAccumulator,
        options: ImportOptions,
        cancel_event: threading.Event | None,
    ) -> None:
        self.acc = acc
        self.options = options
        self.cancel_event = cancel_event
        self.aggregator = InvoiceAggregator()

    def should_stop(self) -> bool:
        if self.cancel_event is not None and self.cancel_event.is_set():
            if not self.acc.cancelled:
                logger.info(f"import of {self.acc.file_name} cancelled")
            self.acc.cancelled = True
            return True
        return False


def import_file(
    path: Path | str,
    options: ImportOptions | None = None,
    cancel_event: threading.Event | None = None,
) -> ImportResult:
    """Import one file into invoice aggregates.

    Args:
        path: Delimited text, spreadsheet or JSON document
        options: Run options (defaults when omitted)
        cancel_event: Cooperative cancellation flag polled between rows

    Returns:
        Frozen ImportResult; never raises for problems inside the file
    """
    path = Path(path)
    options = options or ImportOptions()
    file_type = detect_file_type(path)
    acc = ImportAccumulator(path.name, file_type)
    run = _Run(acc, options, cancel_event)

    logger.info(f"Starting import: {path.name} ({file_type.value})")
    try:
        if not path.is_file():
            raise ImportFileError(f"File not found: {path}")
        if file_type is FileType.DELIMITED_TEXT:
            _import_delimited(path, run)
        elif file_type is FileType.JSON_DOCUMENT:
            _import_json(path, run)
        else:
            _import_spreadsheet(path, run)
    except ImportFileError as e:
        logger.error(f"{path.name}: {e}")
        acc = ImportAccumulator(path.name, file_type)
        acc.add_file_error(f"Import failed: {e}")
        return acc.build(
            validate_only=options.validate_only,
            create_missing_entities=options.create_missing_entities,
        )

    aggregates = run.aggregator.finish()
    acc.aggregates.extend(aggregates)
    validation = validate_aggregates(aggregates)
    acc.validation_errors.extend(validation.errors)

    result = acc.build(
        validate_only=options.validate_only,
        create_missing_entities=options.create_missing_entities,
    )
    logger.info(
        f"Import completed: {path.name} invoices={len(result.aggregates)} "
        f"success={result.success_records} failed={result.failed_records} "
        f"skipped={result.skipped_records}"
    )
    if validation.errors:
        logger.warning(f"{path.name}: {len(validation.errors)} validation issue(s)")
    return result


async def import_file_async(
    path: Path | str,
    options: ImportOptions | None = None,
    cancel_event: threading.Event | None = None,
) -> ImportResult:
    """Run ``import_file`` on a worker thread.

    Cancelling the awaiting task sets the cancellation flag so the worker stops
    at the next row boundary.
    """
    event = cancel_event or threading.Event()
    try:
        return await asyncio.to_thread(import_file, path, options, event)
    except asyncio.CancelledError:
        event.set()
        raise


def _import_delimited(path: Path, run: _Run) -> None:
    encoding = run.options.encoding or detect_encoding(path)
    delimiter = run.options.delimiter or detect_delimiter_in_file(path, encoding)
    run.acc.encoding = encoding
    run.acc.delimiter = delimiter
    table = read_delimited_table(path, delimiter, encoding, run.options.has_headers)
    _import_flat_table(table, run)


def _import_spreadsheet(path: Path, run: _Run) -> None:
    tables = read_workbook(path)
    selection = select_worksheets(list(tables))
    if selection.is_split:
        _import_split_workbook(tables[selection.header], tables[selection.lines], run)
    else:
        _import_flat_table(tables[selection.combined], run)


def _import_flat_table(table: Table, run: _Run) -> None:
    acc = run.acc
    structure = classify_structure(table.columns)
    acc.structure = structure
    acc.total_records += len(table)
    logger.debug(f"{table.source_name}: {len(table)} rows classified as {structure.value}")

    if structure is Structure.SINGLE_INVOICE:
        header = synthetic_header(
            run.options.default_invoice_number,
            run.options.default_company_name,
            default_vat=run.options.default_vat_percentage,
        )
        for row_number, row in enumerate(table, start=1):
            if run.should_stop():
                break
            line = extract_line(row, row_number)
            if line is not None:
                run.aggregator.add_header(header)
                run.aggregator.add_line(header.invoice_number, line)
            acc.record_success()
        return

    for row_number, row in enumerate(table, start=1):
        if run.should_stop():
            break
        number = extract_invoice_number(row)
        if number is None:
            acc.add_error(row_number, "invoice_number", "Invoice number is required")
            continue
        if number not in run.aggregator:
            header = extract_header(row, row_number, default_vat=run.options.default_vat_percentage)
            run.aggregator.add_header(header)
        line = extract_line(row, row_number)
        if line is not None:
            run.aggregator.add_line(number, line)
        acc.record_success()


def _import_split_workbook(header_table: Table, line_table: Table, run: _Run) -> None:
    """Header worksheet rows are invoices; line worksheet rows join on invoice number."""
    acc = run.acc
    acc.structure = Structure.HEADER_LINES
    acc.total_records += len(header_table) + len(line_table)

    for row_number, row in enumerate(header_table, start=1):
        if run.should_stop():
            return
        header = extract_header(row, row_number, default_vat=run.options.default_vat_percentage)
        if header is None:
            acc.add_error(
                row_number, "invoice_number", "Invoice number is required",
                source=header_table.source_name,
            )
            continue
        if header.invoice_number in run.aggregator and run.options.skip_duplicates:
            acc.add_warning(
                row_number, "invoice_number",
                f"Invoice {header.invoice_number} appears more than once and will be skipped",
                value=header.invoice_number, source=header_table.source_name,
            )
            acc.record_skipped()
            continue
        run.aggregator.add_header(header)
        acc.record_success()

    for row_number, row in enumerate(line_table, start=1):
        if run.should_stop():
            return
        line = extract_line(row, row_number)
        if line is None:
            acc.record_success()
            continue
        number = extract_invoice_number(row)
        if number is None:
            acc.add_error(
                row_number, "invoice_number", "Invoice number is required",
                source=line_table.source_name,
            )
            continue
        if number not in run.aggregator:
            acc.add_error(
                row_number, "invoice_number", f"No invoice header found for invoice {number}",
                value=number, source=line_table.source_name,
            )
            continue
        run.aggregator.add_line(number, line)
        acc.record_success()


def _import_json(path: Path, run: _Run) -> None:
    acc = run.acc
    records = read_json_document(path)
    acc.total_records = len(records)

    for record_number, record in enumerate(records, start=1):
        if run.should_stop():
            break
        try:
            header = header_from_json(
                record, record_number, default_vat=run.options.default_vat_percentage
            )
        except JsonRecordError as e:
            acc.add_error(record_number, e.field, e.message)
            continue
        if header.invoice_number in run.aggregator and run.options.skip_duplicates:
            acc.add_warning(
                record_number, "invoice_number",
                f"Invoice {header.invoice_number} appears more than once and will be skipped",
                value=header.invoice_number,
            )
            acc.record_skipped()
            continue
        run.aggregator.add_header(header)
        for line in lines_from_json(record, record_number):
            run.aggregator.add_line(header.invoice_number, line)
        acc.record_success()


def validate_file(path: Path | str, options: ImportOptions | None = None) -> ValidationReport:
    """Pre-flight check: can the file be read, and how many records does it hold?"""
    path = Path(path)
    options = options or ImportOptions()
    file_type = detect_file_type(path)
    errors: list[str] = []
    estimated = 0

    try:
        if not path.is_file():
            raise ImportFileError(f"File not found: {path}")
        if file_type is FileType.DELIMITED_TEXT:
            encoding = options.encoding or detect_encoding(path)
            delimiter = options.delimiter or detect_delimiter_in_file(path, encoding)
            table = read_delimited_table(path, delimiter, encoding, options.has_headers)
            estimated = len(table)
            if estimated == 0:
                errors.append("CSV file appears to be empty or has no data rows")
        elif file_type is FileType.JSON_DOCUMENT:
            estimated = len(read_json_document(path))
        else:
            tables = read_workbook(path)
            selection = select_worksheets(list(tables))
            first = tables[selection.header or selection.combined]
            estimated = len(first)
            if estimated == 0:
                errors.append("Headers worksheet is empty or has no data")
    except ImportFileError as e:
        errors.append(str(e))

    logger.info(f"File validation completed: {path.name} valid={not errors} errors={len(errors)}")
    return ValidationReport(
        file_name=path.name,
        file_type=file_type,
        is_valid=not errors,
        estimated_record_count=estimated,
        errors=tuple(errors),
    )
