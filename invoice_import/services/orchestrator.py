from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ImportConfig, ImportOptions
from ..models.import_result import ImportResult
from ..models.processing_result import FileStat, ProcessingResult
from .pipeline import import_file
from .progress import ProgressTracker

"""Directory import orchestration.

Scans a source directory (non-recursive) for supported files, imports each one
with ``import_file`` and aggregates the per-file results. A file whose result
is not successful (file-level error or failed records) counts as a failed
file; processing always continues with the next file.
"""

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "ProcessingError",
    "process_all",
    "process_files",
    "scan_import_files",
]

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = frozenset({".csv", ".txt", ".xlsx", ".xls", ".json"})


class ProcessingError(Exception):
    """Fatal error that prevents a directory run from starting."""


def scan_import_files(directory: Path) -> list[Path]:
    """Return supported files in ``directory`` sorted by name.

    Raises:
        ProcessingError: directory missing, not a directory, or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def _log_result(result: ImportResult) -> None:
    for error in result.errors:
        where = "file" if error.is_file_level else f"row {error.row}"
        if error.source:
            where = f"{error.source} {where}"
        logger.error(f"{result.file_name} {where} [{error.field}]: {error.message}")
    for warning in result.warnings:
        logger.warning(f"{result.file_name} row {warning.row} [{warning.field}]: {warning.message}")
    for message in result.validation_errors:
        logger.warning(f"{result.file_name} validation: {message}")


def process_files(
    paths: Iterable[Path],
    options: ImportOptions | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Import ``paths`` one after the other and aggregate the outcome."""
    file_paths = list(paths)
    start_time = datetime.now(UTC)

    file_stats: list[FileStat] = []
    results: list[ImportResult] = []
    success_count = 0
    failed_count = 0
    total_invoices = 0
    total_records = 0
    failed_records = 0

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            result = import_file(file_path, options)
            results.append(result)
            _log_result(result)
            if error_log is not None:
                error_log.add_result(result)

            if result.success:
                success_count += 1
            else:
                failed_count += 1
            total_invoices += len(result.aggregates)
            total_records += result.total_records
            failed_records += result.failed_records

            progress.set_postfix(success=success_count, failed=failed_count, invoices=total_invoices)
            progress.finish_file(success=result.success)

            file_stats.append(
                FileStat(
                    file_name=file_path.name,
                    status="success" if result.success else "failed",
                    invoices=len(result.aggregates),
                    records=result.total_records,
                    failed_records=result.failed_records,
                    elapsed_seconds=result.elapsed_seconds,
                )
            )

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_invoices=total_invoices,
        total_records=total_records,
        failed_records=failed_records,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
        results=results,
    )


def process_all(config: ImportConfig, error_log: ErrorLogBuffer | None = None) -> ProcessingResult:
    """Import every supported file of ``config.source_directory``.

    Raises:
        ProcessingError: the source directory cannot be scanned
    """
    file_paths = scan_import_files(Path(config.source_directory))
    logger.debug(f"{len(file_paths)} file(s) found in {config.source_directory}")
    return process_files(file_paths, config.options, error_log)
