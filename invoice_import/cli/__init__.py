from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..delimited.reader import read_delimited_table
from ..delimited.sniffer import (
    ImportFileError,
    detect_delimiter_in_file,
    detect_encoding,
    detect_file_type,
)
from ..excel.reader import read_workbook
from ..jsondoc.reader import read_json_document
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, setup_logging
from ..models.config_models import ImportConfig, ImportOptions
from ..models.import_result import FileType
from ..models.table import Table
from ..services.classifier import classify_structure
from ..services.orchestrator import ProcessingError, process_all, process_files, scan_import_files
from ..services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load ``.env`` (INVOICE_IMPORT_CONFIG may point at another config file)
- Load ``config/import.yml`` when present (required when no paths are given)
- Import the given paths, or every supported file of ``source_directory``
- Log per-file problems, write the JSON Lines error log, print one SUMMARY line

Exit codes: 0 every file imported without failures, 2 at least one file had
failed records or a file-level error, 1 fatal (config / directory).
"""

__all__ = [
    "EXIT_SUCCESS_ALL",
    "EXIT_PARTIAL_FAILURE",
    "EXIT_FATAL",
    "main",
]

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

CONFIG_ENV_VAR = "INVOICE_IMPORT_CONFIG"
_DELIMITER_NAMES = {"comma": ",", "semicolon": ";", "tab": "\t", "\\t": "\t", "pipe": "|"}


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env; failures only produce a warning."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Invoice import: CSV / Excel / JSON -> invoice aggregates")
    p.add_argument("paths", nargs="*", type=Path, help="Files to import (default: source_directory)")
    p.add_argument("--config", type=Path, help="YAML config path (default: config/import.yml)")
    p.add_argument("--delimiter", help="Field delimiter override (',', ';', tab, '|')")
    p.add_argument("--encoding", help="Text encoding override")
    p.add_argument("--no-headers", action="store_true", help="Delimited files have no header row")
    p.add_argument("--default-invoice-number", help="Invoice number for single-invoice files")
    p.add_argument("--default-company-name", help="Company name for single-invoice files")
    p.add_argument("--validate-only", action="store_true", help="Mark results as not to be persisted")
    p.add_argument("--skip-duplicates", action="store_true", help="Skip repeated invoices with a warning")
    p.add_argument("--inspect-data", action="store_true", help="Print detected layout & first rows then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> ImportConfig:
    config_path = args.config or Path(os.getenv(CONFIG_ENV_VAR, str(DEFAULT_CONFIG_PATH)))
    if args.paths and args.config is None and not config_path.exists():
        return ImportConfig(source_directory=".")
    return load_config(config_path)


def _options_from_args(base: ImportOptions, args: argparse.Namespace) -> ImportOptions:
    delimiter = args.delimiter
    if delimiter is not None:
        delimiter = _DELIMITER_NAMES.get(delimiter.lower(), delimiter)
    return base.merged(
        delimiter=delimiter,
        encoding=args.encoding,
        has_headers=False if args.no_headers else None,
        default_invoice_number=args.default_invoice_number,
        default_company_name=args.default_company_name,
        validate_only=True if args.validate_only else None,
        skip_duplicates=True if args.skip_duplicates else None,
    )


def _print_table(table: Table) -> None:
    structure = classify_structure(table.columns)
    print(f"  TABLE: {table.source_name} rows={len(table)} structure={structure.value}")
    print(f"    cols={list(table.columns)}")
    print("    sample_rows=", [dict(r) for r in table.rows[:3]])


def _inspect_data(paths: list[Path], options: ImportOptions) -> int:
    if not paths:
        print("inspect: no import files")
        return 0
    for f in paths:
        file_type = detect_file_type(f)
        print(f"FILE: {f.name} type={file_type.value}")
        try:
            if file_type is FileType.DELIMITED_TEXT:
                encoding = options.encoding or detect_encoding(f)
                delimiter = options.delimiter or detect_delimiter_in_file(f, encoding)
                print(f"  encoding={encoding} delimiter={delimiter!r}")
                _print_table(read_delimited_table(f, delimiter, encoding, options.has_headers))
            elif file_type is FileType.JSON_DOCUMENT:
                print(f"  records={len(read_json_document(f))}")
            else:
                for table in read_workbook(f).values():
                    _print_table(table)
        except ImportFileError as e:
            print(f"  read_error: {e}")
    return 0


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an empty list from tests must not pull in pytest's own argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")

    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    options = _options_from_args(cfg.options, args)

    if not args.paths:
        directory = Path(cfg.source_directory)
        if not directory.exists():
            logger.error(f"directory not found: {directory}")
            return EXIT_FATAL
        logger.info(f"Processing files from: {directory}")

    if args.inspect_data:
        if args.paths:
            return _inspect_data(list(args.paths), options)
        return _inspect_data(scan_import_files(Path(cfg.source_directory)), options)

    error_log = ErrorLogBuffer(cfg.error_log_dir)
    try:
        if args.paths:
            result = process_files(args.paths, options, error_log)
        else:
            result = process_all(ImportConfig(cfg.source_directory, options, cfg.error_log_dir), error_log)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")

    summary_line = render_summary_line(result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
