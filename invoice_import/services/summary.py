from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering for the CLI."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small values
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line.

    Format:
    SUMMARY files={total}/{total} success={success} failed={failed}
    invoices={invoices} records={records} errors={failed_records} elapsed_sec={elapsed}

    >>> from datetime import datetime, timezone
    >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> r = ProcessingResult(
    ...     success_files=1, failed_files=0, total_invoices=3, total_records=10,
    ...     failed_records=0, start_time=t, end_time=t, elapsed_seconds=2.0,
    ... )
    >>> render_summary_line(r)
    'SUMMARY files=1/1 success=1 failed=0 invoices=3 records=10 errors=0 elapsed_sec=2'
    """
    total = result.total_files
    return (
        f"SUMMARY files={total}/{total} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"invoices={result.total_invoices} "
        f"records={result.total_records} "
        f"errors={result.failed_records} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
