from __future__ import annotations
import asyncio
import threading
from pathlib import Path

from invoice_import import import_file, import_file_async
from invoice_import.services import pipeline


def test_cancel_before_start(multi_invoice_csv: Path):
    event = threading.Event()
    event.set()
    result = import_file(multi_invoice_csv, cancel_event=event)
    assert result.cancelled
    assert result.success_records == 0
    assert result.aggregates == ()


def test_cancel_between_rows(multi_invoice_csv: Path, monkeypatch):
    event = threading.Event()
    real_extract_line = pipeline.extract_line

    def extract_then_cancel(row, row_number):
        line = real_extract_line(row, row_number)
        event.set()
        return line

    monkeypatch.setattr(pipeline, "extract_line", extract_then_cancel)
    result = import_file(multi_invoice_csv, cancel_event=event)
    assert result.cancelled
    assert result.success_records == 1
    [inv] = result.aggregates
    assert len(inv.lines) == 1


def test_unset_event_runs_to_completion(multi_invoice_csv: Path):
    result = import_file(multi_invoice_csv, cancel_event=threading.Event())
    assert not result.cancelled
    assert result.success_records == 3


def test_async_import_matches_sync(multi_invoice_csv: Path):
    result = asyncio.run(import_file_async(multi_invoice_csv))
    assert result == import_file(multi_invoice_csv)
