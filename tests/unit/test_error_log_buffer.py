from __future__ import annotations
import json
import re
from pathlib import Path

from invoice_import.logging.error_log import ErrorLogBuffer
from invoice_import.models.error_record import ImportErrorRecord
from invoice_import.models.import_result import ImportAccumulator


def test_flush_empty_buffer_writes_nothing(temp_workdir: Path):
    buf = ErrorLogBuffer()
    assert buf.flush() is None
    assert list((temp_workdir / "logs").iterdir()) == []


def test_add_result_and_flush(temp_workdir: Path):
    acc = ImportAccumulator("a.csv")
    acc.add_error(2, "invoice_number", "Invoice number is required")
    acc.add_warning(3, "invoice_number", "dup", value="INV-1")
    buf = ErrorLogBuffer()
    buf.add_result(acc.build())
    assert len(buf) == 2
    path = buf.flush()
    assert path is not None and path.exists()
    assert re.fullmatch(r"errors-\d{8}-\d{6}\.log", path.name)
    lines = [json.loads(raw) for raw in path.read_text(encoding="utf-8").splitlines()]
    assert [obj["severity"] for obj in lines] == ["error", "warning"]
    assert all(obj["file"] == "a.csv" for obj in lines)
    assert len(buf) == 0


def test_multiple_flushes_append_to_same_file(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append("f.csv", ImportErrorRecord(1, "invoice_number", "first"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append("f.csv", ImportErrorRecord(2, "invoice_number", "second"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1


def test_logs_dir_created(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "nested" / "logs")
    buf.append("f.csv", ImportErrorRecord(-1, "File", "Import failed: x"))
    path = buf.flush()
    assert path.parent == tmp_path / "nested" / "logs"
    assert json.loads(path.read_text(encoding="utf-8"))["row"] == -1
