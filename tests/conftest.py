# Shared pytest fixtures
from __future__ import annotations
import logging
import tempfile
from pathlib import Path
import pandas as pd
import pytest

from invoice_import.logging.init import LOGGER_NAME, reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
error_log_dir: logs
options:
  default_vat_percentage: 11
  skip_duplicates: false
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def clean_logging():
    reset_logging()
    yield
    reset_logging()
    # drop the handler bound to this test's captured stdout
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def _write_csv(path: Path, lines: list[str], encoding: str = "utf-8") -> Path:
    path.write_text("\n".join(lines) + "\n", encoding=encoding)
    return path


def _make_excel_file(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Create a real workbook; the first row of every sheet is its header."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet_name, rows in sheets.items():
            df = pd.DataFrame(rows)
            df.to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


MULTI_INVOICE_CSV = [
    "Invoice Number,Company Name,Invoice Date,TKA Name,Job Name,Quantity,Unit Price",
    "INV-001,PT Maju,15/01/2024,Budi,Welder,2,100",
    "INV-001,PT Maju,15/01/2024,Sari,Fitter,1,400",
    "INV-002,PT Jaya,2024-01-20,Andi,Driver,1,250",
]


@pytest.fixture()
def multi_invoice_csv(tmp_path: Path) -> Path:
    return _write_csv(tmp_path / "invoices.csv", MULTI_INVOICE_CSV)


@pytest.fixture()
def csv_file(tmp_path: Path):
    """Factory: csv_file(name, lines, encoding='utf-8') -> Path under tmp_path."""
    def _factory(name: str, lines: list[str], encoding: str = "utf-8") -> Path:
        return _write_csv(tmp_path / name, lines, encoding)
    return _factory


@pytest.fixture()
def excel_file(tmp_path: Path):
    """Factory: excel_file(name, {sheet: rows}) -> workbook Path under tmp_path."""
    def _factory(name: str, sheets: dict[str, list[list[object]]]) -> Path:
        return _make_excel_file(tmp_path / name, sheets)
    return _factory
