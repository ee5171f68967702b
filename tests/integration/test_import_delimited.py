from __future__ import annotations
from datetime import date
from decimal import Decimal
from pathlib import Path

from invoice_import import FileType, ImportOptions, Structure, import_file
from invoice_import.models.error_record import FILE_LEVEL_ROW

"""End-to-end imports of delimited text files."""


def _by_number(result):
    return {a.invoice_number: a for a in result.aggregates}


def test_multi_invoice_csv(multi_invoice_csv: Path):
    result = import_file(multi_invoice_csv)
    assert result.file_type is FileType.DELIMITED_TEXT
    assert result.structure is Structure.MULTI_INVOICE
    assert result.encoding == "utf-8"
    assert result.delimiter == ","
    assert (result.total_records, result.success_records, result.failed_records) == (3, 3, 0)
    assert result.success and result.is_valid

    invoices = _by_number(result)
    assert list(invoices) == ["INV-001", "INV-002"]
    first = invoices["INV-001"]
    assert first.header.company_name == "PT Maju"
    assert first.header.invoice_date == date(2024, 1, 15)
    assert [line.worker_name for line in first.lines] == ["Budi", "Sari"]
    assert (first.subtotal, first.vat_amount, first.total) == (Decimal("600"), Decimal("66"), Decimal("666"))
    second = invoices["INV-002"]
    assert (second.subtotal, second.vat_amount, second.total) == (Decimal("250"), Decimal("28"), Decimal("278"))


def test_semicolon_csv_with_utf8_bom(csv_file):
    f = csv_file(
        "bom.csv",
        ["Invoice Number;Company;TKA Name;Unit Price", "INV-1;PT A;Budi;Rp 1.500.000"],
        encoding="utf-8-sig",
    )
    result = import_file(f)
    assert result.encoding == "utf-8-sig"
    assert result.delimiter == ";"
    [inv] = result.aggregates
    assert inv.invoice_number == "INV-1"
    assert inv.subtotal == Decimal("1500000")
    assert inv.vat_amount == Decimal("165000")


def test_utf16_csv(tmp_path: Path):
    f = tmp_path / "wide.csv"
    text = "\ufeffinvoice_number\tcompany_name\ttka_name\tunit_price\nINV-1\tPT A\tBudi\t100\n"
    f.write_bytes(text.encode("utf-16-le"))
    result = import_file(f)
    assert result.encoding == "utf-16-le"
    assert result.delimiter == "\t"
    assert [a.invoice_number for a in result.aggregates] == ["INV-1"]


def test_row_error_does_not_stop_import(csv_file):
    f = csv_file(
        "partial.csv",
        [
            "invoice_number,company_name,tka_name,unit_price",
            "INV-1,PT A,Budi,100",
            "INV-1,PT A,Sari,100",
            "INV-2,PT B,Andi,100",
            ",PT C,Dewi,100",
            "INV-3,PT C,Eka,100",
        ],
    )
    result = import_file(f)
    assert (result.total_records, result.success_records, result.failed_records) == (5, 4, 1)
    assert result.success_records + result.failed_records == result.total_records
    [error] = result.errors
    assert (error.row, error.field, error.message) == (4, "invoice_number", "Invoice number is required")
    assert [a.invoice_number for a in result.aggregates] == ["INV-1", "INV-2", "INV-3"]
    assert not result.success


def test_grouping_is_case_sensitive(csv_file):
    f = csv_file(
        "case.csv",
        ["invoice_number,company_name,tka_name,unit_price", "INV-1,PT A,Budi,100", "inv-1,PT A,Sari,100"],
    )
    assert [a.invoice_number for a in import_file(f).aggregates] == ["INV-1", "inv-1"]


def test_header_only_rows_create_invoice_without_lines(csv_file):
    f = csv_file("h.csv", ["invoice_number,company_name,invoice_date", "INV-1,PT A,2024-01-15"])
    result = import_file(f)
    [inv] = result.aggregates
    assert inv.lines == []
    assert result.success
    assert result.validation_errors == ("Invoice INV-1 must have at least one line item",)
    assert not result.is_valid


def test_single_invoice_csv(csv_file):
    f = csv_file(
        "single.csv",
        [
            "No,Name,Item,Description,Quantity,Price,Total",
            "1,Budi,Welding,Pipe welding,2,100,200",
            "2,Sari,Fitting,Pipe fitting,1,300,",
        ],
    )
    options = ImportOptions(default_invoice_number="INV-S1", default_company_name="PT Single")
    result = import_file(f, options)
    assert result.structure is Structure.SINGLE_INVOICE
    assert (result.total_records, result.success_records) == (2, 2)
    [inv] = result.aggregates
    assert inv.invoice_number == "INV-S1"
    assert inv.header.company_name == "PT Single"
    assert [(line.job_name, line.line_total) for line in inv.lines] == [
        ("Welding", Decimal("200")),
        ("Fitting", Decimal("300")),
    ]
    assert inv.total == Decimal("555")
    assert result.is_valid


def test_single_invoice_synthetic_number(csv_file):
    f = csv_file("single.csv", ["No,Name,Item,Quantity,Price", "1,Budi,Welding,1,100"])
    [inv] = import_file(f).aggregates
    assert inv.invoice_number == f"IMP-{date.today():%Y%m%d}-001"
    assert inv.header.company_name == "Imported Company"


def test_single_invoice_without_lines_has_no_aggregate(csv_file):
    f = csv_file("single.csv", ["No,Quantity,Price,Total", "1,2,100,200"])
    result = import_file(f)
    assert result.structure is Structure.SINGLE_INVOICE
    assert result.aggregates == ()
    assert result.success_records == 1


def test_no_headers_option(csv_file):
    f = csv_file("nohdr.csv", ["INV-1,PT A,Budi", "INV-2,PT B,Sari"])
    result = import_file(f, ImportOptions(has_headers=False))
    assert result.total_records == 2
    # synthetic column names resolve no invoice number
    assert result.failed_records == 2


def test_default_vat_option(multi_invoice_csv: Path):
    result = import_file(multi_invoice_csv, ImportOptions(default_vat_percentage=Decimal("10")))
    assert result.aggregates[0].vat_amount == Decimal("60")


def test_import_is_repeatable(multi_invoice_csv: Path):
    assert import_file(multi_invoice_csv) == import_file(multi_invoice_csv)


def test_missing_file_is_file_level_error(tmp_path: Path):
    result = import_file(tmp_path / "missing.csv")
    assert result.total_records == 0
    [error] = result.errors
    assert error.row == FILE_LEVEL_ROW
    assert error.field == "File"
    assert error.message.startswith("Import failed: File not found")
    assert result.has_file_error and not result.success


def test_undecodable_file_is_file_level_error(tmp_path: Path):
    f = tmp_path / "bad.csv"
    f.write_bytes(b"invoice_number,company\nINV-1,\xff\xfe\n")
    result = import_file(f, ImportOptions(encoding="utf-8"))
    assert result.has_file_error
    assert result.aggregates == ()


def test_options_carried_on_result(multi_invoice_csv: Path):
    result = import_file(multi_invoice_csv, ImportOptions(validate_only=True, create_missing_entities=False))
    assert result.validate_only is True
    assert result.create_missing_entities is False


def test_ten_rows_with_missing_number_on_row_four(csv_file):
    rows = [f"INV-{i % 3},PT {i % 3},Worker {i},100" for i in range(1, 11)]
    rows[3] = ",PT X,Worker 4,100"
    f = csv_file("ten.csv", ["invoice_number,company_name,tka_name,unit_price", *rows])
    result = import_file(f)
    assert result.total_records == 10
    [error] = result.errors
    assert error.row == 4
    assert sum(len(a.lines) for a in result.aggregates) == 9
    assert result.is_valid


def test_non_finite_price_is_treated_as_missing(csv_file):
    f = csv_file(
        "nan.csv",
        [
            "invoice_number,company_name,tka_name,unit_price",
            "INV-1,PT A,Budi,NaN",
            "INV-2,PT B,Sari,100",
            "INV-3,PT C,Andi,Infinity",
        ],
    )
    result = import_file(f)
    assert (result.total_records, result.success_records, result.failed_records) == (3, 3, 0)
    assert result.success
    invoices = _by_number(result)
    assert invoices["INV-1"].lines[0].unit_price == Decimal("0")
    assert invoices["INV-2"].total == Decimal("111")
    assert invoices["INV-3"].subtotal == Decimal("0")
    assert "Unit price must be greater than 0 for invoice INV-1" in result.validation_errors
    assert "Unit price must be greater than 0 for invoice INV-3" in result.validation_errors
    assert not result.is_valid
