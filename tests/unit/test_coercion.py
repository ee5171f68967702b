from __future__ import annotations
from datetime import date
from decimal import Decimal
import pytest

from invoice_import.services.coercion import to_date, to_decimal, to_int, to_str


def test_to_str():
    assert to_str("  PT A ") == "PT A"
    assert to_str("   ") is None
    assert to_str(None) is None


@pytest.mark.parametrize("raw,expected", [("12", 12), (" 3 ", 3), ("-2", -2), ("1.5", None), ("abc", None), ("", None), (None, None)])
def test_to_int(raw, expected):
    assert to_int(raw) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1500000", Decimal("1500000")),
        ("Rp 1.500.000", Decimal("1500000")),
        ("IDR 250,000", Decimal("250000")),
        ("$100", Decimal("100")),
        ("-100", Decimal("-100")),
        # grouping separators are stripped, fractions fold into the integer
        ("1.5", Decimal("15")),
    ],
)
def test_to_decimal(raw, expected):
    assert to_decimal(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", "   ", "Rp", None])
def test_to_decimal_unparsable(raw):
    assert to_decimal(raw) is None


@pytest.mark.parametrize("raw", ["NaN", "nan", "Infinity", "-inf"])
def test_to_decimal_rejects_non_finite(raw):
    assert to_decimal(raw) is None


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("15/01/2024", date(2024, 1, 15)),
        ("05/03/2024", date(2024, 3, 5)),  # day first
        ("01/15/2024", date(2024, 1, 15)),  # falls through to month first
        ("2024-01-20", date(2024, 1, 20)),
        ("20-01-2024", date(2024, 1, 20)),
        ("2024-01-20 10:30:00", date(2024, 1, 20)),
        ("15/01/2024 08:00:00", date(2024, 1, 15)),
        ("15 January 2024", date(2024, 1, 15)),
    ],
)
def test_to_date(raw, expected):
    assert to_date(raw) == expected


@pytest.mark.parametrize("raw", ["not a date", "", None])
def test_to_date_unparsable(raw):
    assert to_date(raw) is None


@pytest.mark.parametrize("raw", ["5", "December", "2024", "January 2024"])
def test_to_date_rejects_partial_dates(raw):
    assert to_date(raw) is None


def test_documented_examples():
    assert to_date("31/12/2024") == date(2024, 12, 31)
    assert to_date("2024-12-31") == date(2024, 12, 31)
    assert to_date("not-a-date") is None
    assert to_decimal("Rp 15.000.000") == Decimal("15000000")
    assert to_decimal("1,234") == Decimal("1234")
