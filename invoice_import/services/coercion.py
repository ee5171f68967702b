from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from babel.numbers import NumberFormatError, parse_decimal
from dateutil import parser as date_parser

"""Field coercion: raw cell text -> typed values.

Every coercion returns None for blank or unparsable input; callers apply the
field's default. Amounts are parsed with the Indonesian locale first and the
invariant ``Decimal`` grammar second.

Known limitation: both ',' and '.' are stripped as grouping separators before
parsing, so a fractional part is folded into the integer ("1.5" -> 15).
"""

__all__ = [
    "CURRENCY_TOKENS",
    "DATE_FORMATS",
    "NUMBER_LOCALE",
    "to_date",
    "to_decimal",
    "to_int",
    "to_str",
]

NUMBER_LOCALE = "id_ID"
CURRENCY_TOKENS: tuple[str, ...] = ("Rp", "IDR", "$")
_GROUPING = (",", ".")

# dd/MM/yyyy, MM/dd/yyyy, yyyy-MM-dd, dd-MM-yyyy, then the same with a time
DATE_FORMATS: tuple[str, ...] = (
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%Y-%m-%d",
    "%d-%m-%Y",
    "%d/%m/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%d-%m-%Y %H:%M:%S",
)

# strptime accepts single-digit fields; the exact formats require them padded
_EXACT_DATE = re.compile(r"^(\d{2}[/-]\d{2}[/-]\d{4}|\d{4}-\d{2}-\d{2})( \d{2}:\d{2}:\d{2})?$")

_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def to_str(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def to_int(value: str | None) -> int | None:
    text = to_str(value)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def to_decimal(value: str | None) -> Decimal | None:
    text = to_str(value)
    if text is None:
        return None
    for token in CURRENCY_TOKENS + _GROUPING:
        text = text.replace(token, "")
    text = text.strip()
    if not text:
        return None

    try:
        result = parse_decimal(text, locale=NUMBER_LOCALE)
    except NumberFormatError:
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
    # both parsers accept "NaN" and "Infinity"
    return result if result.is_finite() else None


def to_date(value: str | None) -> date | None:
    text = to_str(value)
    if text is None:
        return None

    if _EXACT_DATE.match(text):
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue

    # dateutil fills missing fields from ``default``; a partial date differs
    # between the two fills and is rejected
    try:
        first, second = (
            date_parser.parse(text, dayfirst=True, default=fill).date() for fill in _FILL_DEFAULTS
        )
    except (ValueError, OverflowError):
        return None
    return first if first == second else None
