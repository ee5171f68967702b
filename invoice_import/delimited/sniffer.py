from __future__ import annotations

import logging
from collections.abc import Sequence
from itertools import islice
from pathlib import Path

from ..models.import_result import FileType

"""Format sniffing: file type, text encoding and field delimiter.

File type is decided by extension only; unknown extensions are treated as
spreadsheets. Encoding comes from a byte-order mark in the first 4 bytes.
The delimiter is the candidate with the highest count among those that occur
the same non-zero number of times on every sampled line; at least two lines
must be sampled, otherwise the default delimiter is used.
"""

__all__ = [
    "CANDIDATE_DELIMITERS",
    "DEFAULT_DELIMITER",
    "DEFAULT_ENCODING",
    "SAMPLE_LINES",
    "ImportFileError",
    "detect_file_type",
    "detect_encoding",
    "detect_delimiter",
    "detect_delimiter_in_file",
]

logger = logging.getLogger(__name__)

CANDIDATE_DELIMITERS: tuple[str, ...] = (",", ";", "\t", "|")
DEFAULT_DELIMITER = ","
DEFAULT_ENCODING = "utf-8"
SAMPLE_LINES = 5

_EXTENSION_TYPES = {
    ".csv": FileType.DELIMITED_TEXT,
    ".txt": FileType.DELIMITED_TEXT,
    ".xlsx": FileType.SPREADSHEET,
    ".xls": FileType.SPREADSHEET,
    ".json": FileType.JSON_DOCUMENT,
}

# utf-16-le/-be keep a leading U+FEFF on decode; readers strip it
_BOMS: tuple[tuple[bytes, str], ...] = (
    (b"\xef\xbb\xbf", "utf-8-sig"),
    (b"\xff\xfe", "utf-16-le"),
    (b"\xfe\xff", "utf-16-be"),
)


class ImportFileError(Exception):
    """Raised when a source file cannot be opened or parsed at all."""


def detect_file_type(path: Path | str) -> FileType:
    return _EXTENSION_TYPES.get(Path(path).suffix.lower(), FileType.SPREADSHEET)


def detect_encoding(path: Path | str) -> str:
    """Return a codec name based on the byte-order mark, utf-8 when none.

    Raises:
        ImportFileError: file missing or unreadable
    """
    try:
        with open(path, "rb") as f:
            head = f.read(4)
    except OSError as e:
        raise ImportFileError(f"cannot read file: {e}") from e
    for bom, codec in _BOMS:
        if head.startswith(bom):
            return codec
    return DEFAULT_ENCODING


def detect_delimiter(lines: Sequence[str]) -> str:
    """Pick the most frequent delimiter that is consistent across ``lines``.

    Consistency needs at least two sampled lines; a shorter sample gives the
    default delimiter.
    """
    sample = list(lines[:SAMPLE_LINES])
    if len(sample) < 2:
        return DEFAULT_DELIMITER

    best = DEFAULT_DELIMITER
    best_count = 0
    for candidate in CANDIDATE_DELIMITERS:
        counts = [line.count(candidate) for line in sample]
        first = counts[0]
        if first > 0 and all(c == first for c in counts) and first > best_count:
            best, best_count = candidate, first
    return best


def detect_delimiter_in_file(path: Path | str, encoding: str) -> str:
    try:
        with open(path, encoding=encoding, newline="") as f:
            sample = [line.rstrip("\r\n") for line in islice(f, SAMPLE_LINES)]
    except (OSError, UnicodeDecodeError) as e:
        raise ImportFileError(f"cannot read file: {e}") from e
    delimiter = detect_delimiter(sample)
    logger.debug("delimiter %r detected for %s", delimiter, path)
    return delimiter
