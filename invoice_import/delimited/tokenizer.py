from __future__ import annotations

"""Quote-aware line tokenizer for delimited text.

Two states, one pass, no backtracking:
- a double quote toggles the quoted state
- two adjacent quotes inside a quoted field produce one literal quote
- the delimiter separates fields only outside quotes
"""

__all__ = [
    "QUOTE",
    "tokenize_line",
]

QUOTE = '"'


def tokenize_line(line: str, delimiter: str) -> list[str]:
    """Split one line into fields.

    >>> tokenize_line('a,"b,c",d', ",")
    ['a', 'b,c', 'd']
    >>> tokenize_line('a,"b""c",d', ",")
    ['a', 'b"c', 'd']
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)
    while i < n:
        c = line[i]
        if c == QUOTE:
            if in_quotes and i + 1 < n and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif c == delimiter and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(c)
        i += 1
    fields.append("".join(current))
    return fields
