"""
Quoted, comma-delimited text tokenizer.

The remote export wraps multi-line cells in quotes and a range window may
end mid-field; both are accepted without raising.
"""

from __future__ import annotations

from typing import Iterator, List

QUOTE = '"'
SEPARATOR = ","


def iter_rows(text: str) -> Iterator[List[str]]:
    """
    Yield rows of fields from delimited text.

    - A quote toggles the quoted state; inside a quoted field a doubled quote
      is one literal quote.
    - Separators and line terminators (LF, CRLF, CR) only split outside quotes;
      inside quotes they are kept verbatim.
    - Blank lines produce no row. An unterminated quoted field at end of input
      is flushed as-is.
    """
    row: List[str] = []
    buf: List[str] = []
    in_quotes = False
    row_open = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if ch == QUOTE:
            if in_quotes and i + 1 < n and text[i + 1] == QUOTE:
                buf.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
            row_open = True
        elif in_quotes:
            buf.append(ch)
        elif ch == SEPARATOR:
            row.append("".join(buf))
            buf = []
            row_open = True
        elif ch == "\n" or ch == "\r":
            if ch == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
            if row_open:
                row.append("".join(buf))
                yield row
            row, buf, row_open = [], [], False
        else:
            buf.append(ch)
            row_open = True
        i += 1

    if row_open:
        row.append("".join(buf))
        yield row


class DelimitedText:
    """Restartable view over delimited text; every iteration rescans from the start."""

    def __init__(self, text: str):
        self.text = text

    def __iter__(self) -> Iterator[List[str]]:
        return iter_rows(self.text)

    def rows(self) -> List[List[str]]:
        return list(self)
