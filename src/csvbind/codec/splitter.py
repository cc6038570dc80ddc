from __future__ import annotations

from functools import lru_cache
from typing import Iterator, List
import re

from .errors import FormatError

DEFAULT_DELIMITER = ","

# physical line, newline kept
_LINE_RE = re.compile(r"^.*(?:\n|$)", re.MULTILINE)


def _resolve_delimiter(delimiter: str | None) -> str:
    return delimiter or DEFAULT_DELIMITER


@lru_cache(maxsize=32)
def _field_regex(delimiter: str) -> "re.Pattern[str]":
    d = re.escape(delimiter)
    if len(delimiter) == 1:
        bare = f"[^{d}]*"
    else:
        bare = f"(?:(?!{d})[\\s\\S])*"
    # padding must never swallow a whitespace delimiter (tab-separated files)
    ws_delim = "".join(re.escape(c) for c in delimiter if c.isspace())
    pad = f"[^\\S{ws_delim}]*" if ws_delim else "\\s*"
    return re.compile(f'{pad}("(?:[^"]|"")*"|{bare}){pad}{d}')


def has_open_quote(text: str) -> bool:
    """True when ``text`` holds an odd number of double quotes."""
    return text.count('"') % 2 == 1


def iter_logical_lines(text: str, delimiter: str | None = DEFAULT_DELIMITER) -> Iterator[str]:
    """
    Yield logical CSV lines from a whole document.

    Physical lines are re-joined while a quoted field is still open, so a
    logical line may contain embedded newlines. Each yielded line has its
    trailing CR/LF removed and ends with one ``delimiter`` as a sentinel for
    :func:`split_fields`.

    Raises FormatError when the document ends inside a quoted field.

    A trailing newline produces one more, empty, logical line; strip CR/LF
    from the ends of ``text`` first (as CsvCodec.parse does) to avoid it.
    """
    delimiter = _resolve_delimiter(delimiter)
    matches = _LINE_RE.finditer(text)
    for m in matches:
        line = m.group(0)
        while has_open_quote(line):
            nxt = next(matches, None)
            if nxt is None:
                raise FormatError("Malformed CSV: quoted field is not closed before end of document")
            line += nxt.group(0)
        yield line.rstrip("\r\n") + delimiter


def split_fields(line: str, delimiter: str | None = DEFAULT_DELIMITER) -> List[str]:
    """Split one sentinel-terminated logical line into unescaped field values."""
    fields: List[str] = []
    for m in _field_regex(_resolve_delimiter(delimiter)).finditer(line):
        field = m.group(1).strip()
        if len(field) >= 2 and field.startswith('"') and field.endswith('"'):
            field = field[1:-1].replace('""', '"')
        fields.append(field)
    return fields


def quote_field(value: str, delimiter: str | None = DEFAULT_DELIMITER) -> str:
    """Quote ``value`` when it would not survive :func:`split_fields` unquoted."""
    delimiter = _resolve_delimiter(delimiter)
    special = delimiter in value or '"' in value or "\r" in value or "\n" in value
    if special or value != value.strip():
        return '"' + value.replace('"', '""') + '"'
    return value
