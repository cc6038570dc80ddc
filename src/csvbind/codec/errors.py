"""csvbind exception hierarchy."""

from __future__ import annotations


class CsvBindError(Exception):
    """Base exception for all csvbind errors."""


class NotFoundError(CsvBindError, FileNotFoundError):
    """CSV file to import does not exist."""

    def __init__(self, path) -> None:
        self.path = path
        super().__init__(f"CSV file not found: {path}")


class FormatError(CsvBindError, ValueError):
    """Document is malformed (quoted field never closed)."""


class ConversionError(CsvBindError, ValueError):
    """A cell could not be bound to its field."""

    def __init__(self, message: str, *, row: int | None = None, column: str | None = None) -> None:
        self.row = row
        self.column = column
        where = []
        if row is not None:
            where.append(f"row {row}")
        if column is not None:
            where.append(f"column {column!r}")
        prefix = f"{', '.join(where)}: " if where else ""
        super().__init__(f"{prefix}{message}")
