from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Generic, Iterable, List, Optional, Sequence, Type, TypeVar, Union
import logging

from .errors import ConversionError, NotFoundError
from .resolver import compile_path, read_path, write_path
from .scalars import encode_scalar
from .splitter import DEFAULT_DELIMITER, iter_logical_lines, quote_field, split_fields
from .table import BindingTable
from .types import Column, Converter, PathLike

T = TypeVar("T")

DEFAULT_ENCODING = "utf-8"
_BOM = "\ufeff"


class CsvCodec(Generic[T]):
    """
    Maps records of ``record_type`` to and from delimited text through a
    binding table of column -> field path rules.

    Import understands quoted fields (``""`` escapes, embedded delimiters and
    newlines). Export writes values verbatim unless ``quote_on_write`` is set.
    """

    def __init__(
        self,
        record_type: Type[T],
        *,
        delimiter: str = DEFAULT_DELIMITER,
        contain_header: bool = False,
        quote_on_write: bool = False,
    ) -> None:
        self.record_type = record_type
        self.delimiter = delimiter
        self.contain_header = contain_header
        self.quote_on_write = quote_on_write
        self.table = BindingTable()
        self.log = logging.getLogger("csvbind.codec")

    # ------------------------------------------------------------------
    # Binding table
    # ------------------------------------------------------------------
    def add(self, name: str, path: PathLike, converter: Optional[Converter] = None) -> None:
        self.table.add(name, path, converter)

    def add_constant(self, name: str, constant: str, path: PathLike) -> None:
        self.table.add_constant(name, constant, path)

    @property
    def columns(self) -> List[Column]:
        return list(self.table)

    def _delimiter(self) -> str:
        return self.delimiter or DEFAULT_DELIMITER

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def _cell(self, text: str, delimiter: str) -> str:
        return quote_field(text, delimiter) if self.quote_on_write else text

    def _export_value(self, record: T, column: Column) -> str:
        if column.is_constant:
            return column.constant or ""
        value = read_path(record, compile_path(self.record_type, column.path))
        if column.converter is not None:
            return column.converter.encode(value)
        return encode_scalar(value)

    def export_lines(self, records: Iterable[T]) -> List[str]:
        delimiter = self._delimiter()
        columns = self.columns
        lines: List[str] = []
        if self.contain_header:
            lines.append(delimiter.join(self._cell(c.name, delimiter) for c in columns))
        for record in records:
            values = [self._cell(self._export_value(record, c), delimiter) for c in columns]
            lines.append(delimiter.join(values))
        return lines

    def export_text(self, records: Iterable[T]) -> str:
        """Records as CSV text, one line per record, each newline-terminated."""
        return "".join(line + "\n" for line in self.export_lines(records))

    def write(self, records: Iterable[T], stream: IO[str]) -> None:
        for line in self.export_lines(records):
            stream.write(line + "\n")

    def export(self, records: Iterable[T], file_path: Union[str, Path], encoding: Optional[str] = None) -> None:
        path = Path(file_path)
        lines = self.export_lines(records)
        with path.open("w", encoding=encoding or DEFAULT_ENCODING, newline="") as f:
            for line in lines:
                f.write(line + "\n")
        n = len(lines) - (1 if self.contain_header else 0)
        self.log.debug("Exported %d records to %s", n, path)

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------
    def import_(self, file_path: Union[str, Path], encoding: Optional[str] = None) -> List[T]:
        path = Path(file_path)
        if not path.is_file():
            raise NotFoundError(path)
        with path.open("r", encoding=encoding or DEFAULT_ENCODING, newline="") as f:
            records = self.read(f)
        self.log.debug("Imported %d records from %s", len(records), path)
        return records

    def read(self, stream: IO[Any], encoding: Optional[str] = None) -> List[T]:
        """Read a whole text or binary stream and parse it."""
        data = stream.read()
        if isinstance(data, bytes):
            data = data.decode(encoding or DEFAULT_ENCODING)
        if data.startswith(_BOM):
            data = data[1:]
        return self.parse(data)

    def parse(self, text: str) -> List[T]:
        delimiter = self._delimiter()
        headers: Optional[List[str]] = None
        rows: List[List[str]] = []
        for line in iter_logical_lines(text.strip("\r\n"), delimiter):
            fields = split_fields(line, delimiter)
            if self.contain_header and headers is None:
                headers = fields
            else:
                rows.append(fields)

        if headers is None:
            headers = self.table.names()
        return [self._build(row, headers, n) for n, row in enumerate(rows, start=1)]

    def _build(self, row: Sequence[str], headers: Sequence[str], rownum: int) -> T:
        try:
            record = self.record_type()
        except (TypeError, ValueError) as e:
            name = getattr(self.record_type, "__name__", repr(self.record_type))
            raise ConversionError(f"cannot create record {name}: {e}", row=rownum) from e
        for i, header in enumerate(headers):
            column = self.table.find(header)
            if column is None:
                continue
            if column.is_constant:
                value = column.constant
            else:
                value = row[i] if i < len(row) else None
            if not value:
                continue
            try:
                accessors = compile_path(self.record_type, column.path)
                write_path(record, accessors, value, column.converter)
            except ConversionError as e:
                raise ConversionError(f"{e} (path '{column.dotted}')", row=rownum, column=column.name) from e
        return record
