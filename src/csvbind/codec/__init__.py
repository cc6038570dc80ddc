from .errors import CsvBindError, NotFoundError, FormatError, ConversionError
from .types import Column, Converter, FieldAccessor, FunctionConverter
from .scalars import BoolConverter, DateConverter, DateTimeConverter, register_decoder
from .splitter import iter_logical_lines, split_fields
from .resolver import compile_path, read_path, write_path
from .table import BindingTable
from .codec import CsvCodec
from .mapping import build_codec, load_codec

__all__ = [
    "CsvBindError",
    "NotFoundError",
    "FormatError",
    "ConversionError",
    "Column",
    "Converter",
    "FieldAccessor",
    "FunctionConverter",
    "BoolConverter",
    "DateConverter",
    "DateTimeConverter",
    "register_decoder",
    "iter_logical_lines",
    "split_fields",
    "compile_path",
    "read_path",
    "write_path",
    "BindingTable",
    "CsvCodec",
    "build_codec",
    "load_codec",
]
