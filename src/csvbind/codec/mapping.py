from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import importlib

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from .codec import CsvCodec
from .scalars import BoolConverter, DateConverter, DateTimeConverter
from .splitter import DEFAULT_DELIMITER
from .types import Converter


class ConverterDoc(BaseModel):
    kind: str                                   # date|datetime|bool
    format: Optional[str] = None
    true_text: str = "true"
    false_text: str = "false"


class ColumnDoc(BaseModel):
    name: str
    path: Union[str, List[str]]
    converter: Optional[ConverterDoc] = None
    constant: Optional[str] = None

    @model_validator(mode="after")
    def _one_of_converter_constant(self):
        if self.converter is not None and self.constant is not None:
            raise ValueError(f"column {self.name!r}: 'converter' and 'constant' are mutually exclusive")
        return self


class MappingDoc(BaseModel):
    version: str = "1"
    record: Optional[str] = None                # "package.module:ClassName"
    delimiter: str = DEFAULT_DELIMITER
    header: bool = False
    quote_on_write: bool = False
    columns: List[ColumnDoc] = Field(default_factory=list)


def build_converter(doc: ConverterDoc) -> Converter:
    if doc.kind == "date":
        return DateConverter(doc.format) if doc.format else DateConverter()
    if doc.kind == "datetime":
        return DateTimeConverter(doc.format) if doc.format else DateTimeConverter()
    if doc.kind == "bool":
        return BoolConverter(doc.true_text, doc.false_text)
    raise ValueError(f"Unknown converter kind: {doc.kind!r}")


def import_record_type(ref: str) -> type:
    """Load ``"module:Class"`` (or ``"module.Class"``)."""
    if ":" in ref:
        mod_name, _, attr = ref.partition(":")
    else:
        mod_name, _, attr = ref.rpartition(".")
    if not mod_name or not attr:
        raise ValueError(f"record must look like 'module:Class', got {ref!r}")
    module = importlib.import_module(mod_name)
    try:
        obj = module
        for part in attr.split("."):
            obj = getattr(obj, part)
    except AttributeError as e:
        raise ValueError(f"{ref!r}: {e}") from e
    if not isinstance(obj, type):
        raise ValueError(f"{ref!r} is not a class")
    return obj


def build_codec(spec: Dict[str, Any], record_type: Optional[type] = None) -> CsvCodec:
    """
    Build a configured CsvCodec from a mapping document.

    ``record_type`` overrides the document's ``record`` entry; one of the two
    must be given.
    """
    try:
        doc = MappingDoc.model_validate(spec or {})
    except ValidationError as e:
        raise ValueError(f"Invalid mapping: {e}") from e

    if record_type is None:
        if not doc.record:
            raise ValueError("Mapping has no 'record' entry and no record_type was given")
        record_type = import_record_type(doc.record)

    codec = CsvCodec(
        record_type,
        delimiter=doc.delimiter,
        contain_header=doc.header,
        quote_on_write=doc.quote_on_write,
    )
    for col in doc.columns:
        if col.constant is not None:
            codec.add_constant(col.name, col.constant, col.path)
        elif col.converter is not None:
            codec.add(col.name, col.path, build_converter(col.converter))
        else:
            codec.add(col.name, col.path)
    return codec


def load_codec(path: Union[str, Path], record_type: Optional[type] = None) -> CsvCodec:
    path = Path(path).expanduser().resolve()
    if not path.is_file():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as f:
        spec = yaml.safe_load(f)
    return build_codec(spec, record_type=record_type)
