from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Optional, Sequence, Tuple, Union, get_args, get_origin, get_type_hints
import types as _pytypes

from .errors import ConversionError
from .scalars import decode_scalar
from .types import Converter, FieldAccessor

_NONE_TYPE = type(None)


def _unwrap_optional(tp: Any) -> Any:
    """Optional[X] / X | None -> X; anything else unchanged."""
    origin = get_origin(tp)
    if origin is Union or (hasattr(_pytypes, "UnionType") and origin is _pytypes.UnionType):
        args = [a for a in get_args(tp) if a is not _NONE_TYPE]
        if len(args) == 1:
            return args[0]
    return tp


@lru_cache(maxsize=None)
def _field_types(owner: type) -> Dict[str, Any]:
    model_fields = getattr(owner, "model_fields", None)
    if isinstance(model_fields, dict):
        # pydantic models: annotations already resolved by pydantic
        return {k: _unwrap_optional(f.annotation) for k, f in model_fields.items()}
    try:
        hints = get_type_hints(owner)
    except Exception as e:
        raise ConversionError(f"cannot read field annotations of {owner.__name__}: {e}") from e
    return {k: _unwrap_optional(v) for k, v in hints.items()}


@lru_cache(maxsize=None)
def compile_path(record_type: type, path: Tuple[str, ...]) -> Tuple[FieldAccessor, ...]:
    """
    Resolve a field path against ``record_type`` into typed accessors.

    Each step's declared type becomes the owner of the next step, so nested
    paths are checked against the annotations all the way down. Results are
    cached per (record_type, path).
    """
    accessors = []
    owner: Any = record_type
    for i, name in enumerate(path):
        if not isinstance(owner, type):
            where = ".".join(path[:i]) or "<record>"
            raise ConversionError(f"'{where}' is not a record type; cannot resolve '{name}'")
        fields = _field_types(owner)
        if name not in fields:
            raise ConversionError(f"{owner.__name__} has no field '{name}' (path '{'.'.join(path)}')")
        acc = FieldAccessor(owner=owner, name=name, type=fields[name])
        accessors.append(acc)
        owner = acc.type
    return tuple(accessors)


def read_path(record: Any, accessors: Sequence[FieldAccessor]) -> Optional[Any]:
    """Walk the path; a missing intermediate yields None."""
    cur = record
    for acc in accessors:
        if cur is None:
            return None
        cur = acc.get(cur)
    return cur


def _materialize(acc: FieldAccessor, parent: Any) -> Any:
    cur = acc.get(parent)
    if cur is not None:
        return cur
    try:
        cur = acc.type()
    except (TypeError, ValueError) as e:
        raise ConversionError(
            f"cannot create {acc.owner.__name__}.{acc.name} of type {acc.type!r}: {e}"
        ) from e
    acc.set(parent, cur)
    return cur


def write_path(
    record: Any,
    accessors: Sequence[FieldAccessor],
    text: str,
    converter: Optional[Converter] = None,
) -> None:
    """
    Store ``text`` at the end of the path, creating intermediates on the way.

    The converter's ``decode`` wins over the default scalar conversion.
    """
    cur = record
    for acc in accessors[:-1]:
        cur = _materialize(acc, cur)

    leaf = accessors[-1]
    if converter is not None:
        try:
            value = converter.decode(text)
        except (ValueError, TypeError) as e:
            raise ConversionError(f"converter failed on {text!r}: {e}") from e
    else:
        value = decode_scalar(leaf.type, text)
    leaf.set(cur, value)
