from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict

from .errors import ConversionError

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


def _to_bool(v: str) -> bool:
    s = str(v).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ValueError(f"not a boolean: {v!r}")


def _to_decimal(v: str) -> Decimal:
    try:
        return Decimal(v.strip())
    except InvalidOperation as e:
        raise ValueError(f"not a decimal: {v!r}") from e


# declared field type -> text decoder
DECODERS: Dict[Any, Callable[[str], Any]] = {
    str: str,
    int: lambda v: int(v.strip()),
    float: lambda v: float(v.strip()),
    bool: _to_bool,
    Decimal: _to_decimal,
    date: lambda v: date.fromisoformat(v.strip()),
    datetime: lambda v: datetime.fromisoformat(v.strip()),
    time: lambda v: time.fromisoformat(v.strip()),
    Any: str,
}


def register_decoder(typ: Any, fn: Callable[[str], Any]) -> None:
    """
    Teach the default conversion how to parse another field type.

    DECODERS is module-global: a registration applies to every codec in the
    process, not only the one being configured.
    """
    DECODERS[typ] = fn


def decode_scalar(typ: Any, text: str) -> Any:
    try:
        fn = DECODERS[typ]
    except (KeyError, TypeError):
        raise ConversionError(f"no default conversion for field type {typ!r}") from None
    try:
        return fn(text)
    except (ValueError, TypeError) as e:
        name = getattr(typ, "__name__", repr(typ))
        raise ConversionError(f"cannot convert {text!r} to {name}: {e}") from e


def encode_scalar(value: Any) -> str:
    return "" if value is None else str(value)


# ---------------------------------------------------------------------------
# Stock converters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DateConverter:
    """Fixed-pattern date column, e.g. ``DateConverter("%Y/%m/%d")``."""

    fmt: str = "%Y-%m-%d"

    def encode(self, value: Any) -> str:
        return "" if value is None else value.strftime(self.fmt)

    def decode(self, text: str) -> Any:
        if not text:
            return None
        return datetime.strptime(text.strip(), self.fmt).date()


@dataclass(frozen=True)
class DateTimeConverter:
    fmt: str = "%Y-%m-%d %H:%M:%S"

    def encode(self, value: Any) -> str:
        return "" if value is None else value.strftime(self.fmt)

    def decode(self, text: str) -> Any:
        if not text:
            return None
        return datetime.strptime(text.strip(), self.fmt)


@dataclass(frozen=True)
class BoolConverter:
    true_text: str = "true"
    false_text: str = "false"

    def encode(self, value: Any) -> str:
        if value is None:
            return ""
        return self.true_text if value else self.false_text

    def decode(self, text: str) -> Any:
        s = text.strip()
        if s == self.true_text:
            return True
        if s == self.false_text:
            return False
        raise ValueError(f"expected {self.true_text!r} or {self.false_text!r}, got {text!r}")
