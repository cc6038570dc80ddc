from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable


PathLike = Union[str, Sequence[str]]


@runtime_checkable
class Converter(Protocol):
    """Value translation for one column, replacing default scalar conversion."""

    def encode(self, value: Any) -> str:
        ...

    def decode(self, text: str) -> Any:
        ...


def normalize_path(path: PathLike) -> Tuple[str, ...]:
    # "a.b.c" or ["a", "b", "c"]
    if isinstance(path, str):
        parts = tuple(path.split("."))
    else:
        parts = tuple(path)
    if not parts or any(not p for p in parts):
        raise ValueError(f"Invalid field path: {path!r}")
    return parts


@dataclass(frozen=True)
class Column:
    name: str
    path: Tuple[str, ...]              # outermost first, e.g. ("composite1", "nest1", "text1")
    converter: Optional[Converter] = None
    constant: Optional[str] = None
    is_constant: bool = False

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


@dataclass(frozen=True)
class FieldAccessor:
    """One step of a compiled field path: where the slot lives and what it holds."""

    owner: type
    name: str
    type: Any                          # declared type, Optional[...] unwrapped

    def get(self, obj: Any) -> Any:
        return getattr(obj, self.name, None)

    def set(self, obj: Any, value: Any) -> None:
        setattr(obj, self.name, value)


@dataclass(frozen=True)
class FunctionConverter:
    """Converter built from a pair of callables."""

    encoder: Callable[[Any], str]
    decoder: Callable[[str], Any]

    def encode(self, value: Any) -> str:
        return self.encoder(value)

    def decode(self, text: str) -> Any:
        return self.decoder(text)
