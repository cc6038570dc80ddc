from __future__ import annotations

from typing import Iterator, List, Optional

from .types import Column, Converter, PathLike, normalize_path


class BindingTable:
    """
    Ordered column definitions.

    Insertion order is both the export column order and the default header
    order. Columns may be added at any time; nothing about the path is checked
    until a record is actually imported or exported.
    """

    def __init__(self) -> None:
        self._columns: List[Column] = []

    def add(self, name: str, path: PathLike, converter: Optional[Converter] = None) -> None:
        self._add(name, path, converter, None, False)

    def add_constant(self, name: str, constant: str, path: PathLike) -> None:
        """Bind a column whose value is always ``constant``."""
        self._add(name, path, None, constant, True)

    def _add(
        self,
        name: str,
        path: PathLike,
        converter: Optional[Converter],
        constant: Optional[str],
        is_constant: bool,
    ) -> None:
        self._columns.append(Column(
            name=name,
            path=normalize_path(path),
            converter=converter,
            constant=constant,
            is_constant=is_constant,
        ))

    def find(self, name: str) -> Optional[Column]:
        for col in self._columns:
            if col.name == name:
                return col
        return None

    def names(self) -> List[str]:
        return [c.name for c in self._columns]

    def __iter__(self) -> Iterator[Column]:
        # snapshot so an add() during iteration does not affect this pass
        return iter(list(self._columns))

    def __len__(self) -> int:
        return len(self._columns)
