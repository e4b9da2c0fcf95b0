"""Result carriers handed to row and output mappers."""

from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Union, overload

from mypy_extensions import mypyc_attr

__all__ = ("OutputRegister", "Row")


@mypyc_attr(allow_interpreted_subclasses=False)
class Row:
    """One fetched row.

    Supports 0-based positional access and access by column name, so the
    same mapper works for cursors that report column names and for key
    cursors that do not.
    """

    __slots__ = ("_columns", "_index", "_values")

    def __init__(self, values: "Sequence[Any]", columns: "Sequence[str]" = ()) -> None:
        self._values = tuple(values)
        self._columns = tuple(columns)
        self._index = {name: position for position, name in enumerate(self._columns)}

    @classmethod
    def from_mapping(cls, data: "Mapping[str, Any]") -> "Row":
        return cls(tuple(data.values()), tuple(data.keys()))

    @property
    def columns(self) -> "tuple[str, ...]":
        return self._columns

    @overload
    def __getitem__(self, key: int) -> Any: ...

    @overload
    def __getitem__(self, key: str) -> Any: ...

    def __getitem__(self, key: Union[int, str]) -> Any:
        if isinstance(key, str):
            try:
                return self._values[self._index[key]]
            except KeyError:
                lowered = key.lower()
                for name, position in self._index.items():
                    if name.lower() == lowered:
                        return self._values[position]
                raise
        return self._values[key]

    def get(self, key: Union[int, str], default: Any = None) -> Any:
        try:
            return self[key]
        except (KeyError, IndexError):
            return default

    def keys(self) -> "tuple[str, ...]":
        return self._columns

    def as_dict(self) -> "dict[str, Any]":
        return dict(zip(self._columns, self._values))

    def as_tuple(self) -> "tuple[Any, ...]":
        return self._values

    def __iter__(self) -> "Iterator[Any]":
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Row):
            return self._values == other._values and self._columns == other._columns
        if isinstance(other, tuple):
            return self._values == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._values, self._columns))

    def __repr__(self) -> str:
        if self._columns:
            return f"Row({self.as_dict()!r})"
        return f"Row({self._values!r})"


@mypyc_attr(allow_interpreted_subclasses=False)
class OutputRegister:
    """Values read back from the OUT and INOUT slots of a callable invocation.

    Keyed by the 1-based bind position of each output binder.
    """

    __slots__ = ("_values",)

    def __init__(self, values: "Mapping[int, Any]") -> None:
        self._values = dict(sorted(values.items()))

    def __getitem__(self, position: int) -> Any:
        try:
            return self._values[position]
        except KeyError:
            msg = f"No output parameter registered at position {position}"
            raise KeyError(msg) from None

    def __contains__(self, position: object) -> bool:
        return position in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get(self, position: int, default: Any = None) -> Any:
        return self._values.get(position, default)

    def positions(self) -> "tuple[int, ...]":
        return tuple(self._values)

    def values(self) -> "tuple[Any, ...]":
        """Output values in ascending position order."""
        return tuple(self._values.values())

    def __repr__(self) -> str:
        return f"OutputRegister({self._values!r})"
