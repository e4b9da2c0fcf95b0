"""Ready-made row and output mappers.

Row mappers take a :class:`~sqlchain.core.result.Row`; output mappers take an
:class:`~sqlchain.core.result.OutputRegister`. Scalar mappers read the first
column of a row.
"""

from collections.abc import Callable
from datetime import date, datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional, Union

if TYPE_CHECKING:
    from sqlchain.core.result import OutputRegister, Row

__all__ = (
    "as_bool",
    "as_bytes",
    "as_date",
    "as_datetime",
    "as_decimal",
    "as_dict",
    "as_float",
    "as_int",
    "as_str",
    "as_time",
    "as_tuple",
    "column",
    "out_param",
    "scalar",
)


def scalar(row: "Row") -> Any:
    """First column, unconverted."""
    return row[0]


def _convert_first(row: "Row", convert: "Callable[[Any], Any]") -> Any:
    value = row[0]
    return None if value is None else convert(value)


def as_str(row: "Row") -> Optional[str]:
    return _convert_first(row, str)  # type: ignore[no-any-return]


def as_int(row: "Row") -> Optional[int]:
    return _convert_first(row, int)  # type: ignore[no-any-return]


def as_float(row: "Row") -> Optional[float]:
    return _convert_first(row, float)  # type: ignore[no-any-return]


def as_decimal(row: "Row") -> Optional[Decimal]:
    """First column as :class:`~decimal.Decimal`, going through ``str`` so floats keep their printed value."""
    return _convert_first(row, lambda value: Decimal(str(value)))  # type: ignore[no-any-return]


def as_bool(row: "Row") -> Optional[bool]:
    return _convert_first(row, bool)  # type: ignore[no-any-return]


def as_bytes(row: "Row") -> Optional[bytes]:
    return _convert_first(row, bytes)  # type: ignore[no-any-return]


def _parse_temporal(kind: "type[Union[date, time, datetime]]") -> "Callable[[Any], Any]":
    def _parse(value: Any) -> Any:
        if isinstance(value, str):
            return kind.fromisoformat(value)
        if kind is date and isinstance(value, datetime):
            return value.date()
        return value

    return _parse


def as_date(row: "Row") -> Optional[date]:
    """First column as a date; ISO strings (as SQLite stores them) are parsed."""
    return _convert_first(row, _parse_temporal(date))  # type: ignore[no-any-return]


def as_time(row: "Row") -> Optional[time]:
    return _convert_first(row, _parse_temporal(time))  # type: ignore[no-any-return]


def as_datetime(row: "Row") -> Optional[datetime]:
    return _convert_first(row, _parse_temporal(datetime))  # type: ignore[no-any-return]


def as_dict(row: "Row") -> "dict[str, Any]":
    return row.as_dict()


def as_tuple(row: "Row") -> "tuple[Any, ...]":
    return row.as_tuple()


def column(key: Union[int, str], convert: "Optional[Callable[[Any], Any]]" = None) -> "Callable[[Row], Any]":
    """Build a mapper reading one column by position or name.

    Args:
        key: 0-based position or column name
        convert: Applied to non-NULL values

    Returns:
        The row mapper.
    """

    def _mapper(row: "Row") -> Any:
        value = row[key]
        if value is None or convert is None:
            return value
        return convert(value)

    return _mapper


def out_param(position: int, convert: "Optional[Callable[[Any], Any]]" = None) -> "Callable[[OutputRegister], Any]":
    """Build an output mapper reading the slot bound at 1-based ``position``.

    Args:
        position: Bind position of the OUT or INOUT parameter
        convert: Applied to non-NULL values

    Returns:
        The output mapper.
    """

    def _mapper(register: "OutputRegister") -> Any:
        value = register[position]
        if value is None or convert is None:
            return value
        return convert(value)

    return _mapper
