"""Positional parameter binders.

Components:
- SqlType enum: Target type tags understood by the driver adapters
- ParameterDirection enum: IN, OUT and INOUT
- ParameterBinder: One bind instruction for one positional slot
- infer_sql_type: Semantic type of a Python value

A binder never touches a connection. Adapters read the direction and type
tag at bind time to decide what to send and which output slots to register.
"""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import singledispatch
from typing import Any, Optional

from mypy_extensions import mypyc_attr

from sqlchain.typing import Empty, EmptyType

__all__ = ("ParameterBinder", "ParameterDirection", "SqlType", "infer_sql_type")


class SqlType(str, Enum):
    """Target type tags for parameters and output slots.

    The names follow the generic SQL type families; adapters map each tag to
    the coercion their database needs.
    """

    NULL = "null"
    VARCHAR = "varchar"
    CHAR = "char"
    SMALLINT = "smallint"
    TINYINT = "tinyint"
    INTEGER = "integer"
    BIGINT = "bigint"
    REAL = "real"
    DOUBLE = "double"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    BINARY = "binary"
    JSON = "json"
    ARRAY = "array"
    STRUCT = "struct"
    REF_CURSOR = "ref_cursor"
    OTHER = "other"


class ParameterDirection(str, Enum):
    """Direction of a positional parameter."""

    IN = "in"
    OUT = "out"
    INOUT = "inout"


@singledispatch
def infer_sql_type(value: Any) -> SqlType:
    """Return the semantic type of ``value``.

    Args:
        value: Parameter value

    Returns:
        The inferred :class:`SqlType`, ``SqlType.OTHER`` for generic objects.
    """
    return SqlType.OTHER


@infer_sql_type.register(type(None))
def _(value: Any) -> SqlType:
    return SqlType.NULL


@infer_sql_type.register
def _(value: str) -> SqlType:
    return SqlType.VARCHAR


@infer_sql_type.register
def _(value: bool) -> SqlType:
    return SqlType.BOOLEAN


@infer_sql_type.register
def _(value: int) -> SqlType:
    return SqlType.BIGINT


@infer_sql_type.register
def _(value: float) -> SqlType:
    return SqlType.DOUBLE


@infer_sql_type.register
def _(value: Decimal) -> SqlType:
    return SqlType.DECIMAL


@infer_sql_type.register
def _(value: datetime) -> SqlType:
    return SqlType.TIMESTAMP


@infer_sql_type.register
def _(value: date) -> SqlType:
    return SqlType.DATE


@infer_sql_type.register
def _(value: time) -> SqlType:
    return SqlType.TIME


@infer_sql_type.register(bytes)
@infer_sql_type.register(bytearray)
@infer_sql_type.register(memoryview)
def _(value: Any) -> SqlType:
    return SqlType.BINARY


@infer_sql_type.register(dict)
def _(value: Any) -> SqlType:
    return SqlType.JSON


@infer_sql_type.register(list)
@infer_sql_type.register(tuple)
def _(value: Any) -> SqlType:
    return SqlType.ARRAY


@mypyc_attr(allow_interpreted_subclasses=False)
class ParameterBinder:
    """A single positional bind instruction.

    Attributes:
        direction: IN, OUT or INOUT
        value: Value sent at bind time (``Empty`` for pure OUT binders)
        sql_type: Target type tag, explicit or inferred from the value
        type_name: Optional vendor type name for structured NULLs
        explicit_type: True when ``sql_type`` was given by the caller
    """

    __slots__ = ("direction", "explicit_type", "sql_type", "type_name", "value")

    def __init__(
        self,
        direction: ParameterDirection,
        value: "Any | EmptyType",
        sql_type: SqlType,
        type_name: Optional[str] = None,
        explicit_type: bool = False,
    ) -> None:
        self.direction = direction
        self.value = value
        self.sql_type = sql_type
        self.type_name = type_name
        self.explicit_type = explicit_type

    @classmethod
    def in_(cls, value: Any, sql_type: Optional[SqlType] = None, type_name: Optional[str] = None) -> "ParameterBinder":
        """Build an IN binder, inferring the type tag when none is given."""
        if sql_type is None:
            return cls(ParameterDirection.IN, value, infer_sql_type(value), type_name)
        return cls(ParameterDirection.IN, value, SqlType(sql_type), type_name, explicit_type=True)

    @classmethod
    def out(cls, sql_type: SqlType, type_name: Optional[str] = None) -> "ParameterBinder":
        """Build a pure OUT binder: only an output slot is registered."""
        return cls(ParameterDirection.OUT, Empty, SqlType(sql_type), type_name, explicit_type=True)

    @classmethod
    def in_out(cls, value: Any, sql_type: SqlType, type_name: Optional[str] = None) -> "ParameterBinder":
        """Build an INOUT binder: ``value`` is sent and the slot is read back."""
        return cls(ParameterDirection.INOUT, value, SqlType(sql_type), type_name, explicit_type=True)

    @property
    def is_input(self) -> bool:
        """True when a value is sent at bind time."""
        return self.direction is not ParameterDirection.OUT

    @property
    def is_output(self) -> bool:
        """True when the slot is read back after execution."""
        return self.direction is not ParameterDirection.IN

    @property
    def input_value(self) -> Any:
        """Value to send, ``None`` for pure OUT binders."""
        return None if self.value is Empty else self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterBinder):
            return NotImplemented
        return (
            self.direction is other.direction
            and self.value == other.value
            and self.sql_type is other.sql_type
            and self.type_name == other.type_name
        )

    def __hash__(self) -> int:
        try:
            value_hash = hash(self.value)
        except TypeError:
            # unhashable values (lists, dicts) contribute nothing
            value_hash = 0
        return hash((self.direction, value_hash, self.sql_type, self.type_name))

    def __repr__(self) -> str:
        type_part = f", type_name={self.type_name!r}" if self.type_name else ""
        if self.value is Empty:
            return f"ParameterBinder({self.direction.value}, sql_type={self.sql_type.value}{type_part})"
        return f"ParameterBinder({self.direction.value}, {self.value!r}, sql_type={self.sql_type.value}{type_part})"
