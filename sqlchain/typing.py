from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Final, Literal

from typing_extensions import TypeAlias, TypeVar

if TYPE_CHECKING:
    from sqlchain.core.parameters import ParameterBinder
    from sqlchain.core.result import OutputRegister, Row

__all__ = (
    "BatchEntry",
    "ConnectionT",
    "Empty",
    "EmptyEnum",
    "EmptyType",
    "OutputMapper",
    "R",
    "RowMapper",
    "T",
)


class EmptyEnum(Enum):
    """A sentinel enum used as placeholder."""

    EMPTY = 0


EmptyType = Literal[EmptyEnum.EMPTY]
Empty: Final = EmptyEnum.EMPTY

T = TypeVar("T")
R = TypeVar("R")
ConnectionT = TypeVar("ConnectionT")

RowMapper: TypeAlias = "Callable[[Row], T]"
"""Maps one fetched :class:`~sqlchain.core.result.Row` to a value."""
OutputMapper: TypeAlias = "Callable[[OutputRegister], T]"
"""Maps the output register of a callable invocation to a value."""
BatchEntry: TypeAlias = "tuple[ParameterBinder, ...]"
"""One materialized row of IN binders inside a batch."""
