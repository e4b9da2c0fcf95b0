"""SQL text plus an ordered, append-only list of binders."""

from collections.abc import Iterable
from enum import Enum
from typing import Any, Optional

from mypy_extensions import mypyc_attr

from sqlchain.core.parameters import ParameterBinder, SqlType

__all__ = ("StatementKind", "StatementSpec")


class StatementKind(str, Enum):
    """How the driver dispatches a statement.

    - PLAIN: sent as-is, no parameters
    - PREPARED: sent with positional IN parameters
    - CALLABLE: a stored routine invocation, parameters may carry OUT slots
    """

    PLAIN = "plain"
    PREPARED = "prepared"
    CALLABLE = "callable"


@mypyc_attr(allow_interpreted_subclasses=False)
class StatementSpec:
    """Immutable SQL text and its positional binders.

    Position ``i`` (1-indexed) always holds the binder of the ``i``-th append
    call. Appending is bookkeeping only; the placeholder count of the SQL text
    is never inspected.
    """

    __slots__ = ("_binders", "_kind", "_sql")

    def __init__(
        self, sql: str, kind: StatementKind = StatementKind.PREPARED, binders: "Iterable[ParameterBinder]" = ()
    ) -> None:
        self._sql = sql
        self._kind = kind
        self._binders: list[ParameterBinder] = list(binders)

    @property
    def sql(self) -> str:
        return self._sql

    @property
    def kind(self) -> StatementKind:
        return self._kind

    @property
    def binders(self) -> "tuple[ParameterBinder, ...]":
        return tuple(self._binders)

    @property
    def has_output_parameters(self) -> bool:
        return any(binder.is_output for binder in self._binders)

    def __len__(self) -> int:
        return len(self._binders)

    def __repr__(self) -> str:
        return f"StatementSpec({self._sql!r}, kind={self._kind.value}, binders={len(self._binders)})"

    def append_binder(self, binder: ParameterBinder) -> "StatementSpec":
        """Append ``binder`` at the next position.

        Returns:
            This spec, for chaining.
        """
        self._binders.append(binder)
        return self

    def append(self, value: Any, sql_type: Optional[SqlType] = None, type_name: Optional[str] = None) -> "StatementSpec":
        """Append an IN value, optionally coerced to ``sql_type``."""
        return self.append_binder(ParameterBinder.in_(value, sql_type, type_name))

    def append_null(self) -> "StatementSpec":
        """Append a plain NULL."""
        return self.append_binder(ParameterBinder.in_(None))

    def append_typed_null(self, sql_type: SqlType, type_name: Optional[str] = None) -> "StatementSpec":
        """Append a NULL that carries type metadata for engines that require it."""
        return self.append_binder(ParameterBinder.in_(None, sql_type, type_name))

    def append_out(self, sql_type: SqlType, type_name: Optional[str] = None) -> "StatementSpec":
        """Register an output slot at the next position."""
        return self.append_binder(ParameterBinder.out(sql_type, type_name))

    def append_in_out(self, value: Any, sql_type: SqlType, type_name: Optional[str] = None) -> "StatementSpec":
        """Send ``value`` and register the same position as an output slot."""
        return self.append_binder(ParameterBinder.in_out(value, sql_type, type_name))

    def positions(self) -> "list[tuple[int, ParameterBinder]]":
        """Return ``(position, binder)`` pairs, positions starting at 1."""
        return list(enumerate(self._binders, start=1))

    def output_positions(self) -> "list[int]":
        """Return the positions registered as output slots, in ascending order."""
        return [position for position, binder in enumerate(self._binders, start=1) if binder.is_output]

    def copy(self, kind: Optional[StatementKind] = None) -> "StatementSpec":
        """Return a detached copy whose binder list no longer grows with this one."""
        return StatementSpec(self._sql, kind or self._kind, self._binders)
