"""Batch accumulation for prepared and plain statements.

A :class:`BatchGroup` is opened from a statement that already carries its
first row of parameters. That row fixes the template cardinality ``C``; every
following row must bring exactly ``C`` parameters. The check runs at each
``add_batch()`` boundary and again before execution, so a mismatched batch
never reaches the database.
"""

from typing import TYPE_CHECKING, Any, Optional

from sqlchain.core.operation import DeferredOperation
from sqlchain.core.parameters import ParameterBinder, SqlType
from sqlchain.core.statement import StatementSpec
from sqlchain.exceptions import BatchCardinalityError, ParameterError
from sqlchain.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlchain.driver import SyncDriverAdapterBase
    from sqlchain.typing import BatchEntry

__all__ = ("BatchGroup", "StatementBatch")

logger = get_logger("batch")


class BatchGroup(DeferredOperation["list[int]"]):
    """Repeated parameter rows against one SQL text.

    The group owns a snapshot of the template row and its own list of
    binders for the rows that follow; later changes to the originating
    statement do not leak in. A group is consumed by its first execution.
    """

    __slots__ = ("_consumed", "_entries", "_pending", "_template")

    def __init__(self, template: StatementSpec) -> None:
        self._template = template.copy()
        self._entries: list[BatchEntry] = [self._template.binders]
        self._pending: list[ParameterBinder] = []
        self._consumed = False

    @property
    def consumed(self) -> bool:
        """True once the batch was dispatched."""
        return self._consumed

    @property
    def sql(self) -> str:
        return self._template.sql

    @property
    def cardinality(self) -> int:
        """Parameters per row, fixed by the first row."""
        return len(self._template)

    @property
    def entries(self) -> "tuple[BatchEntry, ...]":
        """Rows accepted so far, the template row first."""
        return tuple(self._entries)

    @property
    def pending(self) -> int:
        """Parameters bound since the last row boundary."""
        return len(self._pending)

    def param(self, value: Any, sql_type: Optional[SqlType] = None, type_name: Optional[str] = None) -> "BatchGroup":
        """Bind ``value`` at the next position of the current row."""
        self._ensure_open()
        self._pending.append(ParameterBinder.in_(value, sql_type, type_name))
        return self

    def param_null(self, sql_type: Optional[SqlType] = None, type_name: Optional[str] = None) -> "BatchGroup":
        """Bind NULL at the next position of the current row, typed when ``sql_type`` is given."""
        self._ensure_open()
        self._pending.append(ParameterBinder.in_(None, sql_type, type_name))
        return self

    def add_batch(self) -> "BatchGroup":
        """Close the current row and start the next one.

        Raises:
            BatchCardinalityError: The current row does not match the first row.
            ParameterError: The batch was already executed.
        """
        self._ensure_open()
        self._validate()
        self._entries.append(tuple(self._pending))
        self._pending = []
        return self

    def _ensure_open(self) -> None:
        if self._consumed:
            msg = "Batch already executed"
            raise ParameterError(msg, self._template.sql)

    def _validate(self) -> None:
        if len(self._pending) != self.cardinality:
            raise BatchCardinalityError(self.cardinality, len(self._pending), self._template.sql)

    def execute_batch(self, driver: "SyncDriverAdapterBase") -> "list[int]":
        """Dispatch every row as one batch.

        The row still being filled is validated and sent last. A row with no
        parameters bound yet is not a row: the batch then ends at the last
        ``add_batch()`` boundary, so a template-only batch sends one row.

        Returns:
            One row count per row, in submission order.

        Raises:
            BatchCardinalityError: The last row does not match the first row.
            ParameterError: The batch was already executed.
        """
        self._ensure_open()
        entries = list(self._entries)
        if self._pending:
            self._validate()
            entries.append(tuple(self._pending))
        self._consumed = True
        logger.debug("Dispatching batch of %d rows with %d parameters each", len(entries), self.cardinality)
        return driver.execute_batch(self._template, entries)

    def execute(self, driver: "SyncDriverAdapterBase") -> "list[int]":
        return self.execute_batch(driver)

    def __repr__(self) -> str:
        return f"BatchGroup({self._template.sql!r}, rows={len(self._entries)}, cardinality={self.cardinality})"


class StatementBatch(DeferredOperation["list[int]"]):
    """Several plain statements sent together."""

    __slots__ = ("_statements",)

    def __init__(self, *statements: str) -> None:
        self._statements: list[str] = list(statements)

    @property
    def statements(self) -> "tuple[str, ...]":
        return tuple(self._statements)

    def add_batch(self, sql: str) -> "StatementBatch":
        self._statements.append(sql)
        return self

    def execute_batch(self, driver: "SyncDriverAdapterBase") -> "list[int]":
        """Execute every statement in order, one row count each."""
        return driver.execute_statements(self._statements)

    def execute(self, driver: "SyncDriverAdapterBase") -> "list[int]":
        return self.execute_batch(driver)

    def __repr__(self) -> str:
        return f"StatementBatch({len(self._statements)} statements)"
