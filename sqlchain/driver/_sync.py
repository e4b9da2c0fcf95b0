"""Synchronous driver adapter base.

The base class owns the execution primitives every builder, batch and chain
relies on and implements them once on top of a PEP 249 cursor. Concrete
adapters provide cursor management, transaction control, type coercion and
the database-specific parts (stored routine calls, batch dispatch).

Database errors raised by the underlying client are never wrapped.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any, ClassVar, Optional

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from sqlchain.core.parameters import ParameterBinder, SqlType
from sqlchain.core.result import OutputRegister, Row
from sqlchain.core.statement import StatementKind, StatementSpec
from sqlchain.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlchain.typing import BatchEntry, RowMapper, T

__all__ = ("SyncDriverAdapterBase",)

logger = get_logger("driver")


class SyncDriverAdapterBase(ABC):
    """Execution primitives over one exclusively owned connection.

    Class attributes:
        dialect: sqlglot dialect name used for generated SQL
        database_errors: Exception classes the client raises for database failures
        type_coercion_map: Converters applied to IN values by target type tag
        generated_key_columns: Columns requested when an INSERT is asked for its keys
    """

    __slots__ = ("connection", "driver_features")

    dialect: ClassVar[str] = ""
    database_errors: ClassVar["tuple[type[Exception], ...]"] = ()
    type_coercion_map: ClassVar["dict[SqlType, Callable[[Any], Any]]"] = {}
    generated_key_columns: ClassVar["tuple[str, ...]"] = ()

    def __init__(self, connection: Any, driver_features: "Optional[dict[str, Any]]" = None) -> None:
        self.connection = connection
        self.driver_features: dict[str, Any] = driver_features or {}

    @abstractmethod
    def with_cursor(self, connection: Any) -> "AbstractContextManager[Any]":
        """Return a context manager that yields a cursor and always closes it."""

    @abstractmethod
    def begin(self) -> None:
        """Disable per-statement commit and open a transaction."""

    @abstractmethod
    def commit(self) -> None:
        """Commit the open transaction and restore the default commit behavior."""

    @abstractmethod
    def rollback(self) -> None:
        """Roll back the open transaction and restore the default commit behavior."""

    @abstractmethod
    def _execute_call(self, cursor: Any, spec: StatementSpec) -> "tuple[bool, OutputRegister]":
        """Invoke a stored routine and read back its output slots.

        Returns:
            Whether the first result was a row set, and the output register.
        """

    # -- binding

    def prepare_parameters(self, binders: "Iterable[ParameterBinder]") -> "tuple[Any, ...]":
        """Turn binders into the positional values handed to the client."""
        return tuple(self._coerce(binder) for binder in binders)

    def _coerce(self, binder: ParameterBinder) -> Any:
        value = binder.input_value
        if value is None:
            return None
        converter = self.type_coercion_map.get(binder.sql_type)
        return value if converter is None else converter(value)

    def _execute_statement(self, cursor: Any, spec: StatementSpec, sql: Optional[str] = None) -> None:
        sql = spec.sql if sql is None else sql
        if spec.kind is StatementKind.PLAIN:
            logger.debug("Executing plain statement")
            cursor.execute(sql)
            return
        parameters = self.prepare_parameters(spec.binders)
        logger.debug("Executing %s statement with %d parameters", spec.kind.value, len(parameters))
        cursor.execute(sql, parameters)

    def _get_row_count(self, cursor: Any) -> int:
        row_count = cursor.rowcount
        return row_count if row_count is not None and row_count > 0 else 0

    def _to_rows(self, cursor: Any, raw_rows: "Iterable[Sequence[Any]]") -> "list[Row]":
        columns = [column[0] for column in cursor.description or ()]
        return [Row(raw, columns) for raw in raw_rows]

    # -- primitives

    def execute_update(self, spec: StatementSpec) -> int:
        """Execute ``spec`` and return the affected row count."""
        with self.with_cursor(self.connection) as cursor:
            self._execute_statement(cursor, spec)
            return self._get_row_count(cursor)

    def fetch_exists(self, spec: StatementSpec) -> bool:
        """Execute ``spec`` as a query and report whether a first row exists."""
        with self.with_cursor(self.connection) as cursor:
            self._execute_statement(cursor, spec)
            return cursor.fetchone() is not None

    def fetch_one(self, spec: StatementSpec, mapper: "RowMapper[T]") -> "Optional[T]":
        """Execute ``spec`` and map the first row, ``None`` when there is none."""
        with self.with_cursor(self.connection) as cursor:
            self._execute_statement(cursor, spec)
            raw = cursor.fetchone()
            if raw is None:
                return None
            return mapper(self._to_rows(cursor, [raw])[0])

    def fetch_all(self, spec: StatementSpec, mapper: "RowMapper[T]") -> "list[T]":
        """Execute ``spec`` and map every row in cursor order."""
        with self.with_cursor(self.connection) as cursor:
            self._execute_statement(cursor, spec)
            return [mapper(row) for row in self._to_rows(cursor, cursor.fetchall())]

    def fetch_generated_keys(self, spec: StatementSpec, mapper: "RowMapper[T]", first_only: bool = False) -> "list[T]":
        """Execute ``spec`` requesting generated keys and map the key rows in generation order."""
        with self.with_cursor(self.connection) as cursor:
            self._execute_statement(cursor, spec, self._add_returning_clause(spec.sql))
            if cursor.description:
                rows = self._to_rows(cursor, cursor.fetchall())
            else:
                rows = self._fallback_generated_keys(cursor)
        if first_only:
            rows = rows[:1]
        return [mapper(row) for row in rows]

    def execute_batch(self, spec: StatementSpec, entries: "Sequence[BatchEntry]") -> "list[int]":
        """Dispatch every entry against ``spec.sql`` as one batch.

        Returns:
            One row count per entry, in submission order.
        """
        parameter_sets = [self.prepare_parameters(entry) for entry in entries]
        logger.debug("Executing batch of %d entries", len(parameter_sets))
        with self.with_cursor(self.connection) as cursor:
            return self._execute_many(cursor, spec.sql, parameter_sets)

    def execute_statements(self, statements: "Sequence[str]") -> "list[int]":
        """Execute plain SQL strings in order on one cursor, one row count each."""
        logger.debug("Executing %d plain statements as a batch", len(statements))
        counts: list[int] = []
        with self.with_cursor(self.connection) as cursor:
            for sql in statements:
                cursor.execute(sql)
                counts.append(self._get_row_count(cursor))
        return counts

    def execute_call(self, spec: StatementSpec) -> "tuple[bool, OutputRegister]":
        """Invoke the stored routine described by ``spec``."""
        logger.debug("Executing callable statement with %d output slots", len(spec.output_positions()))
        with self.with_cursor(self.connection) as cursor:
            return self._execute_call(cursor, spec)

    def _execute_many(self, cursor: Any, sql: str, parameter_sets: "list[tuple[Any, ...]]") -> "list[int]":
        counts: list[int] = []
        for parameters in parameter_sets:
            cursor.execute(sql, parameters)
            counts.append(self._get_row_count(cursor))
        return counts

    def _fallback_generated_keys(self, cursor: Any) -> "list[Row]":
        """Key rows for a statement that produced no row set."""
        return []

    def _add_returning_clause(self, sql: str) -> str:
        """Ask an INSERT for its generated keys when it does not already return rows."""
        if not self.generated_key_columns:
            return sql
        try:
            expression = sqlglot.parse_one(sql, read=self.dialect or None)
        except SqlglotError as e:
            # Client placeholder styles such as %s are not always parseable
            statement = sql.strip().rstrip(";")
            upper = statement.upper()
            if not upper.startswith("INSERT") or "RETURNING" in upper:
                logger.debug("Generated keys requested for unparseable SQL, executing as-is: %s", e)
                return sql
            return f"{statement} RETURNING {', '.join(self.generated_key_columns)}"
        if not isinstance(expression, exp.Insert) or expression.args.get("returning") is not None:
            return sql
        columns = [exp.Star() if name == "*" else exp.column(name) for name in self.generated_key_columns]
        expression.set("returning", exp.Returning(expressions=columns))
        return expression.sql(dialect=self.dialect or None)

    # -- savepoints

    def _quote_identifier(self, name: str) -> str:
        return exp.to_identifier(name).sql(dialect=self.dialect or None)

    def _execute_control(self, sql: str) -> None:
        with self.with_cursor(self.connection) as cursor:
            cursor.execute(sql)

    def create_savepoint(self, name: str) -> None:
        """Create a named rollback marker inside the open transaction."""
        self._execute_control(f"SAVEPOINT {self._quote_identifier(name)}")

    def rollback_to_savepoint(self, name: str) -> None:
        """Undo everything since the savepoint ``name`` was created."""
        self._execute_control(f"ROLLBACK TO SAVEPOINT {self._quote_identifier(name)}")

    def release_savepoint(self, name: str) -> None:
        """Discard the savepoint ``name``, keeping its work."""
        self._execute_control(f"RELEASE SAVEPOINT {self._quote_identifier(name)}")
