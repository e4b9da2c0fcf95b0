"""PostgreSQL driver on psycopg 3.

PostgreSQL Features:
- ``%s`` positional parameters, as psycopg expects them
- ``CALL`` with OUT and INOUT slots read back from the returned row
- Batches through ``executemany(returning=True)`` with one row count per entry
- Generated keys through an added ``RETURNING *`` clause
- JSON parameters sent as JSONB
"""

from typing import TYPE_CHECKING, Any, Optional

import psycopg
from psycopg.types.json import Jsonb

from sqlchain.core.parameters import SqlType
from sqlchain.core.result import OutputRegister
from sqlchain.driver import SyncDriverAdapterBase
from sqlchain.utils.logging import get_logger

if TYPE_CHECKING:
    from psycopg import Connection

    from sqlchain.core.statement import StatementSpec

__all__ = ("PsycopgSyncCursor", "PsycopgSyncDriver", "psycopg_type_coercion_map")

logger = get_logger("adapters.psycopg")


def _to_list(value: Any) -> Any:
    return list(value) if isinstance(value, tuple) else value


psycopg_type_coercion_map = {
    SqlType.VARCHAR: str,
    SqlType.CHAR: str,
    SqlType.SMALLINT: int,
    SqlType.TINYINT: int,
    SqlType.INTEGER: int,
    SqlType.BIGINT: int,
    SqlType.REAL: float,
    SqlType.DOUBLE: float,
    SqlType.BOOLEAN: bool,
    SqlType.BINARY: bytes,
    SqlType.JSON: Jsonb,
    SqlType.ARRAY: _to_list,
}


class PsycopgSyncCursor:
    """Context manager for psycopg cursor management."""

    __slots__ = ("connection", "cursor")

    def __init__(self, connection: "Connection[Any]") -> None:
        self.connection = connection
        self.cursor: Optional[psycopg.Cursor[Any]] = None

    def __enter__(self) -> "psycopg.Cursor[Any]":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            self.cursor.close()


class PsycopgSyncDriver(SyncDriverAdapterBase):
    """Synchronous PostgreSQL driver.

    :meth:`begin` switches the connection out of autocommit; :meth:`commit`
    and :meth:`rollback` end the transaction and restore the previous mode.
    """

    __slots__ = ("_restore_autocommit",)

    dialect = "postgres"
    database_errors = (psycopg.Error,)
    type_coercion_map = psycopg_type_coercion_map
    generated_key_columns = ("*",)

    def __init__(self, connection: "Connection[Any]", driver_features: "Optional[dict[str, Any]]" = None) -> None:
        super().__init__(connection=connection, driver_features=driver_features)
        self._restore_autocommit: Optional[bool] = None

    def with_cursor(self, connection: "Connection[Any]") -> PsycopgSyncCursor:
        return PsycopgSyncCursor(connection)

    def begin(self) -> None:
        """Begin a database transaction."""
        self._restore_autocommit = self.connection.autocommit
        if self.connection.autocommit:
            self.connection.autocommit = False

    def commit(self) -> None:
        """Commit the current transaction."""
        self.connection.commit()
        self._restore()

    def rollback(self) -> None:
        """Rollback the current transaction."""
        self.connection.rollback()
        self._restore()

    def _restore(self) -> None:
        if self._restore_autocommit is not None:
            self.connection.autocommit = self._restore_autocommit
            self._restore_autocommit = None

    def _execute_many(
        self, cursor: "psycopg.Cursor[Any]", sql: str, parameter_sets: "list[tuple[Any, ...]]"
    ) -> "list[int]":
        cursor.executemany(sql, parameter_sets, returning=True)
        counts = [self._get_row_count(cursor)]
        while cursor.nextset():
            counts.append(self._get_row_count(cursor))
        return counts

    def _execute_call(self, cursor: "psycopg.Cursor[Any]", spec: "StatementSpec") -> "tuple[bool, OutputRegister]":
        self._execute_statement(cursor, spec)
        has_result_set = cursor.description is not None
        output_positions = spec.output_positions()
        if not output_positions:
            return has_result_set, OutputRegister({})
        row = cursor.fetchone() if has_result_set else None
        if row is None:
            logger.debug("Call produced no output row, output slots are NULL")
            return has_result_set, OutputRegister(dict.fromkeys(output_positions))
        return has_result_set, OutputRegister(dict(zip(output_positions, row)))
