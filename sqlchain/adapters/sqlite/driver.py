import contextlib
import sqlite3
from typing import TYPE_CHECKING, Any, Optional

from sqlchain.core.parameters import SqlType
from sqlchain.core.result import OutputRegister, Row
from sqlchain.driver import SyncDriverAdapterBase
from sqlchain.utils.serializers import to_json

if TYPE_CHECKING:
    from sqlchain.core.statement import StatementSpec

__all__ = ("SqliteCursor", "SqliteDriver", "sqlite_type_coercion_map")


def _isoformat(value: Any) -> Any:
    return value.isoformat() if hasattr(value, "isoformat") else value


def _json(value: Any) -> str:
    return value if isinstance(value, str) else to_json(value)


sqlite_type_coercion_map = {
    SqlType.VARCHAR: str,
    SqlType.CHAR: str,
    SqlType.SMALLINT: int,
    SqlType.TINYINT: int,
    SqlType.INTEGER: int,
    SqlType.BIGINT: int,
    SqlType.REAL: float,
    SqlType.DOUBLE: float,
    SqlType.DECIMAL: str,
    SqlType.BOOLEAN: int,
    SqlType.DATE: _isoformat,
    SqlType.TIME: _isoformat,
    SqlType.TIMESTAMP: _isoformat,
    SqlType.BINARY: bytes,
    SqlType.JSON: _json,
    SqlType.ARRAY: _json,
}


class SqliteCursor:
    """Context manager for SQLite cursor management."""

    __slots__ = ("connection", "cursor")

    def __init__(self, connection: "sqlite3.Connection") -> None:
        self.connection = connection
        self.cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> "sqlite3.Cursor":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(sqlite3.Error):
                self.cursor.close()


class SqliteDriver(SyncDriverAdapterBase):
    """Synchronous SQLite driver.

    Expects a connection in autocommit mode (``isolation_level=None``) so
    transactions are opened only by :meth:`begin`. SQLite has no stored
    routines; callable statements without output slots run as ordinary
    statements and output slots are rejected.
    """

    __slots__ = ()

    dialect = "sqlite"
    database_errors = (sqlite3.Error,)
    type_coercion_map = sqlite_type_coercion_map
    generated_key_columns = ("rowid",)

    def with_cursor(self, connection: "sqlite3.Connection") -> SqliteCursor:
        return SqliteCursor(connection)

    def begin(self) -> None:
        """Begin a database transaction."""
        self.connection.execute("BEGIN")

    def rollback(self) -> None:
        """Rollback the current transaction."""
        self.connection.rollback()

    def commit(self) -> None:
        """Commit the current transaction."""
        self.connection.commit()

    def _fallback_generated_keys(self, cursor: "sqlite3.Cursor") -> "list[Row]":
        if cursor.lastrowid is None or cursor.rowcount <= 0:
            return []
        return [Row((cursor.lastrowid,), ("rowid",))]

    def _execute_call(self, cursor: "sqlite3.Cursor", spec: "StatementSpec") -> "tuple[bool, OutputRegister]":
        if spec.has_output_parameters:
            msg = "SQLite does not support OUT or INOUT parameters"
            raise sqlite3.NotSupportedError(msg)
        self._execute_statement(cursor, spec)
        return cursor.description is not None, OutputRegister({})
