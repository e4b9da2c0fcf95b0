"""Scripted in-memory driver used by the unit tests.

The driver records every statement it is asked to run and answers from a
per-SQL script, so tests can assert both results and the exact round trips.
"""

from collections.abc import Sequence
from typing import Any, Optional

from sqlchain.config import DatabaseConfig
from sqlchain.core.result import OutputRegister
from sqlchain.core.statement import StatementSpec
from sqlchain.driver import SyncDriverAdapterBase


class FakeDatabaseError(Exception):
    """Stands in for a DB-API ``Error`` raised by the client library."""


class ScriptedResponse:
    def __init__(
        self,
        rows: "Sequence[Sequence[Any]]" = (),
        columns: "Sequence[str]" = (),
        rowcount: int = 1,
        error: Optional[Exception] = None,
        outputs: "Optional[dict[int, Any]]" = None,
    ) -> None:
        self.rows = [tuple(row) for row in rows]
        self.columns = tuple(columns)
        self.rowcount = rowcount
        self.error = error
        self.outputs = outputs or {}


class FakeCursor:
    def __init__(self, driver: "RecordingDriver") -> None:
        self.driver = driver
        self.description: Optional[list[tuple[Any, ...]]] = None
        self.rowcount = -1
        self.lastrowid: Optional[int] = None
        self._rows: list[tuple[Any, ...]] = []
        self.closed = False

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.closed = True
        self.driver.closed_cursors += 1

    def execute(self, sql: str, parameters: "Optional[tuple[Any, ...]]" = None) -> None:
        self.driver.log.append(sql)
        self.driver.executed.append((sql, parameters))
        response = self.driver.responses.get(sql, ScriptedResponse())
        if response.error is not None:
            raise response.error
        self._rows = list(response.rows)
        self.rowcount = response.rowcount
        self.description = [(name, None, None, None, None, None, None) for name in response.columns] or None
        if self.description is None and response.rows:
            self.description = [(f"column_{i}", None, None, None, None, None, None) for i in range(len(response.rows[0]))]

    def fetchone(self) -> "Optional[tuple[Any, ...]]":
        return self._rows.pop(0) if self._rows else None

    def fetchall(self) -> "list[tuple[Any, ...]]":
        rows, self._rows = self._rows, []
        return rows


class RecordingDriver(SyncDriverAdapterBase):
    """Driver double recording statements and transaction control."""

    dialect = "sqlite"
    database_errors = (FakeDatabaseError,)

    def __init__(self, connection: Any = None, driver_features: "Optional[dict[str, Any]]" = None) -> None:
        super().__init__(connection=connection, driver_features=driver_features)
        self.responses: dict[str, ScriptedResponse] = self.driver_features.setdefault("responses", {})
        self.log: list[str] = self.driver_features.setdefault("log", [])
        self.executed: list[tuple[str, Any]] = []
        self.closed_cursors = 0

    def script(self, sql: str, **kwargs: Any) -> None:
        self.responses[sql] = ScriptedResponse(**kwargs)

    def with_cursor(self, connection: Any) -> FakeCursor:
        return FakeCursor(self)

    def begin(self) -> None:
        self.log.append("BEGIN")

    def commit(self) -> None:
        self.log.append("COMMIT")

    def rollback(self) -> None:
        self.log.append("ROLLBACK")

    def _execute_call(self, cursor: FakeCursor, spec: StatementSpec) -> "tuple[bool, OutputRegister]":
        self._execute_statement(cursor, spec)
        outputs = self.responses.get(spec.sql, ScriptedResponse()).outputs
        return cursor.description is not None, OutputRegister({p: outputs.get(p) for p in spec.output_positions()})


class FakeConnection:
    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


class FakeConfig(DatabaseConfig[FakeConnection, RecordingDriver]):
    driver_type = RecordingDriver
    connection_type = FakeConnection

    def __init__(self) -> None:
        super().__init__(driver_features={"responses": {}, "log": []})
        self.connections: list[FakeConnection] = []

    def create_connection(self) -> FakeConnection:
        connection = FakeConnection()
        self.connections.append(connection)
        return connection
