"""SQLite database configuration."""

import sqlite3
import uuid
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict

from typing_extensions import NotRequired

from sqlchain.adapters.sqlite.driver import SqliteDriver
from sqlchain.config import DatabaseConfig
from sqlchain.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlite3 import Connection as SqliteConnection
else:
    SqliteConnection = sqlite3.Connection

logger = get_logger("adapters.sqlite")


class SqliteConnectionParams(TypedDict, total=False):
    """SQLite connection parameters."""

    database: NotRequired[str]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: "NotRequired[Optional[str]]"
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


__all__ = ("SqliteConfig", "SqliteConnectionParams")


class SqliteConfig(DatabaseConfig[SqliteConnection, SqliteDriver]):
    """SQLite configuration opening one connection per session.

    Connections run in autocommit mode unless ``isolation_level`` is given.
    An in-memory database is shared by every session of the same config: it
    is opened as a named shared-cache URI and an anchor connection keeps it
    alive until :meth:`close`.

    Driver features:
        enable_foreign_keys: Run ``PRAGMA foreign_keys = ON`` on every new connection (default ``True``)
    """

    __slots__ = ("_anchor",)

    driver_type: "ClassVar[type[SqliteDriver]]" = SqliteDriver
    connection_type: "ClassVar[type[SqliteConnection]]" = SqliteConnection

    def __init__(
        self,
        *,
        connection_config: "Optional[SqliteConnectionParams | dict[str, Any]]" = None,
        driver_features: "Optional[dict[str, Any]]" = None,
    ) -> None:
        """Initialize SQLite configuration.

        Args:
            connection_config: Keyword arguments for :func:`sqlite3.connect`
            driver_features: Optional driver feature configuration
        """
        super().__init__(connection_config=dict(connection_config or {}), driver_features=driver_features)
        self._anchor: Optional[SqliteConnection] = None
        config = self.connection_config
        database = str(config.get("database", ":memory:"))
        if database == ":memory:":
            config["database"] = f"file:memory_{uuid.uuid4().hex}?mode=memory&cache=shared"
            config["uri"] = True
        elif database.startswith("file:") and not config.get("uri"):
            logger.debug("Database URI detected (%s) but uri=True not set, enabling URI mode", database)
            config["uri"] = True
        config.setdefault("isolation_level", None)

    @property
    def is_memory(self) -> bool:
        return "mode=memory" in str(self.connection_config.get("database", ""))

    def _connect(self) -> SqliteConnection:
        connection = sqlite3.connect(**self.connection_config)
        if self.driver_features.get("enable_foreign_keys", True):
            connection.execute("PRAGMA foreign_keys = ON")
        return connection

    def create_connection(self) -> SqliteConnection:
        """Open a new SQLite connection.

        Returns:
            A connection in the configured isolation mode.
        """
        if self.is_memory and self._anchor is None:
            self._anchor = self._connect()
        return self._connect()

    def close(self) -> None:
        """Close the anchor connection, discarding a shared in-memory database."""
        if self._anchor is not None:
            self._anchor.close()
            self._anchor = None
