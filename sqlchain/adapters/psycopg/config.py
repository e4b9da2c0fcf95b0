"""Psycopg database configuration using TypedDict for connection parameters."""

from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict

from psycopg import Connection, connect
from typing_extensions import NotRequired

from sqlchain.adapters.psycopg.driver import PsycopgSyncDriver
from sqlchain.config import DatabaseConfig
from sqlchain.exceptions import ImproperConfigurationError

if TYPE_CHECKING:
    from typing_extensions import TypeAlias

    PsycopgConnection: TypeAlias = Connection[Any]
else:
    PsycopgConnection = Connection

__all__ = ("PsycopgConfig", "PsycopgConnectionConfig")


class PsycopgConnectionConfig(TypedDict, total=False):
    """Psycopg connection configuration as TypedDict.

    Basic connection parameters for psycopg.connect().
    """

    conninfo: NotRequired[str]
    """Connection string in libpq format."""

    host: NotRequired[str]
    """Database server host."""

    port: NotRequired[int]
    """Database server port."""

    user: NotRequired[str]
    """Database user."""

    password: NotRequired[str]
    """Database password."""

    dbname: NotRequired[str]
    """Database name."""

    connect_timeout: NotRequired[int]
    """Connection timeout in seconds."""

    application_name: NotRequired[str]
    """Application name reported to the server."""

    autocommit: NotRequired[bool]
    """Autocommit mode outside transaction chains. Defaults to ``True``."""


class PsycopgConfig(DatabaseConfig[PsycopgConnection, PsycopgSyncDriver]):
    """PostgreSQL configuration opening one psycopg connection per session."""

    __slots__ = ()

    driver_type: "ClassVar[type[PsycopgSyncDriver]]" = PsycopgSyncDriver
    connection_type: "ClassVar[type[Any]]" = Connection

    def __init__(
        self,
        *,
        connection_config: "Optional[PsycopgConnectionConfig | dict[str, Any]]" = None,
        driver_features: "Optional[dict[str, Any]]" = None,
    ) -> None:
        """Initialize psycopg configuration.

        Args:
            connection_config: Keyword arguments for :func:`psycopg.connect`
            driver_features: Optional driver feature configuration

        Raises:
            ImproperConfigurationError: Neither ``conninfo`` nor any connection parameter was given.
        """
        super().__init__(connection_config=dict(connection_config or {}), driver_features=driver_features)
        if not self.connection_config:
            msg = "PsycopgConfig requires 'conninfo' or connection parameters"
            raise ImproperConfigurationError(msg)
        self.connection_config.setdefault("autocommit", True)

    def create_connection(self) -> PsycopgConnection:
        """Create a single connection.

        Returns:
            A psycopg Connection instance.
        """
        return connect(**self.connection_config)
