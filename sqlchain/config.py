from abc import ABC, abstractmethod
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional

from typing_extensions import TypeVar

from sqlchain.typing import ConnectionT
from sqlchain.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlchain.driver import SyncDriverAdapterBase

__all__ = ("DatabaseConfig", "DriverT")

DriverT = TypeVar("DriverT", bound="SyncDriverAdapterBase")

logger = get_logger("config")


class DatabaseConfig(ABC, Generic[ConnectionT, DriverT]):
    """Connection provider for one database.

    A config hands out a fresh connection per session and always releases it;
    concrete adapters only say how a connection is opened.
    """

    __slots__ = ("connection_config", "driver_features")

    driver_type: "ClassVar[type[Any]]"
    connection_type: "ClassVar[type[Any]]"

    def __init__(
        self,
        *,
        connection_config: "Optional[dict[str, Any]]" = None,
        driver_features: "Optional[dict[str, Any]]" = None,
    ) -> None:
        self.connection_config: dict[str, Any] = dict(connection_config or {})
        self.driver_features: dict[str, Any] = driver_features or {}

    def __hash__(self) -> int:
        return id(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return self.connection_config == other.connection_config and self.driver_features == other.driver_features

    def __repr__(self) -> str:
        parts = ", ".join(f"{name}={value!r}" for name, value in self.connection_config.items())
        return f"{type(self).__name__}({parts})"

    @abstractmethod
    def create_connection(self) -> ConnectionT:
        """Open and return a new connection owned by the caller."""

    def close_connection(self, connection: ConnectionT) -> None:
        """Release a connection obtained from :meth:`create_connection`."""
        connection.close()  # type: ignore[attr-defined]

    @contextmanager
    def provide_connection(self, *args: Any, **kwargs: Any) -> "Generator[ConnectionT, None, None]":
        """Provide a connection that is closed on every exit path.

        Yields:
            A new connection.
        """
        connection = self.create_connection()
        try:
            yield connection
        finally:
            self.close_connection(connection)

    @contextmanager
    def provide_session(self, *args: Any, **kwargs: Any) -> "Generator[DriverT, None, None]":
        """Provide a driver session bound to a fresh connection.

        Yields:
            A driver instance.
        """
        with self.provide_connection(*args, **kwargs) as connection:
            logger.debug("Session opened with %s", self.driver_type.__name__)
            yield self.driver_type(connection=connection, driver_features=self.driver_features)

    def close(self) -> None:
        """Release resources held by the config itself."""
        return
