"""The deferred-operation abstraction: a function from a live driver session to a result."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Generic, Optional

from sqlchain.typing import T

if TYPE_CHECKING:
    from sqlchain.config import DatabaseConfig
    from sqlchain.driver import SyncDriverAdapterBase

__all__ = ("DeferredOperation", "Operation")


class DeferredOperation(ABC, Generic[T]):
    """Something that produces ``T`` once it is given a driver session.

    Building one never touches the database; :meth:`execute` does.
    """

    __slots__ = ()

    @abstractmethod
    def execute(self, driver: "SyncDriverAdapterBase") -> T:
        """Run against an open driver session.

        Args:
            driver: Session that owns the connection for the duration of the call.

        Returns:
            The operation result.
        """

    def run(self, provider: "DatabaseConfig") -> T:
        """Acquire a session from ``provider``, execute, and release it on every exit path.

        Args:
            provider: Connection provider, usually an adapter config.

        Returns:
            The operation result.
        """
        with provider.provide_session() as driver:
            return self.execute(driver)


class Operation(DeferredOperation[T]):
    """Adapts a plain callable to :class:`DeferredOperation`."""

    __slots__ = ("_func", "name")

    def __init__(self, func: "Callable[[SyncDriverAdapterBase], T]", name: Optional[str] = None) -> None:
        self._func = func
        self.name = name or getattr(func, "__name__", type(self).__name__)

    def execute(self, driver: "SyncDriverAdapterBase") -> T:
        return self._func(driver)

    def __repr__(self) -> str:
        return f"Operation({self.name!r})"
