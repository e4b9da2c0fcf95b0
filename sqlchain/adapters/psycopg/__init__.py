from sqlchain.exceptions import MissingDependencyError

try:
    import psycopg  # noqa: F401
except ImportError as e:
    raise MissingDependencyError(package="psycopg", install_package="psycopg") from e

from sqlchain.adapters.psycopg.config import PsycopgConfig, PsycopgConnectionConfig  # noqa: E402
from sqlchain.adapters.psycopg.driver import PsycopgSyncCursor, PsycopgSyncDriver  # noqa: E402

__all__ = ("PsycopgConfig", "PsycopgConnectionConfig", "PsycopgSyncCursor", "PsycopgSyncDriver")
