from sqlchain.adapters.sqlite.config import SqliteConfig, SqliteConnectionParams
from sqlchain.adapters.sqlite.driver import SqliteCursor, SqliteDriver

__all__ = ("SqliteConfig", "SqliteConnectionParams", "SqliteCursor", "SqliteDriver")
