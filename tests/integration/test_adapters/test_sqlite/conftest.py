from collections.abc import Generator
from pathlib import Path

import pytest

from sqlchain import sql
from sqlchain.adapters.sqlite import SqliteConfig, SqliteDriver

CREATE_DIRECTOR = """
CREATE TABLE director (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
)
"""

CREATE_MOVIE = """
CREATE TABLE movie (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    directed_by TEXT
)
"""


@pytest.fixture
def sqlite_config(tmp_path: Path) -> Generator[SqliteConfig, None, None]:
    """File-backed SQLite database with the director and movie tables."""
    config = SqliteConfig(connection_config={"database": str(tmp_path / "movies.db")})
    sql(CREATE_DIRECTOR).add_batch(CREATE_MOVIE).run(config)
    yield config
    config.close()


@pytest.fixture
def sqlite_session(sqlite_config: SqliteConfig) -> Generator[SqliteDriver, None, None]:
    with sqlite_config.provide_session() as session:
        yield session
