import os
from collections.abc import Generator
from typing import TYPE_CHECKING

import pytest

from sqlchain import StatementBatch, sql

if TYPE_CHECKING:
    from sqlchain.adapters.psycopg import PsycopgConfig

POSTGRES_DSN = os.environ.get("SQLCHAIN_POSTGRES_DSN")

SCHEMA = (
    "DROP TABLE IF EXISTS movie",
    "DROP TABLE IF EXISTS director",
    "CREATE TABLE director (id SERIAL PRIMARY KEY, name TEXT NOT NULL UNIQUE)",
    "CREATE TABLE movie (id SERIAL PRIMARY KEY, title TEXT NOT NULL, directed_by TEXT, metadata JSONB)",
    """
    CREATE OR REPLACE PROCEDURE sqlchain_double(IN amount INTEGER, OUT doubled INTEGER)
    LANGUAGE plpgsql AS $$
    BEGIN
        doubled := amount * 2;
    END
    $$
    """,
    """
    CREATE OR REPLACE PROCEDURE sqlchain_increment(INOUT counter INTEGER, IN step INTEGER)
    LANGUAGE plpgsql AS $$
    BEGIN
        counter := counter + step;
    END
    $$
    """,
)


@pytest.fixture
def psycopg_config() -> "Generator[PsycopgConfig, None, None]":
    """PostgreSQL config for the database named by ``SQLCHAIN_POSTGRES_DSN``."""
    if not POSTGRES_DSN:
        pytest.skip("SQLCHAIN_POSTGRES_DSN is not set")
    pytest.importorskip("psycopg")

    from sqlchain.adapters.psycopg import PsycopgConfig  # noqa: PLC0415

    config = PsycopgConfig(connection_config={"conninfo": POSTGRES_DSN})
    StatementBatch(*SCHEMA).run(config)
    yield config
    sql("DROP TABLE IF EXISTS movie").add_batch("DROP TABLE IF EXISTS director").run(config)
    config.close()
