"""Tests for connection provider configuration."""

from unittest.mock import Mock, patch

import pytest

from sqlchain.adapters.sqlite import SqliteConfig, SqliteDriver
from sqlchain.config import DatabaseConfig
from sqlchain.exceptions import ImproperConfigurationError
from tests.unit.fakes import FakeConfig, RecordingDriver


def test_config_subclass_can_be_declared() -> None:
    """Parametrizing the generic base works for any connection and driver pair."""

    class DictConfig(DatabaseConfig[dict, RecordingDriver]):  # type: ignore[type-arg]
        driver_type = RecordingDriver
        connection_type = dict

        def create_connection(self) -> dict:  # type: ignore[type-arg]
            return {}

        def close_connection(self, connection: dict) -> None:  # type: ignore[type-arg]
            connection.clear()

    config = DictConfig(connection_config={"database": "movies"})

    with config.provide_session() as session:
        assert isinstance(session, RecordingDriver)
        assert session.connection == {}
    assert config.connection_config == {"database": "movies"}


def test_provide_session_yields_driver_and_releases(fake_config: FakeConfig) -> None:
    with fake_config.provide_session() as session:
        assert isinstance(session, RecordingDriver)
        assert session.connection is fake_config.connections[0]
        assert not session.connection.closed

    assert fake_config.connections[0].closed


def test_provide_connection_releases_on_error(fake_config: FakeConfig) -> None:
    with pytest.raises(RuntimeError):
        with fake_config.provide_connection():
            raise RuntimeError("boom")

    assert fake_config.connections[0].closed


def test_driver_features_reach_the_session(fake_config: FakeConfig) -> None:
    with fake_config.provide_session() as session:
        assert session.driver_features is fake_config.driver_features


class TestSqliteConfig:
    def test_memory_database_becomes_shared_uri(self) -> None:
        config = SqliteConfig()

        database = config.connection_config["database"]

        assert database.startswith("file:memory_")
        assert "mode=memory" in database
        assert "cache=shared" in database
        assert config.connection_config["uri"] is True
        assert config.is_memory

    def test_explicit_memory_database(self) -> None:
        config = SqliteConfig(connection_config={"database": ":memory:"})
        assert config.is_memory

    def test_memory_databases_are_unique(self) -> None:
        assert SqliteConfig().connection_config["database"] != SqliteConfig().connection_config["database"]

    def test_file_uri_enables_uri_mode(self) -> None:
        config = SqliteConfig(connection_config={"database": "file:movies.db?mode=ro"})
        assert config.connection_config["uri"] is True

    def test_autocommit_by_default(self) -> None:
        assert SqliteConfig().connection_config["isolation_level"] is None

    def test_explicit_isolation_level_is_kept(self) -> None:
        config = SqliteConfig(connection_config={"database": "movies.db", "isolation_level": "DEFERRED"})
        assert config.connection_config["isolation_level"] == "DEFERRED"
        assert not config.is_memory

    def test_session_driver_type(self) -> None:
        config = SqliteConfig()
        try:
            with config.provide_session() as session:
                assert isinstance(session, SqliteDriver)
        finally:
            config.close()

    def test_close_is_idempotent(self) -> None:
        config = SqliteConfig()
        with config.provide_connection():
            pass
        config.close()
        config.close()


def test_psycopg_config_requires_connection_parameters() -> None:
    pytest.importorskip("psycopg")
    from sqlchain.adapters.psycopg import PsycopgConfig

    with pytest.raises(ImproperConfigurationError):
        PsycopgConfig()

    config = PsycopgConfig(connection_config={"conninfo": "postgresql://localhost/movies"})
    assert config.connection_config["autocommit"] is True


def test_psycopg_config_connects_with_configured_parameters() -> None:
    pytest.importorskip("psycopg")
    from sqlchain.adapters.psycopg import PsycopgConfig, PsycopgSyncDriver

    config = PsycopgConfig(connection_config={"host": "localhost", "dbname": "movies", "autocommit": False})
    connection = Mock()

    with patch("sqlchain.adapters.psycopg.config.connect", return_value=connection) as connect:
        with config.provide_session() as session:
            assert isinstance(session, PsycopgSyncDriver)
            assert session.connection is connection

    connect.assert_called_once_with(host="localhost", dbname="movies", autocommit=False)
    connection.close.assert_called_once_with()
