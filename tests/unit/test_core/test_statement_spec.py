"""Tests for StatementSpec binder bookkeeping."""

from sqlchain.core.parameters import ParameterBinder, ParameterDirection, SqlType
from sqlchain.core.statement import StatementKind, StatementSpec


def test_positions_follow_append_order() -> None:
    """Position i holds the binder of the i-th append, whatever its direction."""
    spec = (
        StatementSpec("{call p(?, ?, ?, ?)}", StatementKind.CALLABLE)
        .append("a")
        .append_out(SqlType.INTEGER)
        .append_null()
        .append_in_out(5, SqlType.BIGINT)
    )

    positions = spec.positions()

    assert [position for position, _ in positions] == [1, 2, 3, 4]
    assert [binder.direction for _, binder in positions] == [
        ParameterDirection.IN,
        ParameterDirection.OUT,
        ParameterDirection.IN,
        ParameterDirection.INOUT,
    ]
    assert spec.output_positions() == [2, 4]
    assert spec.has_output_parameters


def test_append_typed_null() -> None:
    spec = StatementSpec("INSERT INTO movie (title, directed_by) VALUES (?, ?)")
    spec.append("Tenet").append_typed_null(SqlType.VARCHAR)

    binder = spec.binders[1]
    assert binder.value is None
    assert binder.sql_type is SqlType.VARCHAR
    assert binder.explicit_type


def test_plain_null_is_untyped() -> None:
    spec = StatementSpec("INSERT INTO movie (title) VALUES (?)").append_null()
    assert spec.binders[0].sql_type is SqlType.NULL
    assert not spec.binders[0].explicit_type


def test_placeholder_count_is_not_checked() -> None:
    """Bookkeeping never inspects the SQL text."""
    spec = StatementSpec("SELECT 1").append(1).append(2)
    assert len(spec) == 2
    assert not spec.has_output_parameters


def test_copy_is_detached() -> None:
    spec = StatementSpec("INSERT INTO director (name) VALUES (?)").append("Nolan")
    snapshot = spec.copy()

    spec.append("Villeneuve")

    assert len(snapshot) == 1
    assert snapshot.binders == (ParameterBinder.in_("Nolan"),)
    assert snapshot.kind is StatementKind.PREPARED


def test_copy_can_change_kind() -> None:
    spec = StatementSpec("SELECT 1", StatementKind.CALLABLE)
    assert spec.copy(StatementKind.PREPARED).kind is StatementKind.PREPARED


def test_binders_is_a_snapshot() -> None:
    spec = StatementSpec("SELECT ?").append(1)
    binders = spec.binders
    spec.append(2)
    assert len(binders) == 1
