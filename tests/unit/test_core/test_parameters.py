"""Tests for positional parameter binders and type inference."""

import datetime
from decimal import Decimal

import pytest

from sqlchain.core.parameters import ParameterBinder, ParameterDirection, SqlType, infer_sql_type
from sqlchain.typing import Empty


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, SqlType.NULL),
        ("Tenet", SqlType.VARCHAR),
        (True, SqlType.BOOLEAN),
        (42, SqlType.BIGINT),
        (1.5, SqlType.DOUBLE),
        (Decimal("9.99"), SqlType.DECIMAL),
        (datetime.datetime(2020, 8, 26, 20, 0), SqlType.TIMESTAMP),
        (datetime.date(2020, 8, 26), SqlType.DATE),
        (datetime.time(20, 0), SqlType.TIME),
        (b"\x00\x01", SqlType.BINARY),
        (bytearray(b"\x00"), SqlType.BINARY),
        ({"genre": "sci-fi"}, SqlType.JSON),
        ([1, 2, 3], SqlType.ARRAY),
        ((1, 2), SqlType.ARRAY),
        (object(), SqlType.OTHER),
    ],
)
def test_infer_sql_type(value: object, expected: SqlType) -> None:
    """Semantic type follows the Python type of the value."""
    assert infer_sql_type(value) is expected


def test_bool_is_not_inferred_as_integer() -> None:
    """bool is an int subclass but binds as BOOLEAN."""
    assert infer_sql_type(False) is SqlType.BOOLEAN


class TestParameterBinder:
    """Binder construction per direction."""

    def test_in_binder_infers_type(self) -> None:
        binder = ParameterBinder.in_("Nolan")
        assert binder.direction is ParameterDirection.IN
        assert binder.value == "Nolan"
        assert binder.sql_type is SqlType.VARCHAR
        assert binder.explicit_type is False
        assert binder.is_input
        assert not binder.is_output

    def test_in_binder_with_explicit_type(self) -> None:
        binder = ParameterBinder.in_(7, SqlType.SMALLINT)
        assert binder.sql_type is SqlType.SMALLINT
        assert binder.explicit_type is True

    def test_explicit_type_accepts_tag_value(self) -> None:
        binder = ParameterBinder.in_("2020-08-26", "date")  # type: ignore[arg-type]
        assert binder.sql_type is SqlType.DATE

    def test_typed_null_keeps_type_metadata(self) -> None:
        binder = ParameterBinder.in_(None, SqlType.STRUCT, "ADDRESS_T")
        assert binder.value is None
        assert binder.sql_type is SqlType.STRUCT
        assert binder.type_name == "ADDRESS_T"

    def test_out_binder_sends_nothing(self) -> None:
        binder = ParameterBinder.out(SqlType.INTEGER)
        assert binder.direction is ParameterDirection.OUT
        assert binder.value is Empty
        assert binder.input_value is None
        assert not binder.is_input
        assert binder.is_output

    def test_in_out_binder_sends_and_reads(self) -> None:
        binder = ParameterBinder.in_out(10, SqlType.INTEGER)
        assert binder.direction is ParameterDirection.INOUT
        assert binder.input_value == 10
        assert binder.is_input
        assert binder.is_output

    def test_equality(self) -> None:
        assert ParameterBinder.in_(1) == ParameterBinder.in_(1)
        assert ParameterBinder.in_(1) != ParameterBinder.in_(1, SqlType.INTEGER)
        assert ParameterBinder.out(SqlType.INTEGER) == ParameterBinder.out(SqlType.INTEGER)
        assert ParameterBinder.in_(1) != 1

    def test_equal_binders_hash_equal(self) -> None:
        large = 10**20
        same_large = int("1" + "0" * 20)
        assert large is not same_large

        assert ParameterBinder.in_(large) == ParameterBinder.in_(same_large)
        assert hash(ParameterBinder.in_(large)) == hash(ParameterBinder.in_(same_large))
        assert len({ParameterBinder.in_("Tenet"), ParameterBinder.in_("".join(["Te", "net"]))}) == 1

    def test_unhashable_values_still_hash(self) -> None:
        first = ParameterBinder.in_(["Nolan", "Mann"])
        second = ParameterBinder.in_(["Nolan", "Mann"])

        assert first == second
        assert hash(first) == hash(second)

    def test_repr_mentions_direction(self) -> None:
        assert "out" in repr(ParameterBinder.out(SqlType.INTEGER))
        assert "'Tenet'" in repr(ParameterBinder.in_("Tenet"))
