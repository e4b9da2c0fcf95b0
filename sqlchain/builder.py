"""Fluent statement builders and their execution variants.

Three builders share one execution surface:

- :func:`sql` builds a plain statement, sent without parameters.
- :func:`prepare_sql` builds a prepared statement with positional IN parameters.
- :func:`prepare_call` builds a stored routine invocation with IN, OUT and INOUT parameters.

Every query method returns a :class:`~sqlchain.core.operation.DeferredOperation`;
nothing is sent until it is executed against a driver.
"""

from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlchain.batch import BatchGroup, StatementBatch
from sqlchain.core.operation import DeferredOperation, Operation
from sqlchain.core.parameters import SqlType
from sqlchain.core.statement import StatementKind, StatementSpec
from sqlchain.exceptions import ParameterError
from sqlchain.typing import Empty

if TYPE_CHECKING:
    from sqlchain.driver import SyncDriverAdapterBase
    from sqlchain.typing import EmptyType, OutputMapper, RowMapper, T

__all__ = (
    "CallableOutView",
    "CallableStatement",
    "PreparedStatement",
    "Statement",
    "prepare_call",
    "prepare_sql",
    "sql",
)


class _QueryMixin:
    """Query variants shared by plain and prepared statements."""

    __slots__ = ()

    _spec: StatementSpec

    def query_for_exists(self) -> "DeferredOperation[bool]":
        """True when the query produces at least one row. Row content is not read."""
        spec = self._spec
        return Operation(lambda driver: driver.fetch_exists(spec), name="query_for_exists")

    def query_for_one(self, mapper: "RowMapper[T]") -> "DeferredOperation[Optional[T]]":
        """Map the first row, ``None`` when the query returns nothing."""
        spec = self._spec
        return Operation(lambda driver: driver.fetch_one(spec, mapper), name="query_for_one")

    def query_for_list(self, mapper: "RowMapper[T]") -> "DeferredOperation[list[T]]":
        """Map every row, in cursor order."""
        spec = self._spec
        return Operation(lambda driver: driver.fetch_all(spec, mapper), name="query_for_list")

    def query_generated_keys(self, mapper: "RowMapper[T]") -> "DeferredOperation[Optional[T]]":
        """Execute as an update and map the first generated key row."""
        spec = self._spec

        def _first_key(driver: "SyncDriverAdapterBase") -> "Optional[T]":
            keys = driver.fetch_generated_keys(spec, mapper, first_only=True)
            return keys[0] if keys else None

        return Operation(_first_key, name="query_generated_keys")

    def query_generated_keys_as_list(self, mapper: "RowMapper[T]") -> "DeferredOperation[list[T]]":
        """Execute as an update and map every generated key row, in generation order."""
        spec = self._spec
        return Operation(lambda driver: driver.fetch_generated_keys(spec, mapper), name="query_generated_keys_as_list")


class Statement(_QueryMixin, DeferredOperation[int]):
    """A plain statement. Executing it returns the affected row count."""

    __slots__ = ("_spec",)

    kind: ClassVar[StatementKind] = StatementKind.PLAIN

    def __init__(self, sql: str) -> None:
        self._spec = StatementSpec(sql, self.kind)

    @property
    def sql(self) -> str:
        return self._spec.sql

    @property
    def spec(self) -> StatementSpec:
        return self._spec

    def execute(self, driver: "SyncDriverAdapterBase") -> int:
        return driver.execute_update(self._spec)

    def add_batch(self, sql: str) -> StatementBatch:
        """Start a batch of plain statements, this one first."""
        return StatementBatch(self._spec.sql, sql)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._spec.sql!r})"


class PreparedStatement(Statement):
    """A statement with positional IN parameters."""

    __slots__ = ()

    kind: ClassVar[StatementKind] = StatementKind.PREPARED

    def param(
        self, value: Any, sql_type: Optional[SqlType] = None, type_name: Optional[str] = None
    ) -> "PreparedStatement":
        """Bind ``value`` at the next position.

        Args:
            value: Parameter value
            sql_type: Target type; inferred from ``value`` when omitted
            type_name: Optional vendor type name

        Returns:
            This statement, for chaining.
        """
        self._spec.append(value, sql_type, type_name)
        return self

    def param_null(self, sql_type: Optional[SqlType] = None, type_name: Optional[str] = None) -> "PreparedStatement":
        """Bind NULL at the next position, typed when ``sql_type`` is given."""
        if sql_type is None:
            self._spec.append_null()
        else:
            self._spec.append_typed_null(sql_type, type_name)
        return self

    def add_batch(self) -> BatchGroup:  # type: ignore[override]
        """Open a batch whose first row is the parameters bound so far."""
        return BatchGroup(self._spec)


class CallableStatement(DeferredOperation[bool]):
    """A stored routine invocation.

    Executing it returns whether the first result was a row set. Once an OUT
    or INOUT parameter is registered the builder continues as a
    :class:`CallableOutView`, which has no batch surface.
    """

    __slots__ = ("_spec", "_view")

    def __init__(self, sql: str) -> None:
        self._spec = StatementSpec(sql, StatementKind.CALLABLE)
        self._view = CallableOutView(self)

    @property
    def sql(self) -> str:
        return self._spec.sql

    @property
    def spec(self) -> StatementSpec:
        return self._spec

    def param(
        self, value: Any, sql_type: Optional[SqlType] = None, type_name: Optional[str] = None
    ) -> "CallableStatement":
        """Bind an IN parameter at the next position."""
        self._spec.append(value, sql_type, type_name)
        return self

    def param_null(self, sql_type: Optional[SqlType] = None, type_name: Optional[str] = None) -> "CallableStatement":
        """Bind an IN NULL at the next position."""
        if sql_type is None:
            self._spec.append_null()
        else:
            self._spec.append_typed_null(sql_type, type_name)
        return self

    def out_param(
        self, sql_type: SqlType, value: "Any | EmptyType" = Empty, type_name: Optional[str] = None
    ) -> "CallableOutView":
        """Register an output slot at the next position.

        Args:
            sql_type: Type of the value read back
            value: When given, also sent at bind time (INOUT)
            type_name: Optional vendor type name

        Returns:
            The view of this builder without batch methods.
        """
        if value is Empty:
            self._spec.append_out(sql_type, type_name)
        else:
            self._spec.append_in_out(value, sql_type, type_name)
        return self._view

    def execute(self, driver: "SyncDriverAdapterBase") -> bool:
        has_result_set, _ = driver.execute_call(self._spec)
        return has_result_set

    def query_out_params(self, mapper: "OutputMapper[T]") -> "DeferredOperation[T]":
        """Execute the call, then map the output register."""
        spec = self._spec

        def _read_outputs(driver: "SyncDriverAdapterBase") -> "T":
            _, register = driver.execute_call(spec)
            return mapper(register)

        return Operation(_read_outputs, name="query_out_params")

    def add_batch(self) -> BatchGroup:
        """Open a batch whose first row is the IN parameters bound so far."""
        if self._spec.has_output_parameters:
            msg = "Batch execution cannot carry OUT or INOUT parameters"
            raise ParameterError(msg, self._spec.sql)
        return BatchGroup(self._spec)

    def __repr__(self) -> str:
        return f"CallableStatement({self._spec.sql!r})"


class CallableOutView(DeferredOperation[bool]):
    """A callable statement that carries output slots."""

    __slots__ = ("_statement",)

    def __init__(self, statement: CallableStatement) -> None:
        self._statement = statement

    @property
    def sql(self) -> str:
        return self._statement.sql

    @property
    def spec(self) -> StatementSpec:
        return self._statement.spec

    def param(self, value: Any, sql_type: Optional[SqlType] = None, type_name: Optional[str] = None) -> "CallableOutView":
        self._statement.param(value, sql_type, type_name)
        return self

    def param_null(self, sql_type: Optional[SqlType] = None, type_name: Optional[str] = None) -> "CallableOutView":
        self._statement.param_null(sql_type, type_name)
        return self

    def out_param(
        self, sql_type: SqlType, value: "Any | EmptyType" = Empty, type_name: Optional[str] = None
    ) -> "CallableOutView":
        return self._statement.out_param(sql_type, value, type_name)

    def execute(self, driver: "SyncDriverAdapterBase") -> bool:
        return self._statement.execute(driver)

    def query_out_params(self, mapper: "OutputMapper[T]") -> "DeferredOperation[T]":
        return self._statement.query_out_params(mapper)

    def __repr__(self) -> str:
        return f"CallableOutView({self._statement.sql!r})"


def sql(text: str) -> Statement:
    """Build a plain statement."""
    return Statement(text)


def prepare_sql(text: str) -> PreparedStatement:
    """Build a prepared statement."""
    return PreparedStatement(text)


def prepare_call(text: str) -> CallableStatement:
    """Build a stored routine invocation."""
    return CallableStatement(text)
