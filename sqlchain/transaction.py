"""Transaction chains.

A chain is a sequence of stages evaluated inside one commit boundary. The
first stage is a ready operation; every following stage is a continuation
that receives the previous result and returns the next operation. Savepoint
stages wrap their operation in a named rollback marker.

Example::

    chain = (
        TransactionChain.begin(prepare_sql("INSERT INTO director (name) VALUES (?)").param("Nolan"))
        .save_point("movies", lambda _: prepare_sql("INSERT INTO movie (title) VALUES (?)").param(None))
    )
    chain.run(config)
"""

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, Optional

from sqlchain.core.operation import DeferredOperation
from sqlchain.exceptions import ParameterError, TransactionError
from sqlchain.typing import R, T
from sqlchain.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlchain.driver import SyncDriverAdapterBase

__all__ = ("TransactionChain", "TransactionState")

logger = get_logger("transaction")


class TransactionState(str, Enum):
    """Lifecycle of one chain execution."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMMITTED = "committed"
    ABORTED = "aborted"


class _Stage(Generic[T]):
    __slots__ = ("continuation", "propagate", "savepoint")

    def __init__(
        self,
        continuation: "Callable[[Any], DeferredOperation[T]]",
        savepoint: Optional[str] = None,
        propagate: bool = False,
    ) -> None:
        self.continuation = continuation
        self.savepoint = savepoint
        self.propagate = propagate


class TransactionChain(DeferredOperation[T]):
    """Deferred operations sequenced inside one transaction.

    ``then_apply`` and ``save_point`` return a new chain that shares the
    stages before it, so a chain can be extended in several directions.
    Each chain object is consumed by its first execution: COMMITTED and
    ABORTED are final.
    """

    __slots__ = ("_parent", "_stage", "_state")

    def __init__(self, stage: "_Stage[T]", parent: "Optional[TransactionChain[Any]]" = None) -> None:
        self._stage = stage
        self._parent = parent
        self._state = TransactionState.NOT_STARTED

    @classmethod
    def begin(cls, operation: "DeferredOperation[T]") -> "TransactionChain[T]":
        """Start a chain whose first stage is ``operation``.

        Raises:
            TransactionError: ``operation`` is not a deferred operation.
        """
        if not isinstance(operation, DeferredOperation):
            msg = f"A transaction chain must begin with a deferred operation, got {type(operation).__name__}"
            raise TransactionError(msg)
        return cls(_Stage(lambda _: operation))

    @property
    def state(self) -> TransactionState:
        """State of this chain's execution."""
        return self._state

    def then_apply(self, continuation: "Callable[[T], DeferredOperation[R]]") -> "TransactionChain[R]":
        """Append a stage built from the previous result.

        Args:
            continuation: Receives the previous stage result, returns the next operation.

        Returns:
            A new chain ending with the new stage.
        """
        if not callable(continuation):
            msg = "then_apply expects a callable returning a deferred operation"
            raise TransactionError(msg)
        return TransactionChain(_Stage(continuation), self)

    def save_point(
        self, name: str, continuation: "Callable[[T], DeferredOperation[R]]", *, propagate: bool = False
    ) -> "TransactionChain[Optional[R]]":
        """Append a stage that runs behind the savepoint ``name``.

        When the stage fails with a database error, everything since the
        savepoint is rolled back and the work of earlier stages is kept. The
        stage result is then ``None`` and the chain continues, unless
        ``propagate`` is set, in which case the error is re-raised and aborts
        the chain.

        Args:
            name: Savepoint identifier
            continuation: Receives the previous stage result, returns the next operation
            propagate: Re-raise a failure after rolling back to the savepoint

        Returns:
            A new chain ending with the savepoint stage.
        """
        if not name:
            msg = "Savepoint name must not be empty"
            raise TransactionError(msg)
        if not callable(continuation):
            msg = "save_point expects a callable returning a deferred operation"
            raise TransactionError(msg)
        return TransactionChain(_Stage(continuation, name, propagate), self)

    def stages(self) -> "list[_Stage[Any]]":
        """Return the stages of this chain, first stage first."""
        stages: list[_Stage[Any]] = []
        chain: Optional[TransactionChain[Any]] = self
        while chain is not None:
            stages.append(chain._stage)
            chain = chain._parent
        stages.reverse()
        return stages

    def execute(self, driver: "SyncDriverAdapterBase") -> T:
        """Run every stage inside one transaction on ``driver``.

        Auto-commit is disabled for the duration of the chain and restored
        by the final commit or rollback. Any error outside a swallowing
        savepoint rolls the whole chain back and propagates unchanged.

        Returns:
            The result of the last stage.

        Raises:
            TransactionError: The chain was already executed.
        """
        if self._state is not TransactionState.NOT_STARTED:
            msg = f"Transaction chain already executed (state: {self._state.value})"
            raise TransactionError(msg)
        stages = self.stages()
        driver.begin()
        self._state = TransactionState.RUNNING
        logger.debug("Transaction chain started with %d stages", len(stages))
        try:
            result = self._run_stages(driver, stages)
            driver.commit()
        except Exception:
            logger.debug("Transaction chain failed, rolling back")
            self._state = TransactionState.ABORTED
            driver.rollback()
            raise
        self._state = TransactionState.COMMITTED
        logger.debug("Transaction chain committed")
        return result  # type: ignore[no-any-return]

    def _run_stages(self, driver: "SyncDriverAdapterBase", stages: "list[_Stage[Any]]") -> Any:
        result: Any = None
        for stage in stages:
            if stage.savepoint is None:
                result = self._apply(driver, stage, result)
            else:
                result = self._apply_in_savepoint(driver, stage, stage.savepoint, result)
        return result

    def _apply(self, driver: "SyncDriverAdapterBase", stage: "_Stage[Any]", previous: Any) -> Any:
        operation = stage.continuation(previous)
        if isinstance(operation, TransactionChain):
            # nested chains join the enclosing transaction
            return operation._run_stages(driver, operation.stages())
        if not isinstance(operation, DeferredOperation):
            msg = f"Continuation must return a deferred operation, got {type(operation).__name__}"
            raise TransactionError(msg)
        return operation.execute(driver)

    def _apply_in_savepoint(
        self, driver: "SyncDriverAdapterBase", stage: "_Stage[Any]", name: str, previous: Any
    ) -> Any:
        driver.create_savepoint(name)
        logger.debug("Savepoint %s created", name)
        try:
            result = self._apply(driver, stage, previous)
        except (*driver.database_errors, ParameterError) as e:
            logger.warning("Rolling back to savepoint %s: %s", name, e)
            driver.rollback_to_savepoint(name)
            driver.release_savepoint(name)
            if stage.propagate:
                raise
            return None
        driver.release_savepoint(name)
        return result

    def __repr__(self) -> str:
        stages = self.stages()
        savepoints = [stage.savepoint for stage in stages if stage.savepoint]
        return f"TransactionChain(stages={len(stages)}, savepoints={savepoints!r})"
