"""SQLChain: fluent statement composition, batching and transaction chains over DB-API drivers."""

from sqlchain import adapters, core, driver, exceptions, mappers, typing, utils
from sqlchain.__metadata__ import __version__
from sqlchain.batch import BatchGroup, StatementBatch
from sqlchain.builder import (
    CallableOutView,
    CallableStatement,
    PreparedStatement,
    Statement,
    prepare_call,
    prepare_sql,
    sql,
)
from sqlchain.config import DatabaseConfig
from sqlchain.core import (
    DeferredOperation,
    Operation,
    OutputRegister,
    ParameterBinder,
    ParameterDirection,
    Row,
    SqlType,
    StatementKind,
    StatementSpec,
)
from sqlchain.driver import SyncDriverAdapterBase
from sqlchain.exceptions import (
    BatchCardinalityError,
    ImproperConfigurationError,
    MissingDependencyError,
    ParameterError,
    SQLChainError,
    TransactionError,
)
from sqlchain.transaction import TransactionChain, TransactionState

__all__ = (
    "BatchCardinalityError",
    "BatchGroup",
    "CallableOutView",
    "CallableStatement",
    "DatabaseConfig",
    "DeferredOperation",
    "ImproperConfigurationError",
    "MissingDependencyError",
    "Operation",
    "OutputRegister",
    "ParameterBinder",
    "ParameterDirection",
    "ParameterError",
    "PreparedStatement",
    "Row",
    "SQLChainError",
    "SqlType",
    "Statement",
    "StatementBatch",
    "StatementKind",
    "StatementSpec",
    "SyncDriverAdapterBase",
    "TransactionChain",
    "TransactionError",
    "TransactionState",
    "__version__",
    "adapters",
    "core",
    "driver",
    "exceptions",
    "mappers",
    "prepare_call",
    "prepare_sql",
    "sql",
    "typing",
    "utils",
)
