"""Core bookkeeping types shared by builders, batches, chains and drivers."""

from sqlchain.core.operation import DeferredOperation, Operation
from sqlchain.core.parameters import ParameterBinder, ParameterDirection, SqlType, infer_sql_type
from sqlchain.core.result import OutputRegister, Row
from sqlchain.core.statement import StatementKind, StatementSpec

__all__ = (
    "DeferredOperation",
    "Operation",
    "OutputRegister",
    "ParameterBinder",
    "ParameterDirection",
    "Row",
    "SqlType",
    "StatementKind",
    "StatementSpec",
    "infer_sql_type",
)
