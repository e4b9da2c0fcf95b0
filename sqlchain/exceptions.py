from typing import Any, Optional

__all__ = (
    "BatchCardinalityError",
    "ImproperConfigurationError",
    "MissingDependencyError",
    "ParameterError",
    "SQLChainError",
    "TransactionError",
)


class SQLChainError(Exception):
    """Base exception class from which all SQLChain exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLChainError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(SQLChainError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a module depends on a dependency that has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install sqlchain[{install_package or package}]' to install sqlchain with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class ImproperConfigurationError(SQLChainError):
    """Improper Configuration error.

    Raised when a connection provider or driver is configured with values it cannot use.
    """


class ParameterError(SQLChainError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class BatchCardinalityError(ParameterError):
    """Raised when a batch row does not carry as many parameters as the first row.

    Detected from local bookkeeping only; no statement has been sent when this is raised.
    """

    expected: int
    actual: int

    def __init__(self, expected: int, actual: int, sql: Optional[str] = None) -> None:
        super().__init__(
            f"Parameters do not match with first set of parameters (expected {expected}, got {actual})", sql
        )
        self.expected = expected
        self.actual = actual


class TransactionError(SQLChainError):
    """Raised when a transaction chain is malformed."""
