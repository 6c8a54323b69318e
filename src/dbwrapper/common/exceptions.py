from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for dbwrapper operations.

    This enum provides categorized error codes that can be used
    to identify error types without creating numerous exception classes.
    Each category has a specific number range for easy identification.

    Attributes:
        CONFIG_*: Configuration-related errors (1xxx)
        VALIDATION_*: Input validation errors (2xxx)
        CONNECTION_*: Network and connection errors (3xxx)
        EXECUTION_*: Runtime execution errors (4xxx)
        SCHEMA_*: Schema lookup errors (5xxx)
        PLATFORM_*: Dialect support errors (7xxx)
    """
    # Configuration errors (1xxx)
    CONFIG_ERROR = "CONFIG_001"
    CONFIG_INVALID = "CONFIG_003"

    # Validation errors (2xxx)
    VALIDATION_ERROR = "VALIDATION_001"
    INVALID_ARGUMENT = "VALIDATION_002"
    MISSING_ORDER_BY = "VALIDATION_005"
    MISSING_FILTER = "VALIDATION_006"

    # Connection errors (3xxx)
    CONNECTION_ERROR = "CONNECTION_001"

    # Execution errors (4xxx)
    EXECUTION_ERROR = "EXECUTION_001"
    QUERY_EXECUTION_ERROR = "EXECUTION_002"

    # Schema errors (5xxx)
    UNKNOWN_TABLE = "SCHEMA_001"
    UNKNOWN_COLUMN = "SCHEMA_002"
    NO_PRIMARY_KEY = "SCHEMA_003"

    # Platform errors (7xxx)
    DIALECT_NOT_SUPPORTED = "PLATFORM_002"


class DatabaseClientError(Exception):
    """Base exception for all dbwrapper errors.

    This exception class uses error codes for categorization
    instead of creating numerous specific exception classes.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.EXECUTION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        """Initialize dbwrapper error.

        Args:
            message: Error message
            error_code: Error code from ErrorCode enum
            details: Additional error details
            cause: Optional underlying exception
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

        # Lazy import to avoid circular dependency
        from dbwrapper.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={
                "error_code": error_code.value,
                "details": self.details,
            },
            exc_info=cause is not None,
        )

    def __str__(self) -> str:
        """String representation of the error."""
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
        }

    @classmethod
    def from_error_code(
        cls,
        error_code: ErrorCode,
        message: str,
        **kwargs
    ) -> "DatabaseClientError":
        """Create exception from error code.

        Args:
            error_code: Error code
            message: Error message
            **kwargs: Additional arguments for DatabaseClientError

        Returns:
            DatabaseClientError instance
        """
        return cls(message=message, error_code=error_code, **kwargs)


# Helper functions for common error scenarios
def configuration_error(
    message: str,
    config_key: Optional[str] = None,
    **kwargs
) -> DatabaseClientError:
    """Create a configuration error.

    Args:
        message: Error message
        config_key: Configuration key that caused the error
        **kwargs: Additional error details

    Returns:
        DatabaseClientError with CONFIG_ERROR code
    """
    details = kwargs.get('details', {})
    if config_key:
        details["config_key"] = config_key

    return DatabaseClientError(
        message=message,
        error_code=ErrorCode.CONFIG_ERROR,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def invalid_argument_error(
    argument: str,
    message: Optional[str] = None,
    **kwargs
) -> DatabaseClientError:
    """Create an invalid argument error.

    Raised for empty or missing table names, column names and required
    values at any public entry point.

    Args:
        argument: Name of the offending argument
        message: Optional error message
        **kwargs: Additional error details

    Returns:
        DatabaseClientError with INVALID_ARGUMENT code
    """
    details = kwargs.get('details', {})
    details["argument"] = argument

    return DatabaseClientError(
        message=message or f"Argument '{argument}' must not be null or empty",
        error_code=ErrorCode.INVALID_ARGUMENT,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def unknown_table_error(table_name: str, **kwargs) -> DatabaseClientError:
    """Create an unknown table error.

    Args:
        table_name: Table that is not present in the schema cache
        **kwargs: Additional error details

    Returns:
        DatabaseClientError with UNKNOWN_TABLE code
    """
    details = kwargs.get('details', {})
    details["table"] = table_name

    return DatabaseClientError(
        message=f"Table {table_name} is not in the tables list",
        error_code=ErrorCode.UNKNOWN_TABLE,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def unknown_column_error(
    table_name: str,
    column_name: str,
    **kwargs
) -> DatabaseClientError:
    """Create an unknown column error.

    Args:
        table_name: Table that was searched
        column_name: Column that does not exist in the table
        **kwargs: Additional error details

    Returns:
        DatabaseClientError with UNKNOWN_COLUMN code
    """
    details = kwargs.get('details', {})
    details["table"] = table_name
    details["column"] = column_name

    return DatabaseClientError(
        message=f"Column {column_name} does not exist in table {table_name}",
        error_code=ErrorCode.UNKNOWN_COLUMN,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def no_primary_key_error(table_name: str, **kwargs) -> DatabaseClientError:
    """Create a missing primary key error.

    Args:
        table_name: Table without any column flagged as primary key
        **kwargs: Additional error details

    Returns:
        DatabaseClientError with NO_PRIMARY_KEY code
    """
    details = kwargs.get('details', {})
    details["table"] = table_name

    return DatabaseClientError(
        message=f"Unable to find primary key for table {table_name}",
        error_code=ErrorCode.NO_PRIMARY_KEY,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def missing_order_by_error(table_name: str, **kwargs) -> DatabaseClientError:
    """Create a missing ORDER BY error for windowed pagination.

    Args:
        table_name: Table being paged
        **kwargs: Additional error details

    Returns:
        DatabaseClientError with MISSING_ORDER_BY code
    """
    details = kwargs.get('details', {})
    details["table"] = table_name
    details["argument"] = "order_by_clause"

    return DatabaseClientError(
        message=f"An ORDER BY clause is required to page through table {table_name} from a start index",
        error_code=ErrorCode.MISSING_ORDER_BY,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def missing_filter_error(table_name: str, **kwargs) -> DatabaseClientError:
    """Create a missing filter error for DELETE statements.

    Args:
        table_name: Table targeted by the delete
        **kwargs: Additional error details

    Returns:
        DatabaseClientError with MISSING_FILTER code
    """
    details = kwargs.get('details', {})
    details["table"] = table_name
    details["argument"] = "filter"

    return DatabaseClientError(
        message=f"A filter expression is required to delete from table {table_name}",
        error_code=ErrorCode.MISSING_FILTER,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def connection_error(
    message: str,
    service: Optional[str] = None,
    host: Optional[str] = None,
    **kwargs
) -> DatabaseClientError:
    """Create a connection error.

    Args:
        message: Error message
        service: Service that failed to connect
        host: Host/endpoint that failed
        **kwargs: Additional error details

    Returns:
        DatabaseClientError with CONNECTION_ERROR code
    """
    details = kwargs.get('details', {})
    if service:
        details["service"] = service
    if host:
        details["host"] = host

    return DatabaseClientError(
        message=message,
        error_code=ErrorCode.CONNECTION_ERROR,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def query_execution_error(
    query: str,
    original_error: Exception,
    **kwargs
) -> DatabaseClientError:
    """Create a query execution error.

    Args:
        query: SQL query that failed
        original_error: The underlying exception
        **kwargs: Additional error details

    Returns:
        DatabaseClientError with QUERY_EXECUTION_ERROR code
    """
    details = kwargs.get('details', {})
    # Truncate long queries to prevent log bloat
    details["query"] = query[:500] + "..." if len(query) > 500 else query

    return DatabaseClientError(
        message=f"Query execution failed: {str(original_error)}",
        error_code=ErrorCode.QUERY_EXECUTION_ERROR,
        details=details,
        cause=original_error,
        **{k: v for k, v in kwargs.items() if k not in ['details', 'cause']}
    )


def dialect_not_supported_error(
    dialect: str,
    **kwargs
) -> DatabaseClientError:
    """Create a dialect not supported error.

    Args:
        dialect: Database type that is not supported
        **kwargs: Additional error details

    Returns:
        DatabaseClientError with DIALECT_NOT_SUPPORTED code
    """
    details = kwargs.get('details', {})
    details["dialect"] = dialect

    return DatabaseClientError(
        message=f"Database type '{dialect}' is not supported. Supported types: mssql, mysql",
        error_code=ErrorCode.DIALECT_NOT_SUPPORTED,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )
