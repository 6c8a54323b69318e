"""Common utilities and exceptions for dbwrapper.

Exception Design:
    The exception system uses error codes for categorization rather than
    numerous specific exception classes. All errors are instances of
    DatabaseClientError and include structured error information.

    Validation errors (INVALID_ARGUMENT, UNKNOWN_TABLE, UNKNOWN_COLUMN,
    NO_PRIMARY_KEY, MISSING_ORDER_BY, MISSING_FILTER) are raised before any
    statement reaches the database. QUERY_EXECUTION_ERROR is raised by the
    SQL engines and propagates to the caller unchanged.
"""

from dbwrapper.common.exceptions import (
    DatabaseClientError,
    ErrorCode,
    # Helper functions
    configuration_error,
    invalid_argument_error,
    unknown_table_error,
    unknown_column_error,
    no_primary_key_error,
    missing_order_by_error,
    missing_filter_error,
    connection_error,
    query_execution_error,
    dialect_not_supported_error,
)

__all__ = [
    # Base Exception and Error Codes
    "DatabaseClientError",
    "ErrorCode",
    # Helper functions
    "configuration_error",
    "invalid_argument_error",
    "unknown_table_error",
    "unknown_column_error",
    "no_primary_key_error",
    "missing_order_by_error",
    "missing_filter_error",
    "connection_error",
    "query_execution_error",
    "dialect_not_supported_error",
]
