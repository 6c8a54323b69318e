"""Constants module for dbwrapper.

This module contains all constant values and enumerations used throughout
the package. It has no dependencies on other dbwrapper modules apart from
the lazily imported error helpers.

Organization:
    - database: Supported database types (dialects)
    - sql: Statement kinds, logical operators and literal formats
"""

from dbwrapper.constants.database import DatabaseType

from dbwrapper.constants.sql import (
    QueryType,
    LogicalOperator,
    ROW_NUMBER_ALIAS,
    ROW_CONSTRAINED_ALIAS,
    INSERTED_ID_ALIAS,
    MYSQL_MAX_LIMIT,
    MSSQL_TIMESTAMP_FORMAT,
    MYSQL_TIMESTAMP_FORMAT,
)

__all__ = [
    "DatabaseType",
    "QueryType",
    "LogicalOperator",
    "ROW_NUMBER_ALIAS",
    "ROW_CONSTRAINED_ALIAS",
    "INSERTED_ID_ALIAS",
    "MYSQL_MAX_LIMIT",
    "MSSQL_TIMESTAMP_FORMAT",
    "MYSQL_TIMESTAMP_FORMAT",
]
