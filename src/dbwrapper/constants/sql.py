"""SQL and query-related constants.

This module contains the statement kinds the client builds and the literal
formats that form the wire contract with the database servers.
"""

from enum import Enum


class QueryType(str, Enum):
    """SQL statement type enumeration.
    
    Used by query builders to dispatch an operation to the matching
    build method.
    
    Categories:
    - Query: SELECT
    - DML: INSERT, UPDATE, DELETE, TRUNCATE
    - Execution: RAW_QUERY
    """
    
    # Data Query
    SELECT = "SELECT"
    
    # Data Manipulation (DML)
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    TRUNCATE = "TRUNCATE"
    
    # Generic Execution
    RAW_QUERY = "RAW_QUERY"


class LogicalOperator(str, Enum):
    """Boolean connectives used to combine predicates."""
    
    AND = "AND"
    OR = "OR"


# Alias of the ranking column used for windowed pagination on SQL Server
ROW_NUMBER_ALIAS = "__row_num__"

# Alias of the derived table wrapping a windowed SELECT
ROW_CONSTRAINED_ALIAS = "row_constrained_result"

# Column alias of the LAST_INSERT_ID() lookup on MySQL
INSERTED_ID_ALIAS = "id"

# Largest row count MySQL accepts in a LIMIT clause; used for offset-only pages
MYSQL_MAX_LIMIT = 18446744073709551615

# Timestamp layouts, expressed in .NET custom format notation for reference:
#   mssql  MM/dd/yyyy hh:mm:ss.fffffff tt
#   mysql  yyyy-MM-dd HH:mm:ss.ffffff
# str.format templates over date fields; years are always four zero-padded digits.
MSSQL_TIMESTAMP_FORMAT = (
    "{month:02d}/{day:02d}/{year:04d} {hour:02d}:{minute:02d}:{second:02d}.{fraction:07d} {meridiem}"
)
MYSQL_TIMESTAMP_FORMAT = "{year:04d}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}:{second:02d}.{fraction:06d}"
