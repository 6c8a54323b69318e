"""Query builder module for dialect-specific SQL generation.

Query builders translate operations into SQL statements but do NOT
execute them - that's handled by engines.

Architecture:
    - base.py: Abstract base class for all builders
    - formatting.py: Literal formatting shared by builders and predicates
    - mssql/: SQL Server builder and formatter
    - mysql/: MySQL builder and formatter

Example:
    >>> from dbwrapper.query_builder import get_query_builder
    >>> from dbwrapper.operations import Select
    >>>
    >>> builder = get_query_builder("mysql", schema)
    >>> builder.build_query(Select(table_name="users", max_results=5))
    'SELECT * FROM users LIMIT 5'
"""

# Re-export key classes for convenience
from dbwrapper.query_builder.base import BaseQueryBuilder
from dbwrapper.query_builder.formatting import ValueFormatter, db_timestamp
from dbwrapper.query_builder.factory import (
    QueryBuilderFactory,
    get_query_builder,
    get_value_formatter,
)
from dbwrapper.query_builder.mssql import MsSqlQueryBuilder, MsSqlValueFormatter
from dbwrapper.query_builder.mysql import MySqlQueryBuilder, MySqlValueFormatter

__all__ = [
    "BaseQueryBuilder",
    "ValueFormatter",
    "db_timestamp",
    "QueryBuilderFactory",
    "get_query_builder",
    "get_value_formatter",
    "MsSqlQueryBuilder",
    "MsSqlValueFormatter",
    "MySqlQueryBuilder",
    "MySqlValueFormatter",
]
