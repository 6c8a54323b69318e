"""SQL Server dialect."""

from dbwrapper.query_builder.mssql.builder import MsSqlQueryBuilder
from dbwrapper.query_builder.mssql.formatter import MsSqlValueFormatter

__all__ = [
    "MsSqlQueryBuilder",
    "MsSqlValueFormatter",
]
