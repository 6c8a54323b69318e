"""MySQL dialect."""

from dbwrapper.query_builder.mysql.builder import MySqlQueryBuilder
from dbwrapper.query_builder.mysql.formatter import MySqlValueFormatter

__all__ = [
    "MySqlQueryBuilder",
    "MySqlValueFormatter",
]
