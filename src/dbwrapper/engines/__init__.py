"""SQL engines executing statement text against live servers.

Engines implement the ``QueryExecutor`` protocol: they manage pooled
connections and turn result sets into pandas DataFrames. Statement text
is produced elsewhere, by the query builders.
"""

from dbwrapper.engines.base import BaseSQLEngine
from dbwrapper.engines.factory import SQLEngineFactory, get_sql_engine
from dbwrapper.engines.mssql import MsSqlEngine
from dbwrapper.engines.mysql import MySqlEngine

__all__ = [
    "BaseSQLEngine",
    "MsSqlEngine",
    "MySqlEngine",
    "SQLEngineFactory",
    "get_sql_engine",
]
