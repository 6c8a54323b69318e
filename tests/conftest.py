"""Shared fixtures: an in-memory executor and pre-loaded schemas."""

import logging
from typing import List, Optional, Tuple, Union

import pandas as pd
import pytest

from dbwrapper.client import DatabaseClient
from dbwrapper.query_builder import MsSqlQueryBuilder, MySqlQueryBuilder
from dbwrapper.schema import MsSqlSchemaIntrospector, MySqlSchemaIntrospector, SchemaCache
from dbwrapper.settings import ClientSettings


class FakeExecutor:
    """Records statements and answers them from canned DataFrames.

    Responses are matched by substring in registration order; unmatched
    statements return an empty DataFrame.
    """

    def __init__(self):
        self.queries: List[str] = []
        self._responses: List[Tuple[str, Union[pd.DataFrame, Exception, None]]] = []

    def when(self, fragment: str, result: Union[pd.DataFrame, Exception, None]) -> "FakeExecutor":
        self._responses.append((fragment, result))
        return self

    def replace(self, fragment: str, result: Union[pd.DataFrame, Exception, None]) -> "FakeExecutor":
        self._responses = [(f, r) for f, r in self._responses if f != fragment]
        return self.when(fragment, result)

    def execute(self, query: str) -> Optional[pd.DataFrame]:
        self.queries.append(query)
        for fragment, result in self._responses:
            if fragment in query:
                if isinstance(result, Exception):
                    raise result
                return None if result is None else result.copy()
        return pd.DataFrame()


def mssql_columns(*rows) -> pd.DataFrame:
    return pd.DataFrame(
        list(rows),
        columns=[
            "TABLE_NAME",
            "COLUMN_NAME",
            "IS_NULLABLE",
            "DATA_TYPE",
            "CHARACTER_MAXIMUM_LENGTH",
            "CONSTRAINT_NAME",
        ],
    )


def mysql_columns(*rows) -> pd.DataFrame:
    return pd.DataFrame(
        list(rows),
        columns=[
            "TABLE_NAME",
            "COLUMN_NAME",
            "IS_NULLABLE",
            "DATA_TYPE",
            "CHARACTER_MAXIMUM_LENGTH",
            "COLUMN_KEY",
        ],
    )


MSSQL_USERS = mssql_columns(
    ("users", "id", "NO", "int", None, "PK_users"),
    ("users", "name", "YES", "nvarchar", 64, None),
    ("users", "age", "YES", "int", None, None),
    ("users", "created", "YES", "datetime2", None, None),
)

MSSQL_LOGS = mssql_columns(
    ("logs", "message", "YES", "nvarchar", "MAX", None),
)

MYSQL_USERS = mysql_columns(
    ("users", "id", "NO", "int", None, "PRI"),
    ("users", "name", "YES", "varchar", 64, ""),
    ("users", "age", "YES", "int", None, ""),
    ("users", "created", "YES", "datetime", None, ""),
)

MYSQL_LOGS = mysql_columns(
    ("logs", "message", "YES", "text", 65535, ""),
)


@pytest.fixture(autouse=True)
def reset_package_log_level():
    yield
    logging.getLogger("dbwrapper").setLevel(logging.NOTSET)


@pytest.fixture
def mssql_executor() -> FakeExecutor:
    executor = FakeExecutor()
    executor.when("INFORMATION_SCHEMA.Tables", pd.DataFrame({"TABLE_NAME": ["users", "logs"]}))
    executor.when("col.TABLE_NAME = 'users'", MSSQL_USERS)
    executor.when("col.TABLE_NAME = 'logs'", MSSQL_LOGS)
    return executor


@pytest.fixture
def mysql_executor() -> FakeExecutor:
    executor = FakeExecutor()
    executor.when("SHOW TABLES", pd.DataFrame({"Tables_in_appdb": ["users", "logs"]}))
    executor.when("TABLE_NAME = 'users'", MYSQL_USERS)
    executor.when("TABLE_NAME = 'logs'", MYSQL_LOGS)
    return executor


@pytest.fixture
def mssql_schema(mssql_executor) -> SchemaCache:
    schema = SchemaCache(mssql_executor, MsSqlSchemaIntrospector("appdb"))
    schema.refresh()
    return schema


@pytest.fixture
def mysql_schema(mysql_executor) -> SchemaCache:
    schema = SchemaCache(mysql_executor, MySqlSchemaIntrospector("appdb"))
    schema.refresh()
    return schema


@pytest.fixture
def mssql_builder(mssql_schema) -> MsSqlQueryBuilder:
    return MsSqlQueryBuilder(mssql_schema)


@pytest.fixture
def mysql_builder(mysql_schema) -> MySqlQueryBuilder:
    return MySqlQueryBuilder(mysql_schema)


@pytest.fixture
def mssql_settings() -> ClientSettings:
    return ClientSettings(db_type="mssql", server_ip="db.local", database="appdb")


@pytest.fixture
def mysql_settings() -> ClientSettings:
    return ClientSettings(db_type="mysql", server_ip="db.local", server_port=3306, database="appdb")


@pytest.fixture
def mssql_client(mssql_settings, mssql_executor) -> DatabaseClient:
    return DatabaseClient(mssql_settings, executor=mssql_executor)


@pytest.fixture
def mysql_client(mysql_settings, mysql_executor) -> DatabaseClient:
    return DatabaseClient(mysql_settings, executor=mysql_executor)
