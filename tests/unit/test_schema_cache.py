"""Unit tests for schema introspection and the schema cache."""

import threading

import pandas as pd
import pytest

from dbwrapper.common.exceptions import DatabaseClientError, ErrorCode
from dbwrapper.schema import (
    MsSqlSchemaIntrospector,
    MySqlSchemaIntrospector,
    SchemaCache,
    get_schema_introspector,
)

from conftest import MSSQL_USERS, MYSQL_USERS, FakeExecutor, mssql_columns


class TestIntrospectors:
    def test_mssql_queries(self):
        introspector = MsSqlSchemaIntrospector("appdb")
        assert introspector.table_names_query() == (
            "SELECT TABLE_NAME FROM appdb.INFORMATION_SCHEMA.Tables WHERE TABLE_TYPE = 'BASE TABLE'"
        )
        query = introspector.columns_query("users")
        assert "LEFT JOIN INFORMATION_SCHEMA.CONSTRAINT_COLUMN_USAGE" in query
        assert "WHERE col.TABLE_NAME = 'users' AND col.TABLE_CATALOG = 'appdb'" in query
        assert query.endswith("ORDER BY col.ORDINAL_POSITION")

    def test_mysql_queries(self):
        introspector = MySqlSchemaIntrospector("appdb")
        assert introspector.table_names_query() == "SHOW TABLES"
        assert introspector.columns_query("users") == (
            "SELECT * FROM INFORMATION_SCHEMA.COLUMNS WHERE TABLE_NAME = 'users' "
            "AND TABLE_SCHEMA = 'appdb' ORDER BY ORDINAL_POSITION"
        )

    def test_mysql_table_names_fall_back_to_first_column(self):
        introspector = MySqlSchemaIntrospector("AppDB")
        result = pd.DataFrame({"Tables_in_appdb": ["a", "b"]})
        assert introspector.parse_table_names(result) == ["a", "b"]

    def test_mssql_columns(self):
        columns = MsSqlSchemaIntrospector("appdb").parse_columns(MSSQL_USERS)
        assert [c.name for c in columns] == ["id", "name", "age", "created"]
        assert columns[0].is_primary_key and not columns[0].nullable
        assert columns[1].max_length == 64 and columns[1].nullable
        assert columns[2].max_length is None

    def test_mssql_duplicate_constraint_rows_are_merged(self):
        rows = mssql_columns(
            ("orders", "id", "NO", "int", None, "FK_orders_customer"),
            ("orders", "id", "NO", "int", None, "PK_orders"),
            ("orders", "total", "YES", "decimal", None, None),
        )
        columns = MsSqlSchemaIntrospector("appdb").parse_columns(rows)
        assert [c.name for c in columns] == ["id", "total"]
        assert columns[0].is_primary_key

    def test_mysql_columns(self):
        columns = MySqlSchemaIntrospector("appdb").parse_columns(MYSQL_USERS)
        assert [c.name for c in columns if c.is_primary_key] == ["id"]
        assert columns[1].data_type == "varchar"

    @pytest.mark.parametrize("result", [None, pd.DataFrame()])
    def test_missing_column_result_parses_to_nothing(self, result):
        assert MsSqlSchemaIntrospector("appdb").parse_columns(result) == []
        assert MySqlSchemaIntrospector("appdb").parse_columns(result) == []

    def test_factory(self):
        assert isinstance(get_schema_introspector("MSSQL", "appdb"), MsSqlSchemaIntrospector)
        assert isinstance(get_schema_introspector("mysql", "appdb"), MySqlSchemaIntrospector)

    def test_blank_database_rejected(self):
        with pytest.raises(DatabaseClientError) as exc_info:
            MySqlSchemaIntrospector(" ")
        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT


class TestSchemaCache:
    def test_refresh_loads_tables_and_columns(self, mssql_schema):
        assert mssql_schema.list_tables() == ["users", "logs"]
        assert mssql_schema.get_column_names("users") == ["id", "name", "age", "created"]
        assert mssql_schema.get_primary_key_column("users") == "id"
        assert mssql_schema.database == "appdb"

    def test_list_tables_returns_copy(self, mssql_schema):
        tables = mssql_schema.list_tables()
        tables.append("injected")
        assert "injected" not in mssql_schema.list_tables()

    def test_describe_unknown_table(self, mssql_schema):
        with pytest.raises(DatabaseClientError) as exc_info:
            mssql_schema.describe_table("orders")
        assert exc_info.value.error_code == ErrorCode.UNKNOWN_TABLE

    @pytest.mark.parametrize("name", [None, "", "  "])
    def test_blank_table_name(self, mssql_schema, name):
        with pytest.raises(DatabaseClientError) as exc_info:
            mssql_schema.describe_table(name)
        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT

    def test_table_without_primary_key(self, mssql_schema):
        with pytest.raises(DatabaseClientError) as exc_info:
            mssql_schema.get_primary_key_column("logs")
        assert exc_info.value.error_code == ErrorCode.NO_PRIMARY_KEY

    def test_failed_table_query_keeps_previous_state(self, mssql_schema, mssql_executor):
        mssql_executor.replace("INFORMATION_SCHEMA.Tables", RuntimeError("server gone"))
        assert mssql_schema.load_table_names() == ["users", "logs"]
        assert mssql_schema.has_table("users")

    def test_empty_table_query_keeps_previous_state(self, mssql_schema, mssql_executor):
        mssql_executor.replace("INFORMATION_SCHEMA.Tables", pd.DataFrame())
        mssql_schema.refresh()
        assert mssql_schema.list_tables() == ["users", "logs"]
        assert mssql_schema.get_column_names("logs") == ["message"]

    def test_failed_column_query_keeps_previous_columns(self, mssql_schema, mssql_executor):
        mssql_executor.replace("col.TABLE_NAME = 'users'", RuntimeError("timeout"))
        details = mssql_schema.load_table_details()
        assert [c.name for c in details["users"]] == ["id", "name", "age", "created"]

    def test_column_query_without_result_keeps_previous_columns(self, mssql_schema, mssql_executor):
        mssql_executor.replace("col.TABLE_NAME = 'users'", None)
        mssql_schema.refresh()
        assert mssql_schema.get_primary_key_column("users") == "id"

    def test_first_load_survives_column_query_without_result(self):
        executor = FakeExecutor()
        executor.when("SHOW TABLES", pd.DataFrame({"Tables_in_appdb": ["users"]}))
        executor.when("TABLE_NAME = 'users'", None)
        schema = SchemaCache(executor, MySqlSchemaIntrospector("appdb"))

        schema.refresh()

        assert schema.list_tables() == ["users"]
        assert schema.describe_table("users") == []

    def test_new_table_picked_up_on_reload(self, mssql_schema, mssql_executor):
        mssql_executor.replace(
            "INFORMATION_SCHEMA.Tables", pd.DataFrame({"TABLE_NAME": ["users", "logs", "audit"]})
        )
        mssql_executor.when(
            "col.TABLE_NAME = 'audit'",
            mssql_columns(("audit", "audit_id", "NO", "int", None, "PK_audit")),
        )
        mssql_schema.refresh()
        assert mssql_schema.get_primary_key_column("audit") == "audit_id"

    def test_dropped_table_disappears_on_reload(self, mssql_schema, mssql_executor):
        mssql_executor.replace("INFORMATION_SCHEMA.Tables", pd.DataFrame({"TABLE_NAME": ["users"]}))
        mssql_schema.refresh()
        assert mssql_schema.list_tables() == ["users"]
        assert not mssql_schema.has_table("logs")

    def test_failed_first_load_leaves_cache_empty(self):
        executor = FakeExecutor().when("SHOW TABLES", RuntimeError("refused"))
        schema = SchemaCache(executor, MySqlSchemaIntrospector("appdb"))
        schema.refresh()
        assert schema.list_tables() == []

    def test_readers_see_consistent_snapshots(self, mysql_schema):
        errors = []

        def read():
            for _ in range(200):
                try:
                    if mysql_schema.has_table("users"):
                        assert mysql_schema.get_primary_key_column("users") == "id"
                except Exception as e:
                    errors.append(e)

        readers = [threading.Thread(target=read) for _ in range(4)]
        for thread in readers:
            thread.start()
        for _ in range(5):
            mysql_schema.refresh()
        for thread in readers:
            thread.join()

        assert errors == []
