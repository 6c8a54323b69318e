"""Unit tests for DatabaseClient against an in-memory executor."""

import logging
from datetime import datetime
from unittest.mock import Mock

import pandas as pd
import pytest

from dbwrapper.client import DatabaseClient
from dbwrapper.common.exceptions import DatabaseClientError, ErrorCode
from dbwrapper.constants import DatabaseType
from dbwrapper.expressions import Condition, Operator
from dbwrapper.query_builder import MsSqlQueryBuilder, MySqlQueryBuilder

from conftest import FakeExecutor


class TestConstruction:
    def test_loads_schema_on_construction(self, mssql_client, mssql_executor):
        assert mssql_client.db_type == DatabaseType.MSSQL
        assert isinstance(mssql_client.query_builder, MsSqlQueryBuilder)
        assert mssql_client.list_tables() == ["users", "logs"]
        assert any("INFORMATION_SCHEMA.Tables" in q for q in mssql_executor.queries)

    def test_mysql_client_uses_mysql_builder(self, mysql_client):
        assert isinstance(mysql_client.query_builder, MySqlQueryBuilder)

    def test_unreachable_schema_is_not_fatal(self, mysql_settings):
        executor = FakeExecutor().when("SHOW TABLES", RuntimeError("refused"))
        client = DatabaseClient(mysql_settings, executor=executor)
        assert client.list_tables() == []

    def test_connect_builds_settings(self, mysql_executor):
        client = DatabaseClient.connect(
            "MySql", "db.local", 3306, "app", "secret", None, "appdb", executor=mysql_executor
        )
        assert client.settings.server_port == 3306
        assert client.settings.password_value == "secret"
        assert client.get_primary_key_column("users") == "id"

    @pytest.mark.parametrize(
        "server_ip, server_port, database",
        [
            ("", 1433, "appdb"),
            ("db.local", 1433, " "),
            ("db.local", -1, "appdb"),
            ("db.local", None, "appdb"),
        ],
    )
    def test_connect_rejects_invalid_arguments(self, mssql_executor, server_ip, server_port, database):
        with pytest.raises(DatabaseClientError) as exc_info:
            DatabaseClient.connect(
                "mssql", server_ip, server_port, None, None, None, database, executor=mssql_executor
            )
        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT

    def test_connect_rejects_unknown_dialect(self, mssql_executor):
        with pytest.raises(DatabaseClientError) as exc_info:
            DatabaseClient.connect("oracle", "db.local", 0, None, None, None, "appdb", executor=mssql_executor)
        assert exc_info.value.error_code == ErrorCode.DIALECT_NOT_SUPPORTED

    def test_connect_reports_bad_settings_as_configuration_error(self, mssql_executor):
        with pytest.raises(DatabaseClientError) as exc_info:
            DatabaseClient.connect(
                "mssql", "db.local", 0, None, None, None, "appdb",
                executor=mssql_executor, sql_pool_size=0,
            )
        assert exc_info.value.error_code == ErrorCode.CONFIG_ERROR

    def test_from_env(self, monkeypatch, mysql_executor):
        monkeypatch.setenv("DBWRAPPER_DB_TYPE", "MYSQL")
        monkeypatch.setenv("DBWRAPPER_SERVER_IP", "10.0.0.5")
        monkeypatch.setenv("DBWRAPPER_DATABASE", "appdb")
        monkeypatch.setattr("dbwrapper.settings.main._settings", None)

        client = DatabaseClient.from_env(executor=mysql_executor)
        assert client.db_type == DatabaseType.MYSQL
        assert client.settings.server_ip == "10.0.0.5"


    def test_log_level_applies_to_package_logger(self, mssql_settings, mssql_executor):
        settings = mssql_settings.model_copy(update={"log_level": "WARNING"})
        DatabaseClient(settings, executor=mssql_executor)
        assert logging.getLogger("dbwrapper").level == logging.WARNING

    @pytest.mark.parametrize("configure_logging, calls", [(True, 1), (False, 0)])
    def test_from_env_can_configure_logging(self, monkeypatch, mysql_executor, configure_logging, calls):
        monkeypatch.setenv("DBWRAPPER_DB_TYPE", "mysql")
        monkeypatch.setenv("DBWRAPPER_SERVER_IP", "10.0.0.5")
        monkeypatch.setenv("DBWRAPPER_DATABASE", "appdb")
        monkeypatch.setenv("DBWRAPPER_LOG_LEVEL", "debug")
        monkeypatch.setattr("dbwrapper.settings.main._settings", None)
        setup = Mock()
        monkeypatch.setattr("dbwrapper.client.setup_logging", setup)

        DatabaseClient.from_env(executor=mysql_executor, configure_logging=configure_logging)

        assert setup.call_count == calls
        if calls:
            setup.assert_called_once_with("DEBUG")
        assert logging.getLogger("dbwrapper").level == logging.DEBUG


class TestSchemaAccess:
    def test_describe_table(self, mssql_client):
        columns = mssql_client.describe_table("users")
        assert [c.name for c in columns] == ["id", "name", "age", "created"]

    def test_get_column_names(self, mysql_client):
        assert mysql_client.get_column_names("logs") == ["message"]

    def test_reload_schema_picks_up_new_tables(self, mysql_client, mysql_executor):
        mysql_executor.replace("SHOW TABLES", pd.DataFrame({"Tables_in_appdb": ["users", "logs", "tags"]}))
        assert mysql_client.reload_schema() == ["users", "logs", "tags"]


class TestSelect:
    def test_select_returns_rows(self, mssql_client, mssql_executor):
        mssql_executor.when("SELECT TOP 2", pd.DataFrame({"id": [1, 2]}))
        result = mssql_client.select("users", max_results=2, order_by_clause="ORDER BY id")
        assert list(result["id"]) == [1, 2]
        assert mssql_executor.queries[-1] == "SELECT TOP 2 * FROM users ORDER BY id"

    def test_zero_max_results_means_all_rows(self, mysql_client, mysql_executor):
        mysql_client.select("users", max_results=0)
        assert mysql_executor.queries[-1] == "SELECT * FROM users"

    @pytest.mark.parametrize("argument", ["index_start", "max_results"])
    def test_negative_counts_rejected(self, mysql_client, argument):
        with pytest.raises(DatabaseClientError) as exc_info:
            mysql_client.select("users", **{argument: -1})
        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT

    def test_blank_table_rejected(self, mysql_client):
        with pytest.raises(DatabaseClientError) as exc_info:
            mysql_client.select(" ")
        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT

    def test_invalid_statement_never_reaches_executor(self, mssql_client, mssql_executor):
        issued = len(mssql_executor.queries)
        with pytest.raises(DatabaseClientError):
            mssql_client.select("users", filter=Condition("missing", Operator.IS_NULL))
        assert len(mssql_executor.queries) == issued

    def test_get_unique_object_by_id(self, mssql_client, mssql_executor):
        mssql_client.get_unique_object_by_id("users", "id", 5)
        assert mssql_executor.queries[-1] == "SELECT TOP 1 * FROM users WHERE id = '5'"

    def test_get_unique_object_requires_value(self, mssql_client):
        with pytest.raises(DatabaseClientError) as exc_info:
            mssql_client.get_unique_object_by_id("users", "id", None)
        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT


class TestRowChanges:
    def test_mssql_insert_returns_output_rows(self, mssql_client, mssql_executor):
        mssql_executor.when("INSERT INTO users", pd.DataFrame({"id": [9], "name": ["Bob"]}))
        result = mssql_client.insert("users", {"name": "Bob"})
        assert result.iloc[0]["id"] == 9
        assert mssql_executor.queries[-1].startswith("INSERT INTO users WITH (ROWLOCK)")

    def test_mysql_insert_fetches_row_by_id(self, mysql_client, mysql_executor):
        mysql_executor.when("LAST_INSERT_ID()", pd.DataFrame({"id": [42]}))
        mysql_executor.when("WHERE id=42", pd.DataFrame({"id": [42], "name": ["Bob"]}))

        result = mysql_client.insert("users", {"name": "Bob"})

        assert result.iloc[0]["name"] == "Bob"
        assert mysql_executor.queries[-1] == "SELECT * FROM users WHERE id=42"

    def test_mysql_insert_without_id_returns_none(self, mysql_client):
        assert mysql_client.insert("users", {"name": "Bob"}) is None

    def test_mysql_insert_without_primary_key_is_rejected_before_execution(self, mysql_client, mysql_executor):
        issued = len(mysql_executor.queries)
        with pytest.raises(DatabaseClientError) as exc_info:
            mysql_client.insert("logs", {"message": "hello"})
        assert exc_info.value.error_code == ErrorCode.NO_PRIMARY_KEY
        assert len(mysql_executor.queries) == issued

    def test_insert_requires_values(self, mssql_client):
        with pytest.raises(DatabaseClientError) as exc_info:
            mssql_client.insert("users", {})
        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT

    def test_update(self, mysql_client, mysql_executor):
        mysql_client.update("users", {"age": 31}, Condition("id", Operator.EQUALS, 1))
        assert mysql_executor.queries[-1] == "UPDATE users SET age='31' WHERE id = '1'"

    def test_delete_requires_filter(self, mysql_client, mysql_executor):
        issued = len(mysql_executor.queries)
        with pytest.raises(DatabaseClientError) as exc_info:
            mysql_client.delete("users", None)
        assert exc_info.value.error_code == ErrorCode.MISSING_FILTER
        assert len(mysql_executor.queries) == issued

    def test_delete(self, mssql_client, mssql_executor):
        mssql_client.delete("users", Condition("age", Operator.LESS_THAN, 18))
        assert mssql_executor.queries[-1] == "DELETE FROM users WITH (ROWLOCK) WHERE age < '18'"

    def test_truncate(self, mssql_client, mssql_executor):
        assert mssql_client.truncate("logs") is None
        assert mssql_executor.queries[-1] == "TRUNCATE TABLE logs"

    def test_raw_query(self, mysql_client, mysql_executor):
        mysql_executor.when("SELECT VERSION()", pd.DataFrame({"v": ["8.0"]}))
        result = mysql_client.raw_query("SELECT VERSION()")
        assert result.iloc[0]["v"] == "8.0"

    def test_raw_query_requires_text(self, mysql_client):
        with pytest.raises(DatabaseClientError) as exc_info:
            mysql_client.raw_query("")
        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT

    def test_executor_errors_propagate(self, mysql_client, mysql_executor):
        mysql_executor.when("DELETE FROM users", RuntimeError("lock wait timeout"))
        with pytest.raises(RuntimeError):
            mysql_client.delete("users", Condition("id", Operator.EQUALS, 1))


class TestTimestamp:
    def test_dialect_format(self, mssql_client, mysql_client):
        ts = datetime(2024, 3, 5, 13, 2, 3, 123456)
        assert mssql_client.timestamp(ts) == "03/05/2024 01:02:03.1234560 PM"
        assert mysql_client.timestamp(ts) == "2024-03-05 13:02:03.123456"

    def test_requires_value(self, mysql_client):
        with pytest.raises(DatabaseClientError):
            mysql_client.timestamp(None)


class TestDebugLogging:
    def test_raw_query_logging(self, mssql_settings, mssql_executor, caplog):
        settings = mssql_settings.model_copy(update={"debug_raw_query": True})
        client = DatabaseClient(settings, executor=mssql_executor)

        with caplog.at_level(logging.INFO, logger="dbwrapper.client"):
            client.select("users")

        records = [r for r in caplog.records if r.getMessage() == "Executing query"]
        assert records and records[-1].query == "SELECT * FROM users"
        assert records[-1].table == "users"

    def test_row_count_logging(self, mysql_settings, mysql_executor, caplog):
        settings = mysql_settings.model_copy(update={"debug_result_row_count": True})
        client = DatabaseClient(settings, executor=mysql_executor)
        mysql_executor.when("SELECT * FROM users", pd.DataFrame({"id": [1, 2, 3]}))

        with caplog.at_level(logging.INFO, logger="dbwrapper.client"):
            client.select("users")

        records = [r for r in caplog.records if r.getMessage() == "Query returned rows"]
        assert records[-1].row_count == 3

    def test_quiet_by_default(self, mysql_client, caplog):
        with caplog.at_level(logging.INFO, logger="dbwrapper.client"):
            mysql_client.select("users")
        assert not [r for r in caplog.records if r.getMessage() == "Executing query"]
