"""Unit tests for the SQLAlchemy engines (no live server required)."""

from unittest.mock import MagicMock
from urllib import parse

import pytest

pytest.importorskip("pyodbc")

from dbwrapper.common.exceptions import DatabaseClientError, ErrorCode
from dbwrapper.engines import BaseSQLEngine, MsSqlEngine, MySqlEngine, SQLEngineFactory
from dbwrapper.settings import ClientSettings


class FakeCursor:
    """DBAPI cursor stand-in serving a list of result sets.

    Each set is ``None`` for a statement without rows, or a
    ``(columns, rows)`` tuple.
    """

    def __init__(self, result_sets, error=None):
        self._sets = list(result_sets)
        self._index = 0
        self._error = error
        self.executed = []
        self.closed = False

    @property
    def description(self):
        current = self._sets[self._index] if self._index < len(self._sets) else None
        if current is None:
            return None
        return [(name, None, None, None, None, None, None) for name in current[0]]

    def execute(self, query):
        self.executed.append(query)
        if self._error is not None:
            raise self._error

    def fetchall(self):
        return list(self._sets[self._index][1])

    def nextset(self):
        if self._index + 1 >= len(self._sets):
            return None
        self._index += 1
        return True

    def close(self):
        self.closed = True


def _attach(engine: BaseSQLEngine, cursor: FakeCursor) -> MagicMock:
    conn = MagicMock()
    conn.connection.cursor.return_value = cursor
    sa_engine = MagicMock()
    sa_engine.connect.return_value = conn
    engine._engine = sa_engine
    return conn


@pytest.fixture
def mysql_engine():
    settings = ClientSettings(
        db_type="mysql", server_ip="db.local", server_port=3306,
        username="app", password="p@ss", database="appdb",
    )
    return MySqlEngine(settings)


class TestMsSqlEngine:
    def test_odbc_string_with_credentials(self):
        settings = ClientSettings(
            db_type="mssql", server_ip="10.0.0.1", server_port=1433,
            username="sa", password="secret", instance="SQLEXPRESS", database="appdb",
        )
        engine = MsSqlEngine(settings)
        assert engine.build_odbc_string() == (
            "Driver={ODBC Driver 18 for SQL Server};Server=10.0.0.1\\SQLEXPRESS,1433;"
            "Database=appdb;UID=sa;PWD=secret;"
        )

    def test_integrated_security(self):
        settings = ClientSettings(
            db_type="mssql", server_ip="10.0.0.1", database="appdb",
            odbc_extra={"TrustServerCertificate": "yes"},
        )
        engine = MsSqlEngine(settings)
        assert engine.build_odbc_string() == (
            "Driver={ODBC Driver 18 for SQL Server};Server=10.0.0.1;Database=appdb;"
            "Trusted_Connection=yes;TrustServerCertificate=yes;"
        )
        assert engine.get_connection_info()["integrated_security"] is True

    def test_url_wraps_odbc_string(self):
        engine = MsSqlEngine(ClientSettings(db_type="mssql", server_ip="h", database="d"))
        url = engine.build_url()
        assert url.startswith("mssql+pyodbc:///?odbc_connect=")
        assert parse.unquote_plus(url.split("=", 1)[1]) == engine.build_odbc_string()

    def test_date_format_applied_per_connection(self):
        engine = MsSqlEngine(ClientSettings(db_type="mssql", server_ip="h", database="d"))
        conn = _attach(engine, FakeCursor([None]))
        engine.execute("DELETE FROM users WHERE id = '1'")
        statement = conn.execute.call_args[0][0]
        assert str(statement) == "SET DATEFORMAT mdy"


class TestMySqlEngine:
    def test_url(self, mysql_engine):
        url = mysql_engine.build_url()
        assert url.drivername == "mysql+pymysql"
        assert url.host == "db.local"
        assert url.port == 3306
        assert url.password == "p@ss"
        assert url.database == "appdb"
        assert url.query["charset"] == "utf8mb4"

    def test_default_port_is_omitted(self):
        engine = MySqlEngine(ClientSettings(db_type="mysql", server_ip="h", database="d"))
        assert engine.build_url().port is None

    def test_multi_statements_enabled(self, mysql_engine):
        from pymysql.constants import CLIENT

        args = mysql_engine._connect_args()
        assert args["client_flag"] & CLIENT.MULTI_STATEMENTS


class TestExecute:
    def test_returns_first_result_set(self, mysql_engine):
        cursor = FakeCursor([(["id", "name"], [(1, "a"), (2, "b")])])
        conn = _attach(mysql_engine, cursor)

        df = mysql_engine.execute("SELECT id, name FROM users")

        assert list(df.columns) == ["id", "name"]
        assert df["name"].tolist() == ["a", "b"]
        assert cursor.closed
        conn.commit.assert_called_once()
        conn.close.assert_called_once()

    def test_skips_statements_without_rows(self, mysql_engine):
        cursor = FakeCursor([None, None, (["id"], [(42,)]), None])
        _attach(mysql_engine, cursor)

        df = mysql_engine.execute("START TRANSACTION; INSERT ...; SELECT LAST_INSERT_ID() AS id; COMMIT;")

        assert df["id"].tolist() == [42]
        assert cursor._index == 3

    def test_no_rows_gives_empty_frame(self, mysql_engine):
        _attach(mysql_engine, FakeCursor([None]))
        assert mysql_engine.execute("TRUNCATE TABLE logs").empty

    def test_driver_error_is_wrapped(self, mysql_engine):
        cursor = FakeCursor([None], error=RuntimeError("syntax error"))
        conn = _attach(mysql_engine, cursor)

        with pytest.raises(DatabaseClientError) as exc_info:
            mysql_engine.execute("SELEC 1")

        assert exc_info.value.error_code == ErrorCode.QUERY_EXECUTION_ERROR
        assert exc_info.value.details["query"] == "SELEC 1"
        assert cursor.closed
        conn.close.assert_called_once()

    def test_test_connection(self, mysql_engine):
        _attach(mysql_engine, FakeCursor([(["test"], [(1,)])]))
        assert mysql_engine.test_connection() is True

    def test_test_connection_failure(self, mysql_engine):
        _attach(mysql_engine, FakeCursor([None], error=RuntimeError("down")))
        assert mysql_engine.test_connection() is False

    def test_dispose(self, mysql_engine):
        sa_engine = MagicMock()
        mysql_engine._engine = sa_engine
        mysql_engine.dispose()
        sa_engine.dispose.assert_called_once()
        assert mysql_engine._engine is None


class TestFactory:
    def test_creates_engine_for_dialect(self):
        mssql = SQLEngineFactory.create(ClientSettings(db_type="MSSQL", server_ip="h", database="d"))
        mysql = SQLEngineFactory.create(ClientSettings(db_type="mysql", server_ip="h", database="d"))
        assert isinstance(mssql, MsSqlEngine)
        assert isinstance(mysql, MySqlEngine)
        assert mysql.get_connection_info() == {"platform": "mysql", "server": "h", "database": "d"}
