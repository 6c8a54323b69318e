"""Schema introspection queries per dialect.

An introspector knows which catalog queries list the tables of a database
and describe their columns, and how to read the resulting DataFrames. It
never executes anything itself; :class:`~dbwrapper.schema.cache.SchemaCache`
runs the queries through the client's executor.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import pandas as pd

from dbwrapper.common.exceptions import invalid_argument_error
from dbwrapper.constants.database import DatabaseType
from dbwrapper.query_builder.mssql.formatter import MsSqlValueFormatter
from dbwrapper.query_builder.mysql.formatter import MySqlValueFormatter
from dbwrapper.types.schema import ColumnMetadata


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _parse_max_length(value: Any) -> Optional[int]:
    if _is_missing(value):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _text(value: Any) -> str:
    return "" if _is_missing(value) else str(value)


class SchemaIntrospector(ABC):
    """Builds catalog queries and parses their results for one database."""

    db_type: DatabaseType

    def __init__(self, database: str):
        if not database or not str(database).strip():
            raise invalid_argument_error("database")
        self.database = str(database).strip()

    @abstractmethod
    def table_names_query(self) -> str:
        pass

    @abstractmethod
    def columns_query(self, table_name: str) -> str:
        pass

    @abstractmethod
    def parse_table_names(self, result: pd.DataFrame) -> List[str]:
        pass

    @abstractmethod
    def is_primary_key(self, row: Dict[str, Any]) -> bool:
        """Return True when an introspection row marks a primary-key column."""
        pass

    def parse_columns(self, result: pd.DataFrame) -> List[ColumnMetadata]:
        """Convert column-introspection rows to ColumnMetadata.

        Rows are merged by column name, keeping first-seen order; a column
        is a primary key if any of its rows says so.
        """
        if result is None or result.empty:
            return []

        columns: Dict[str, ColumnMetadata] = {}
        for row in result.to_dict(orient="records"):
            name = _text(row.get("COLUMN_NAME"))
            if not name:
                continue

            is_pk = self.is_primary_key(row)
            existing = columns.get(name)
            if existing is not None:
                if is_pk and not existing.is_primary_key:
                    columns[name] = existing.model_copy(update={"is_primary_key": True})
                continue

            columns[name] = ColumnMetadata(
                name=name,
                data_type=_text(row.get("DATA_TYPE")),
                max_length=_parse_max_length(row.get("CHARACTER_MAXIMUM_LENGTH")),
                nullable=_text(row.get("IS_NULLABLE")).upper() == "YES",
                is_primary_key=is_pk,
            )
        return list(columns.values())


class MsSqlSchemaIntrospector(SchemaIntrospector):
    """INFORMATION_SCHEMA based introspection for SQL Server."""

    db_type = DatabaseType.MSSQL

    def __init__(self, database: str):
        super().__init__(database)
        self._formatter = MsSqlValueFormatter()

    def table_names_query(self) -> str:
        return (
            f"SELECT TABLE_NAME FROM {self._formatter.sanitize(self.database)}.INFORMATION_SCHEMA.Tables "
            "WHERE TABLE_TYPE = 'BASE TABLE'"
        )

    def columns_query(self, table_name: str) -> str:
        return (
            "SELECT col.TABLE_NAME, col.COLUMN_NAME, col.IS_NULLABLE, col.DATA_TYPE, "
            "col.CHARACTER_MAXIMUM_LENGTH, con.CONSTRAINT_NAME "
            "FROM INFORMATION_SCHEMA.COLUMNS col "
            "LEFT JOIN INFORMATION_SCHEMA.CONSTRAINT_COLUMN_USAGE con "
            "ON con.COLUMN_NAME = col.COLUMN_NAME AND con.TABLE_NAME = col.TABLE_NAME "
            f"WHERE col.TABLE_NAME = {self._formatter.quote(table_name)} "
            f"AND col.TABLE_CATALOG = {self._formatter.quote(self.database)} "
            "ORDER BY col.ORDINAL_POSITION"
        )

    def parse_table_names(self, result: pd.DataFrame) -> List[str]:
        if result is None or result.empty or "TABLE_NAME" not in result.columns:
            return []
        return [str(name) for name in result["TABLE_NAME"].tolist() if not _is_missing(name)]

    def is_primary_key(self, row: Dict[str, Any]) -> bool:
        return _text(row.get("CONSTRAINT_NAME")).startswith("PK_")


class MySqlSchemaIntrospector(SchemaIntrospector):
    """SHOW TABLES / INFORMATION_SCHEMA introspection for MySQL."""

    db_type = DatabaseType.MYSQL

    def __init__(self, database: str):
        super().__init__(database)
        self._formatter = MySqlValueFormatter()

    @property
    def table_names_column(self) -> str:
        return f"Tables_in_{self.database}"

    def table_names_query(self) -> str:
        return "SHOW TABLES"

    def columns_query(self, table_name: str) -> str:
        return (
            "SELECT * FROM INFORMATION_SCHEMA.COLUMNS "
            f"WHERE TABLE_NAME = {self._formatter.quote(table_name)} "
            f"AND TABLE_SCHEMA = {self._formatter.quote(self.database)} "
            "ORDER BY ORDINAL_POSITION"
        )

    def parse_table_names(self, result: pd.DataFrame) -> List[str]:
        if result is None or result.empty:
            return []
        # Server may fold the database name's case in the column header
        column = self.table_names_column
        if column not in result.columns:
            column = result.columns[0]
        return [str(name) for name in result[column].tolist() if not _is_missing(name)]

    def is_primary_key(self, row: Dict[str, Any]) -> bool:
        return _text(row.get("COLUMN_KEY")).upper() == "PRI"


def get_schema_introspector(db_type, database: str) -> SchemaIntrospector:
    """Create the introspector for ``db_type``."""
    introspectors = {
        DatabaseType.MSSQL: MsSqlSchemaIntrospector,
        DatabaseType.MYSQL: MySqlSchemaIntrospector,
    }
    return introspectors[DatabaseType.parse(db_type)](database)
