"""Dialect-neutral database client.

``DatabaseClient`` is the entry point of the package. It owns one schema
cache, one dialect query builder and one executor, and turns CRUD calls
into validated statements::

    >>> client = DatabaseClient.connect("mysql", "localhost", 3306, "app", "secret", None, "inventory")
    >>> client.select("users", max_results=10, filter=Condition("age", Operator.GREATER_THAN, 30))
"""

import time
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

import pandas as pd
from pydantic import ValidationError

from dbwrapper.common.exceptions import configuration_error, invalid_argument_error
from dbwrapper.constants.database import DatabaseType
from dbwrapper.expressions import Condition, Operator, Predicate
from dbwrapper.logging import get_logger, setup_logging
from dbwrapper.operations import (
    BaseOperation,
    Delete,
    Insert,
    RawQuery,
    Select,
    Truncate,
    Update,
)
from dbwrapper.protocols.executor import QueryExecutor
from dbwrapper.query_builder import BaseQueryBuilder, QueryBuilderFactory
from dbwrapper.schema import SchemaCache, get_schema_introspector
from dbwrapper.settings import ClientSettings, get_settings
from dbwrapper.types.schema import ColumnMetadata

logger = get_logger(__name__)


def _require_text(argument: str, value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        raise invalid_argument_error(argument)
    return str(value).strip()


class DatabaseClient:
    """CRUD access to one MSSQL or MySQL database.

    The schema is loaded once at construction and reloaded only through
    :meth:`reload_schema`. Every call validates its arguments and the
    referenced tables and columns before anything reaches the executor.
    The level of the ``dbwrapper`` logger follows ``settings.log_level``.

    Args:
        settings: Connection and debug settings
        executor: Statement executor; defaults to the SQL engine for
            ``settings.db_type``
    """

    def __init__(self, settings: ClientSettings, executor: Optional[QueryExecutor] = None):
        if settings is None:
            raise invalid_argument_error("settings")

        self.settings = settings
        self.db_type = DatabaseType.parse(settings.db_type)
        self.debug_raw_query = settings.debug_raw_query
        self.debug_result_row_count = settings.debug_result_row_count
        get_logger("dbwrapper").setLevel(settings.log_level)

        if executor is None:
            from dbwrapper.engines import get_sql_engine
            executor = get_sql_engine(settings)
        self._executor = executor

        self._schema = SchemaCache(executor, get_schema_introspector(self.db_type, settings.database))
        self._query_builder: BaseQueryBuilder = QueryBuilderFactory.create(self.db_type, self._schema)

        self._schema.refresh()
        logger.info(
            "Database client initialized",
            extra={
                "db_type": self.db_type.value,
                "server": settings.server_ip,
                "database": settings.database,
                "table_count": len(self._schema.list_tables()),
            },
        )

    @classmethod
    def connect(
        cls,
        db_type: Union[DatabaseType, str],
        server_ip: str,
        server_port: int,
        username: Optional[str],
        password: Optional[str],
        instance: Optional[str],
        database: str,
        executor: Optional[QueryExecutor] = None,
        **kwargs: Any,
    ) -> "DatabaseClient":
        """Create a client from explicit connection parameters.

        Raises:
            DatabaseClientError: INVALID_ARGUMENT for a missing server or
                database or a negative port, DIALECT_NOT_SUPPORTED for an
                unknown ``db_type``
        """
        _require_text("server_ip", server_ip)
        _require_text("database", database)
        if server_port is None or server_port < 0:
            raise invalid_argument_error("server_port", "Argument 'server_port' must not be negative")

        try:
            settings = ClientSettings(
                db_type=DatabaseType.parse(db_type),
                server_ip=server_ip,
                server_port=server_port,
                username=username,
                password=password,
                instance=instance,
                database=database,
                **kwargs,
            )
        except ValidationError as e:
            raise configuration_error(f"Invalid client configuration: {e}", cause=e)
        return cls(settings, executor=executor)

    @classmethod
    def from_env(
        cls,
        executor: Optional[QueryExecutor] = None,
        configure_logging: bool = False,
    ) -> "DatabaseClient":
        """Create a client from ``DBWRAPPER_*`` environment variables.

        Args:
            executor: Statement executor; defaults to the SQL engine
            configure_logging: Install the JSON console handler at
                ``DBWRAPPER_LOG_LEVEL`` through :func:`setup_logging`
        """
        try:
            settings = get_settings()
        except ValidationError as e:
            raise configuration_error(f"Invalid client configuration: {e}", cause=e)
        if configure_logging:
            setup_logging(settings.log_level)
        return cls(settings, executor=executor)

    @property
    def schema(self) -> SchemaCache:
        return self._schema

    @property
    def query_builder(self) -> BaseQueryBuilder:
        return self._query_builder

    def list_tables(self) -> List[str]:
        """List all tables in the database."""
        return self._schema.list_tables()

    def describe_table(self, table_name: str) -> List[ColumnMetadata]:
        """Show the columns and column metadata of a table."""
        return self._schema.describe_table(table_name)

    def get_primary_key_column(self, table_name: str) -> str:
        return self._schema.get_primary_key_column(table_name)

    def get_column_names(self, table_name: str) -> List[str]:
        return self._schema.get_column_names(table_name)

    def reload_schema(self) -> List[str]:
        """Reload table names and column metadata from the server.

        Returns:
            The table names known after the reload
        """
        self._schema.refresh()
        return self._schema.list_tables()

    def get_unique_object_by_id(self, table_name: str, column_name: str, value: Any) -> pd.DataFrame:
        """Retrieve at most one row whose ``column_name`` equals ``value``."""
        _require_text("table_name", table_name)
        _require_text("column_name", column_name)
        if value is None:
            raise invalid_argument_error("value")

        return self.select(
            table_name,
            index_start=None,
            max_results=1,
            return_fields=None,
            filter=Condition(column_name, Operator.EQUALS, value),
            order_by_clause=None,
        )

    def select(
        self,
        table_name: str,
        index_start: Optional[int] = None,
        max_results: Optional[int] = None,
        return_fields: Optional[List[str]] = None,
        filter: Optional[Predicate] = None,
        order_by_clause: Optional[str] = None,
    ) -> pd.DataFrame:
        """Execute a SELECT query.

        Args:
            table_name: Table to query
            index_start: Zero-based offset of the first row to return
            max_results: Maximum number of rows; None or 0 returns all
            return_fields: Columns to return; None or empty returns all
            filter: Predicate compiled to the WHERE clause
            order_by_clause: Full clause, e.g. ``ORDER BY id DESC``

        Returns:
            DataFrame with the matching rows
        """
        operation = Select(
            table_name=_require_text("table_name", table_name),
            index_start=index_start,
            max_results=max_results or None,
            return_fields=list(return_fields) if return_fields else None,
            filter=filter,
            order_by_clause=order_by_clause,
        )
        return self.execute_operation(operation)

    def insert(self, table_name: str, values: Dict[str, Any]) -> Optional[pd.DataFrame]:
        """Insert one row.

        Returns:
            The inserted row, or None when the MySQL insert id could not be read
        """
        table_name = _require_text("table_name", table_name)
        if not values:
            raise invalid_argument_error("values")

        operation = Insert(table_name=table_name, values=values)
        if self._query_builder.returns_inserted_rows:
            return self.execute_operation(operation)

        primary_key = self._schema.get_primary_key_column(table_name)
        result = self.execute_operation(operation)
        retrieval = self._query_builder.build_insert_retrieval(table_name, primary_key, result)
        if retrieval is None:
            return None
        return self._run(retrieval)

    def update(
        self,
        table_name: str,
        values: Dict[str, Any],
        filter: Optional[Predicate] = None,
    ) -> pd.DataFrame:
        """Update rows; every row when ``filter`` is None.

        Returns:
            The updated rows on SQL Server, an empty DataFrame on MySQL
        """
        table_name = _require_text("table_name", table_name)
        if not values:
            raise invalid_argument_error("values")

        return self.execute_operation(Update(table_name=table_name, values=values, filter=filter))

    def delete(self, table_name: str, filter: Optional[Predicate]) -> pd.DataFrame:
        """Delete the rows matching ``filter``.

        Raises:
            DatabaseClientError: MISSING_FILTER when ``filter`` is None
        """
        return self.execute_operation(
            Delete(table_name=_require_text("table_name", table_name), filter=filter)
        )

    def truncate(self, table_name: str) -> None:
        """Remove every row of a table."""
        self.execute_operation(Truncate(table_name=_require_text("table_name", table_name)))

    def raw_query(self, query: str) -> pd.DataFrame:
        """Execute caller-written SQL without validation or rewriting."""
        return self.execute_operation(RawQuery(sql=query))

    def timestamp(self, ts: datetime) -> str:
        """Format ``ts`` the way this client's dialect expects timestamp literals."""
        if ts is None:
            raise invalid_argument_error("ts")
        return self._query_builder.formatter.format_timestamp(ts)

    def execute_operation(self, operation: BaseOperation) -> pd.DataFrame:
        """Build the statement for ``operation`` and execute it."""
        query = self._query_builder.build_query(operation)
        return self._run(query, operation)

    def _run(self, query: str, operation: Optional[BaseOperation] = None) -> pd.DataFrame:
        attrs = operation.observability_attributes() if operation is not None else {}

        if self.debug_raw_query:
            logger.info("Executing query", extra={**attrs, "query": query})

        start_time = time.time()
        result = self._executor.execute(query)

        if self.debug_result_row_count:
            logger.info(
                "Query returned rows",
                extra={
                    **attrs,
                    "row_count": 0 if result is None else len(result),
                    "duration.seconds": f"{time.time() - start_time:.6f}",
                },
            )
        return result
