from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Type

import pandas as pd

from dbwrapper.common.exceptions import (
    missing_filter_error,
    unknown_column_error,
    unknown_table_error,
)
from dbwrapper.constants.database import DatabaseType
from dbwrapper.constants.sql import QueryType
from dbwrapper.expressions import Predicate, compile_where
from dbwrapper.operations import (
    BaseOperation,
    Delete,
    Insert,
    RawQuery,
    Select,
    Truncate,
    Update,
)
from dbwrapper.query_builder.formatting import ValueFormatter

if TYPE_CHECKING:
    from dbwrapper.schema.cache import SchemaCache


class BaseQueryBuilder(ABC):
    """Base interface for dialect statement builders.

    A builder turns operations into statement text for one dialect. It
    validates table and column references against the schema cache before
    producing any SQL, and routes every value through the dialect's
    ValueFormatter. Builders do NOT execute queries and keep no state
    between calls.

    Args:
        schema: Schema cache consulted for table, column and primary-key lookups
        formatter: Optional formatter override; defaults to ``formatter_class()``
    """

    db_type: DatabaseType
    formatter_class: Type[ValueFormatter]

    #: True when INSERT/UPDATE statements return the affected rows themselves.
    returns_inserted_rows: bool = False

    def __init__(self, schema: "SchemaCache", formatter: Optional[ValueFormatter] = None):
        self.schema = schema
        self.formatter = formatter or self.formatter_class()

    @abstractmethod
    def _build_select(self, operation: Select) -> str:
        """Build SELECT statement.

        Args:
            operation: Select operation

        Returns:
            Dialect-specific SELECT statement, paginated when requested
        """
        pass

    @abstractmethod
    def _build_insert(self, operation: Insert) -> str:
        """Build INSERT statement.

        Args:
            operation: Insert operation

        Returns:
            Dialect-specific INSERT statement
        """
        pass

    @abstractmethod
    def _build_update(self, operation: Update) -> str:
        """Build UPDATE statement.

        Args:
            operation: Update operation

        Returns:
            Dialect-specific UPDATE statement
        """
        pass

    @abstractmethod
    def _build_delete(self, operation: Delete) -> str:
        """Build DELETE statement.

        Args:
            operation: Delete operation

        Returns:
            Dialect-specific DELETE statement
        """
        pass

    def _build_truncate(self, operation: Truncate) -> str:
        self._validate_table(operation.table_name)
        return f"TRUNCATE TABLE {operation.table_name}"

    def _build_raw_query(self, operation: RawQuery) -> str:
        return operation.sql

    def build_query(self, operation: BaseOperation) -> str:
        """Build SQL query from operation.

        Main method that converts operations into dialect-specific SQL.

        Args:
            operation: Operation to convert to SQL

        Returns:
            Statement text ready for the executor

        Raises:
            NotImplementedError: If operation type is not supported
            DatabaseClientError: If the operation references unknown
                tables or columns, or lacks a required clause
        """
        operation_mapping = {
            QueryType.SELECT: self._build_select,
            QueryType.INSERT: self._build_insert,
            QueryType.UPDATE: self._build_update,
            QueryType.DELETE: self._build_delete,
            QueryType.TRUNCATE: self._build_truncate,
            QueryType.RAW_QUERY: self._build_raw_query,
        }

        builder_method = operation_mapping.get(operation.operation_type)
        if builder_method:
            return builder_method(operation)

        raise NotImplementedError(
            f"Operation type {operation.operation_type} not supported by {self.__class__.__name__}"
        )

    def build_insert_retrieval(
        self,
        table_name: str,
        primary_key: Optional[str],
        result: pd.DataFrame,
    ) -> Optional[str]:
        """Build the follow-up query that fetches a freshly inserted row.

        Dialects whose INSERT already returns the row return None.
        """
        return None

    def _validate_table(self, table_name: str) -> None:
        if not self.schema.has_table(table_name):
            raise unknown_table_error(table_name)

    def _validate_columns(self, table_name: str, column_names: Iterable[str]) -> None:
        """Raise UNKNOWN_COLUMN for the first name not present in the table."""
        known = set(self.schema.get_column_names(table_name))
        for name in column_names:
            if name not in known:
                raise unknown_column_error(table_name, name)

    def _validate_filter(self, table_name: str, expression: Optional[Predicate]) -> None:
        if expression is not None:
            self._validate_columns(table_name, expression.columns())

    def _require_filter(self, operation: Delete) -> Predicate:
        if operation.filter is None:
            raise missing_filter_error(operation.table_name)
        return operation.filter

    def where_clause(self, expression: Optional[Predicate]) -> str:
        """Return ``WHERE <expr>`` or an empty string when there is no filter."""
        fragment = compile_where(expression, self.formatter)
        return f"WHERE {fragment}" if fragment else ""

    def format_field_list(self, fields: Optional[List[str]]) -> str:
        """Sanitized, comma-joined projection; ``*`` when empty."""
        return self.formatter.format_identifier_list(fields)

    def format_column_list(self, values: Dict[str, Any]) -> str:
        return ",".join(values.keys())

    def format_value_list(self, values: Dict[str, Any]) -> str:
        return ",".join(self.formatter.format_literal(value) for value in values.values())

    def format_set_clause(self, values: Dict[str, Any]) -> str:
        """Format SET clause for UPDATE as ``col1=val1,col2=val2``."""
        return ",".join(
            f"{column}={self.formatter.format_literal(value)}"
            for column, value in values.items()
        )

    @staticmethod
    def join_clauses(*clauses: Optional[str]) -> str:
        """Join non-empty clauses with single spaces."""
        return " ".join(clause for clause in clauses if clause)

