"""MySQL statement builder.

Pagination uses ``LIMIT``. INSERT runs in a small transaction that also
selects ``LAST_INSERT_ID()``; the inserted row is then fetched by primary
key with :meth:`MySqlQueryBuilder.build_insert_retrieval`.
"""

from typing import Optional

import pandas as pd

from dbwrapper.constants.database import DatabaseType
from dbwrapper.constants.sql import INSERTED_ID_ALIAS, MYSQL_MAX_LIMIT
from dbwrapper.logging import get_logger
from dbwrapper.operations import Delete, Insert, Select, Update
from dbwrapper.query_builder.base import BaseQueryBuilder
from dbwrapper.query_builder.mysql.formatter import MySqlValueFormatter

logger = get_logger(__name__)


class MySqlQueryBuilder(BaseQueryBuilder):
    """Query builder for MySQL."""

    db_type = DatabaseType.MYSQL
    formatter_class = MySqlValueFormatter
    returns_inserted_rows = False

    def _limit_clause(self, index_start: Optional[int], max_results: Optional[int]) -> str:
        if max_results:
            if index_start is not None:
                return f"LIMIT {index_start},{max_results}"
            return f"LIMIT {max_results}"
        if index_start:
            return f"LIMIT {index_start},{MYSQL_MAX_LIMIT}"
        return ""

    def _build_select(self, operation: Select) -> str:
        table = operation.table_name
        self._validate_table(table)
        self._validate_filter(table, operation.filter)

        return self.join_clauses(
            "SELECT",
            self.format_field_list(operation.return_fields),
            f"FROM {table}",
            self.where_clause(operation.filter),
            operation.order_by_clause,
            self._limit_clause(operation.index_start, operation.max_results),
        )

    def _build_insert(self, operation: Insert) -> str:
        table = operation.table_name
        self._validate_table(table)
        self._validate_columns(table, operation.values.keys())
        # The inserted row can only be read back through its primary key
        self.schema.get_primary_key_column(table)

        insert = self.join_clauses(
            f"INSERT INTO {table}",
            f"({self.format_column_list(operation.values)})",
            f"VALUES ({self.format_value_list(operation.values)})",
        )
        return f"START TRANSACTION; {insert}; SELECT LAST_INSERT_ID() AS {INSERTED_ID_ALIAS}; COMMIT;"

    def _build_update(self, operation: Update) -> str:
        table = operation.table_name
        self._validate_table(table)
        self._validate_columns(table, operation.values.keys())
        self._validate_filter(table, operation.filter)

        return self.join_clauses(
            f"UPDATE {table}",
            f"SET {self.format_set_clause(operation.values)}",
            self.where_clause(operation.filter),
        )

    def _build_delete(self, operation: Delete) -> str:
        table = operation.table_name
        self._validate_table(table)
        expression = self._require_filter(operation)
        self._validate_filter(table, expression)

        return self.join_clauses(
            f"DELETE FROM {table}",
            self.where_clause(expression),
        )

    def build_insert_retrieval(
        self,
        table_name: str,
        primary_key: Optional[str],
        result: pd.DataFrame,
    ) -> Optional[str]:
        """Build ``SELECT * FROM t WHERE pk=id`` from the LAST_INSERT_ID() result.

        Returns None when no integer id can be read from ``result``.
        """
        if not primary_key or result is None or result.empty:
            return None

        column = INSERTED_ID_ALIAS if INSERTED_ID_ALIAS in result.columns else result.columns[0]
        raw_id = result[column].iloc[0]
        try:
            inserted_id = int(raw_id)
        except (TypeError, ValueError):
            logger.warning(
                "Unable to read inserted id",
                extra={"table": table_name, "value": str(raw_id)},
            )
            return None

        return f"SELECT * FROM {table_name} WHERE {primary_key}={inserted_id}"
