"""SQL Server statement builder.

Pagination uses a ROW_NUMBER() window wrapped in a derived table, row
changes carry a ROWLOCK hint, and INSERT/UPDATE return the affected rows
through ``OUTPUT INSERTED.*``.
"""

from dbwrapper.common.exceptions import missing_order_by_error
from dbwrapper.constants.database import DatabaseType
from dbwrapper.constants.sql import ROW_CONSTRAINED_ALIAS, ROW_NUMBER_ALIAS
from dbwrapper.operations import Delete, Insert, Select, Update
from dbwrapper.query_builder.base import BaseQueryBuilder
from dbwrapper.query_builder.mssql.formatter import MsSqlValueFormatter


class MsSqlQueryBuilder(BaseQueryBuilder):
    """Query builder for Microsoft SQL Server (T-SQL)."""

    db_type = DatabaseType.MSSQL
    formatter_class = MsSqlValueFormatter
    returns_inserted_rows = True

    def _build_select(self, operation: Select) -> str:
        """Build SELECT, windowed when ``index_start`` is set.

        Offset 0 keeps rows with ``__row_num__ > 0``; any other offset ``n``
        keeps ``__row_num__ >= n + 1``. Both bound the page by
        ``__row_num__ <= n + max_results`` so consecutive pages tile.

        Example:
            >>> builder._build_select(Select(table_name="users", index_start=10,
            ...     max_results=10, order_by_clause="ORDER BY id"))
            'SELECT * FROM (SELECT ROW_NUMBER() OVER ( ORDER BY id ) AS __row_num__, * FROM users) AS row_constrained_result WHERE __row_num__ >= 11 AND __row_num__ <= 20 ORDER BY __row_num__'
        """
        table = operation.table_name
        self._validate_table(table)
        self._validate_filter(table, operation.filter)

        fields = self.format_field_list(operation.return_fields)
        where = self.where_clause(operation.filter)

        if operation.index_start is None:
            top = f"TOP {operation.max_results}" if operation.max_results else ""
            return self.join_clauses(
                "SELECT", top, fields, f"FROM {table}", where, operation.order_by_clause
            )

        if not operation.order_by_clause:
            raise missing_order_by_error(table)

        inner = self.join_clauses(
            f"SELECT ROW_NUMBER() OVER ( {operation.order_by_clause} ) AS {ROW_NUMBER_ALIAS},",
            fields,
            f"FROM {table}",
            where,
        )

        start = operation.index_start
        if start == 0:
            lower = f"{ROW_NUMBER_ALIAS} > 0"
        else:
            lower = f"{ROW_NUMBER_ALIAS} >= {start + 1}"
        upper = f"AND {ROW_NUMBER_ALIAS} <= {start + operation.max_results}" if operation.max_results else ""

        return self.join_clauses(
            f"SELECT * FROM ({inner}) AS {ROW_CONSTRAINED_ALIAS}",
            f"WHERE {lower}",
            upper,
            f"ORDER BY {ROW_NUMBER_ALIAS}",
        )

    def _build_insert(self, operation: Insert) -> str:
        table = operation.table_name
        self._validate_table(table)
        self._validate_columns(table, operation.values.keys())

        return self.join_clauses(
            f"INSERT INTO {table} WITH (ROWLOCK)",
            f"({self.format_column_list(operation.values)})",
            "OUTPUT INSERTED.*",
            f"VALUES ({self.format_value_list(operation.values)})",
        )

    def _build_update(self, operation: Update) -> str:
        table = operation.table_name
        self._validate_table(table)
        self._validate_columns(table, operation.values.keys())
        self._validate_filter(table, operation.filter)

        return self.join_clauses(
            f"UPDATE {table} WITH (ROWLOCK)",
            f"SET {self.format_set_clause(operation.values)}",
            "OUTPUT INSERTED.*",
            self.where_clause(operation.filter),
        )

    def _build_delete(self, operation: Delete) -> str:
        table = operation.table_name
        self._validate_table(table)
        expression = self._require_filter(operation)
        self._validate_filter(table, expression)

        return self.join_clauses(
            f"DELETE FROM {table} WITH (ROWLOCK)",
            self.where_clause(expression),
        )
