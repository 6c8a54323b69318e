"""Query Builder Factory.

This module provides a factory for creating dialect-specific query
builders and value formatters from a database type.
"""

from typing import TYPE_CHECKING, Dict, Type, Union

from dbwrapper.constants.database import DatabaseType
from dbwrapper.query_builder.base import BaseQueryBuilder
from dbwrapper.query_builder.formatting import ValueFormatter
from dbwrapper.query_builder.mssql.builder import MsSqlQueryBuilder
from dbwrapper.query_builder.mssql.formatter import MsSqlValueFormatter
from dbwrapper.query_builder.mysql.builder import MySqlQueryBuilder
from dbwrapper.query_builder.mysql.formatter import MySqlValueFormatter

if TYPE_CHECKING:
    from dbwrapper.schema.cache import SchemaCache


_FORMATTERS: Dict[DatabaseType, ValueFormatter] = {
    DatabaseType.MSSQL: MsSqlValueFormatter(),
    DatabaseType.MYSQL: MySqlValueFormatter(),
}


class QueryBuilderFactory:
    """Factory for creating dialect-specific query builders.

    Example:
        >>> mssql = QueryBuilderFactory.create_mssql_builder(schema)
        >>> mysql = QueryBuilderFactory.create("mysql", schema)
    """

    _builders: Dict[DatabaseType, Type[BaseQueryBuilder]] = {
        DatabaseType.MSSQL: MsSqlQueryBuilder,
        DatabaseType.MYSQL: MySqlQueryBuilder,
    }

    @staticmethod
    def create_mssql_builder(schema: "SchemaCache") -> MsSqlQueryBuilder:
        """Create a SQL Server query builder bound to ``schema``."""
        return MsSqlQueryBuilder(schema)

    @staticmethod
    def create_mysql_builder(schema: "SchemaCache") -> MySqlQueryBuilder:
        """Create a MySQL query builder bound to ``schema``."""
        return MySqlQueryBuilder(schema)

    @classmethod
    def create(cls, db_type: Union[DatabaseType, str], schema: "SchemaCache") -> BaseQueryBuilder:
        """Create the query builder for ``db_type``.

        Args:
            db_type: Target dialect, as enum member or case-insensitive name
            schema: Schema cache the builder validates against

        Returns:
            Dialect-specific query builder

        Raises:
            DatabaseClientError: DIALECT_NOT_SUPPORTED for unknown types
        """
        return cls._builders[DatabaseType.parse(db_type)](schema)


# Union type for all concrete builders
ConcreteQueryBuilder = Union[MsSqlQueryBuilder, MySqlQueryBuilder]


def get_query_builder(db_type: Union[DatabaseType, str], schema: "SchemaCache") -> ConcreteQueryBuilder:
    """Get the query builder for ``db_type``."""
    return QueryBuilderFactory.create(db_type, schema)  # Returns Union type


def get_value_formatter(db_type: Union[DatabaseType, str]) -> ValueFormatter:
    """Get the shared, stateless value formatter for ``db_type``."""
    return _FORMATTERS[DatabaseType.parse(db_type)]
