"""Thread-safe cache of table names and column metadata.

Loads are serialized by a re-entrant lock. Readers never lock: all state
lives in one immutable snapshot that a load replaces by reference, so a
reader sees either the previous or the new schema, never a mix.
"""

import threading
import time
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, List, Mapping, NamedTuple, Tuple

from dbwrapper.common.exceptions import (
    invalid_argument_error,
    no_primary_key_error,
    unknown_table_error,
)
from dbwrapper.logging import get_logger
from dbwrapper.types.schema import ColumnMetadata

if TYPE_CHECKING:
    from dbwrapper.protocols.executor import QueryExecutor
    from dbwrapper.schema.introspection import SchemaIntrospector


logger = get_logger(__name__)


class _SchemaSnapshot(NamedTuple):
    table_names: Tuple[str, ...]
    columns: Mapping[str, Tuple[ColumnMetadata, ...]]


_EMPTY_SNAPSHOT = _SchemaSnapshot((), MappingProxyType({}))


def _require_name(table_name: str) -> str:
    if table_name is None or not str(table_name).strip():
        raise invalid_argument_error("table_name")
    return str(table_name).strip()


class SchemaCache:
    """Table and column metadata for one database.

    The cache starts empty. ``refresh()`` (or ``load_table_names()``
    followed by ``load_table_details()``) populates it through the
    executor. A failed or empty introspection query is logged and leaves
    the last good state in place.

    Args:
        executor: Runs the introspection queries
        introspector: Supplies the dialect's catalog queries and parsers
    """

    def __init__(self, executor: "QueryExecutor", introspector: "SchemaIntrospector"):
        self._executor = executor
        self._introspector = introspector
        self._lock = threading.RLock()
        self._snapshot = _EMPTY_SNAPSHOT

    @property
    def database(self) -> str:
        return self._introspector.database

    def load_table_names(self) -> List[str]:
        """Reload the table name list.

        Returns:
            The table names held after the load attempt
        """
        with self._lock:
            query = self._introspector.table_names_query()
            try:
                result = self._executor.execute(query)
            except Exception as e:
                logger.warning(
                    "Table name query failed, keeping cached table list",
                    extra={"database": self.database, "error": str(e)},
                )
                return self.list_tables()

            names = self._introspector.parse_table_names(result)
            if not names:
                logger.warning(
                    "Table name query returned no rows, keeping cached table list",
                    extra={"database": self.database},
                )
                return self.list_tables()

            current = self._snapshot
            columns = {name: current.columns.get(name, ()) for name in names}
            self._snapshot = _SchemaSnapshot(tuple(names), MappingProxyType(columns))

            logger.debug(
                "Loaded table names",
                extra={"database": self.database, "table_count": len(names)},
            )
            return list(names)

    def load_table_details(self) -> Dict[str, List[ColumnMetadata]]:
        """Reload column metadata for every known table.

        Returns:
            Mapping of table name to its columns after the load
        """
        with self._lock:
            start_time = time.time()
            current = self._snapshot
            columns: Dict[str, Tuple[ColumnMetadata, ...]] = {}

            for table_name in current.table_names:
                previous = current.columns.get(table_name, ())
                query = self._introspector.columns_query(table_name)
                try:
                    result = self._executor.execute(query)
                except Exception as e:
                    logger.warning(
                        "Column query failed, keeping cached columns",
                        extra={"database": self.database, "table": table_name, "error": str(e)},
                    )
                    columns[table_name] = previous
                    continue

                parsed = self._introspector.parse_columns(result)
                if not parsed:
                    logger.warning(
                        "Column query returned no rows",
                        extra={"database": self.database, "table": table_name},
                    )
                    columns[table_name] = previous
                    continue
                columns[table_name] = tuple(parsed)

            self._snapshot = _SchemaSnapshot(current.table_names, MappingProxyType(columns))

            logger.debug(
                "Loaded table details",
                extra={
                    "database": self.database,
                    "table_count": len(columns),
                    "duration_seconds": time.time() - start_time,
                },
            )
            return {name: list(cols) for name, cols in columns.items()}

    def refresh(self) -> None:
        """Reload table names and then their column metadata."""
        with self._lock:
            self.load_table_names()
            self.load_table_details()

    def list_tables(self) -> List[str]:
        """Return a copy of the known table names."""
        return list(self._snapshot.table_names)

    def has_table(self, table_name: str) -> bool:
        return _require_name(table_name) in self._snapshot.columns

    def describe_table(self, table_name: str) -> List[ColumnMetadata]:
        """Return the columns of ``table_name``.

        Raises:
            DatabaseClientError: INVALID_ARGUMENT or UNKNOWN_TABLE
        """
        name = _require_name(table_name)
        columns = self._snapshot.columns.get(name)
        if columns is None:
            raise unknown_table_error(name)
        return list(columns)

    def get_column_names(self, table_name: str) -> List[str]:
        return [column.name for column in self.describe_table(table_name)]

    def get_primary_key_column(self, table_name: str) -> str:
        """Return the first column flagged as primary key.

        Raises:
            DatabaseClientError: INVALID_ARGUMENT, UNKNOWN_TABLE or NO_PRIMARY_KEY
        """
        for column in self.describe_table(table_name):
            if column.is_primary_key:
                return column.name
        raise no_primary_key_error(str(table_name).strip())
