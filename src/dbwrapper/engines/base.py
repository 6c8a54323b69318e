import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

import pandas as pd
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.pool import QueuePool

from dbwrapper.common.exceptions import DatabaseClientError, connection_error, query_execution_error
from dbwrapper.logging import get_logger
from dbwrapper.utils.decorators import traced

if TYPE_CHECKING:
    from dbwrapper.settings import ClientSettings

logger = get_logger(__name__)


class BaseSQLEngine(ABC):
    """SQLAlchemy-based statement executor.

    Implements the ``QueryExecutor`` protocol. Each call checks a
    connection out of a SQLAlchemy ``QueuePool``, runs the statement text
    on a raw DBAPI cursor and returns the first result set as a DataFrame.
    Dialect engines only provide the connection URL and hooks.

    Platform Customization:
        Subclasses implement or override:
        - build_url(): SQLAlchemy URL for the server
        - _connect_args(): Extra DBAPI connect arguments
        - _apply_connection_settings(): Per-connection SET commands

    Example:
        >>> engine = MySqlEngine(settings)
        >>> df = engine.execute("SELECT * FROM users")
    """

    def __init__(self, settings: 'ClientSettings'):
        """Initialize SQL engine.

        Args:
            settings: Client settings with server location and pool sizes
        """
        self.settings = settings
        self._engine: Optional[Engine] = None
        self._connection_info: Dict[str, Any] = {
            "platform": self.__class__.__name__.replace("Engine", "").lower(),
            "server": settings.server_ip,
            "database": settings.database,
        }

    @abstractmethod
    def build_url(self) -> Union[str, URL]:
        """Return the SQLAlchemy URL for the configured server."""
        pass

    def _connect_args(self) -> Dict[str, Any]:
        return {"autocommit": True}

    @property
    def engine(self) -> Engine:
        """Get or create SQLAlchemy engine with lazy initialization.

        Returns:
            Engine: Configured SQLAlchemy engine
        """
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """Create SQLAlchemy engine with connection pooling.

        Raises:
            DatabaseClientError: CONNECTION_ERROR if engine creation fails
        """
        platform = self._connection_info.get("platform", "sql")
        try:
            engine = create_engine(
                self.build_url(),
                poolclass=QueuePool,
                pool_pre_ping=True,  # Verify connections before use
                pool_size=self.settings.sql_pool_size,
                max_overflow=self.settings.sql_max_overflow,
                pool_timeout=self.settings.sql_pool_timeout,
                connect_args=self._connect_args(),
            )
            logger.info(
                f"Created {platform} engine",
                extra={"db.platform": platform, "database": self.settings.database},
            )
            return engine

        except Exception as e:
            raise connection_error(
                f"Failed to connect to {platform}",
                service=platform,
                host=self.settings.server_ip,
                cause=e
            )

    @contextmanager
    def _get_connection(self):
        """Get a database connection from the pool.

        Yields:
            Connection: Database connection with dialect settings applied
        """
        conn = self.engine.connect()
        try:
            self._apply_connection_settings(conn)
            yield conn
        finally:
            conn.close()

    def _apply_connection_settings(self, conn: Connection) -> None:
        """Apply dialect-specific connection settings.

        Args:
            conn: SQLAlchemy Connection object
        """
        pass

    def _span_attributes(self, query: str, *, operation: str) -> Dict[str, Any]:
        """Build OpenTelemetry span attributes for SQL operations."""
        platform = self._connection_info.get("platform", "sql")
        sanitized_query = (query or "").strip()
        if sanitized_query and len(sanitized_query) > 4096:
            sanitized_query = f"{sanitized_query[:4093]}..."

        attributes: Dict[str, Any] = {
            "db.system": platform,
            "db.name": self.settings.database,
            "db.operation": operation,
        }

        if sanitized_query:
            attributes["db.statement"] = sanitized_query
            attributes["db.statement.length"] = len(sanitized_query)

        return attributes

    @staticmethod
    def _first_result_frame(cursor) -> pd.DataFrame:
        """Read the first row-returning result set from ``cursor``.

        Later result sets are drained so every statement of a batch runs.
        """
        while cursor.description is None:
            if not cursor.nextset():
                return pd.DataFrame()

        columns = [column[0] for column in cursor.description]
        rows = [tuple(row) for row in cursor.fetchall()]

        while cursor.nextset():
            pass

        return pd.DataFrame.from_records(rows, columns=columns)

    @traced(
        span_name="dbwrapper.sql.execute",
        attribute_getter=lambda self, query: self._span_attributes(query, operation="execute"),
    )
    def execute(self, query: str) -> pd.DataFrame:
        """Execute statement text and return its first result set.

        Args:
            query: One statement or a ``;``-separated batch

        Returns:
            DataFrame of the first result set, empty when nothing returns rows

        Raises:
            DatabaseClientError: QUERY_EXECUTION_ERROR on any driver failure
        """
        start_time = time.time()
        payload: Dict[str, str] = {"db.platform": str(self._connection_info.get("platform", "sql"))}

        try:
            with self._get_connection() as conn:
                cursor = conn.connection.cursor()
                try:
                    cursor.execute(query)
                    df = self._first_result_frame(cursor)
                finally:
                    cursor.close()
                conn.commit()

            duration = time.time() - start_time
            logger.debug(
                "SQL query executed",
                extra={**payload, "rows": str(len(df)), "duration.seconds": f"{duration:.6f}"},
            )
            return df

        except DatabaseClientError:
            raise
        except Exception as exc:
            duration = time.time() - start_time
            logger.error(
                "SQL query failed",
                extra={**payload, "duration.seconds": f"{duration:.6f}", "error": str(exc)},
                exc_info=True,
            )
            raise query_execution_error(query, exc)

    def test_connection(self) -> bool:
        """Test if connection to the server is working.

        Returns:
            True if connection is successful, False otherwise
        """
        try:
            result = self.execute("SELECT 1 AS test")
            return not result.empty and int(result.iloc[0, 0]) == 1
        except Exception as exc:
            platform = str(self._connection_info.get("platform", "sql"))
            logger.error(
                "SQL connection test failed",
                extra={"db.platform": platform, "error": str(exc)},
                exc_info=True,
            )
            return False

    def get_connection_info(self) -> Dict[str, Any]:
        """Get connection information for debugging/logging.

        Returns:
            Dictionary with connection details (server, database, etc.)
        """
        return self._connection_info.copy()

    def dispose(self) -> None:
        """Close every pooled connection."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def __del__(self):
        """Clean up engine on deletion."""
        if getattr(self, "_engine", None) is not None:
            self._engine.dispose()
