"""Engine factory.

Maps a database type to its SQL engine implementation.
"""

from typing import Dict, Optional, Type

from dbwrapper.constants.database import DatabaseType
from dbwrapper.engines.base import BaseSQLEngine
from dbwrapper.engines.mssql import MsSqlEngine
from dbwrapper.engines.mysql import MySqlEngine
from dbwrapper.logging import get_logger
from dbwrapper.settings import ClientSettings, get_settings

logger = get_logger(__name__)


class SQLEngineFactory:
    """Factory for creating dialect SQL engines.

    Example:
        >>> engine = SQLEngineFactory.create(settings)
        >>> isinstance(engine, MySqlEngine)
        True
    """

    _engines: Dict[DatabaseType, Type[BaseSQLEngine]] = {
        DatabaseType.MSSQL: MsSqlEngine,
        DatabaseType.MYSQL: MySqlEngine,
    }

    @classmethod
    def create(cls, settings: Optional[ClientSettings] = None) -> BaseSQLEngine:
        """Create the engine for ``settings.db_type``.

        Args:
            settings: Client settings; defaults to ``get_settings()``

        Returns:
            Dialect SQL engine (not yet connected)
        """
        settings = settings or get_settings()
        engine_class = cls._engines[DatabaseType.parse(settings.db_type)]
        logger.debug(
            "Creating SQL engine",
            extra={"engine": engine_class.__name__, "database": settings.database},
        )
        return engine_class(settings)


def get_sql_engine(settings: Optional[ClientSettings] = None) -> BaseSQLEngine:
    """Get a SQL engine for the configured database type."""
    return SQLEngineFactory.create(settings)
