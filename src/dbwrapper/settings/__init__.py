"""Settings for dbwrapper built on Pydantic Settings.

Configuration Sources (precedence order):
    1. Explicit keyword arguments
    2. Environment Variables (``DBWRAPPER_`` prefix)
    3. ``.env`` file in the working directory
    4. Default Values in code

Quick Start:
    >>> from dbwrapper.settings import get_settings
    >>> settings = get_settings()
    >>> settings.db_type
    <DatabaseType.MSSQL: 'mssql'>
"""

from .base import DbWrapperBaseSettings
from .main import ClientSettings, get_settings, _reload_settings

__all__ = [
    "DbWrapperBaseSettings",
    "ClientSettings",
    "get_settings",
    "_reload_settings",
]
