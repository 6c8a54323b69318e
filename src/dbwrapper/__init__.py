
from dbwrapper.__version__ import __version__

from dbwrapper.client import DatabaseClient
from dbwrapper.constants import DatabaseType
from dbwrapper.expressions import (
    Combination,
    Condition,
    Operator,
    Predicate,
    compile_where,
    register_operator,
)
from dbwrapper.query_builder import db_timestamp
from dbwrapper.settings import ClientSettings, get_settings
from dbwrapper.types import ColumnMetadata

from dbwrapper.common.exceptions import DatabaseClientError, ErrorCode

# Logging (public API)
from dbwrapper.logging import setup_logging


__all__ = [
    "__version__",

    "DatabaseClient",
    "DatabaseType",
    "ClientSettings",
    "get_settings",
    "ColumnMetadata",

    # Expressions
    "Predicate",
    "Condition",
    "Combination",
    "Operator",
    "compile_where",
    "register_operator",

    "db_timestamp",

    # Exceptions (public API)
    "DatabaseClientError",
    "ErrorCode",

    "setup_logging",
]
