"""Schema metadata loading and caching."""

from dbwrapper.schema.cache import SchemaCache
from dbwrapper.schema.introspection import (
    MsSqlSchemaIntrospector,
    MySqlSchemaIntrospector,
    SchemaIntrospector,
    get_schema_introspector,
)

__all__ = [
    "SchemaCache",
    "SchemaIntrospector",
    "MsSqlSchemaIntrospector",
    "MySqlSchemaIntrospector",
    "get_schema_introspector",
]
