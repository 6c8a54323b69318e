"""Type definitions for dbwrapper."""

from dbwrapper.types.base import DbWrapperBaseModel
from dbwrapper.types.schema import ColumnMetadata

__all__ = [
    "DbWrapperBaseModel",
    "ColumnMetadata",
]
