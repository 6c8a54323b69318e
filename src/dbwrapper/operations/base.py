"""Base operation definitions.

This module defines the base operation class that all database operations
inherit from. Operations are data structures that describe what database
action should be performed, independent of how it's executed.
"""

from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from dbwrapper.common.exceptions import invalid_argument_error
from dbwrapper.constants.sql import QueryType
from dbwrapper.types.base import DbWrapperBaseModel


def _stringify(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


class BaseOperation(DbWrapperBaseModel):
    """Base class for all database operations.

    Operations are pure data structures that describe WHAT to do,
    not HOW to do it. They are transformed into SQL by query builders
    and executed by a QueryExecutor.

    Attributes:
        operation_type: The type of operation to perform
        table_name: Name of the target table
        logging_context: Optional free-form attributes attached to log records
    """
    operation_type: QueryType
    table_name: str = Field(...)
    logging_context: Optional[Dict[str, Any]] = Field(default_factory=dict)

    @field_validator('table_name', mode='before')
    @classmethod
    def validate_table_name(cls, v: Any) -> str:
        """Reject null or blank table names."""
        if v is None or not str(v).strip():
            raise invalid_argument_error("table_name")
        return str(v).strip()

    def observability_attributes(self) -> Dict[str, str]:
        """Return key attributes useful for logging."""
        attrs: Dict[str, str] = {
            "table": self.table_name,
            "operation_type": self.operation_type.value,
        }
        for key, value in (self.logging_context or {}).items():
            sanitized = _stringify(value)
            if sanitized is not None:
                attrs[f"context_{key}"] = sanitized
        return attrs
