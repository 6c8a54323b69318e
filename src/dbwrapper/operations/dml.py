"""Data Manipulation Language (DML) operations.

This module contains operation classes for SELECT, INSERT, UPDATE, DELETE
and TRUNCATE, plus pass-through raw statements.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from dbwrapper.common.exceptions import invalid_argument_error
from dbwrapper.constants.sql import QueryType
from dbwrapper.expressions import Predicate
from dbwrapper.operations.base import BaseOperation


def _require_values(v: Any) -> Dict[str, Any]:
    if not v:
        raise invalid_argument_error("values", "At least one column value is required")
    for key in v:
        if key is None or not str(key).strip():
            raise invalid_argument_error("values", "Column names in values must not be null or empty")
    return dict(v)


class Select(BaseOperation):
    """Select rows from one table.

    Supports:
    - Column projection (None or empty = SELECT *)
    - Filtering through a predicate expression
    - Offset/count pagination with an optional ORDER BY clause
    """
    operation_type: Literal[QueryType.SELECT] = Field(
        default=QueryType.SELECT,
        frozen=True
    )

    index_start: Optional[int] = Field(default=None)
    max_results: Optional[int] = Field(default=None)
    return_fields: Optional[List[str]] = Field(default=None)
    filter: Optional[Predicate] = Field(default=None)
    order_by_clause: Optional[str] = Field(default=None)

    @field_validator('index_start')
    @classmethod
    def validate_index_start(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise invalid_argument_error("index_start", "Argument 'index_start' must not be negative")
        return v

    @field_validator('max_results')
    @classmethod
    def validate_max_results(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise invalid_argument_error("max_results", "Argument 'max_results' must be greater than zero")
        return v

    @field_validator('order_by_clause')
    @classmethod
    def validate_order_by(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank ORDER BY clause as absent."""
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class Insert(BaseOperation):
    """Insert a single row given as column -> value."""
    operation_type: Literal[QueryType.INSERT] = Field(
        default=QueryType.INSERT,
        frozen=True
    )
    values: Dict[str, Any] = Field(...)

    @field_validator('values', mode='before')
    @classmethod
    def validate_values(cls, v: Any) -> Dict[str, Any]:
        return _require_values(v)


class Update(BaseOperation):
    """Update rows matching an optional filter."""
    operation_type: Literal[QueryType.UPDATE] = Field(
        default=QueryType.UPDATE,
        frozen=True
    )
    values: Dict[str, Any] = Field(...)
    filter: Optional[Predicate] = Field(default=None)  # None = every row

    @field_validator('values', mode='before')
    @classmethod
    def validate_values(cls, v: Any) -> Dict[str, Any]:
        return _require_values(v)


class Delete(BaseOperation):
    """Delete rows matching a filter.

    The filter is optional on the model so builders can report a
    MISSING_FILTER error instead of a validation error.
    """
    operation_type: Literal[QueryType.DELETE] = Field(
        default=QueryType.DELETE,
        frozen=True
    )
    filter: Optional[Predicate] = Field(default=None)


class Truncate(BaseOperation):
    """Remove every row of a table."""
    operation_type: Literal[QueryType.TRUNCATE] = Field(
        default=QueryType.TRUNCATE,
        frozen=True
    )


class RawQuery(BaseOperation):
    """Caller-supplied statement text, passed through verbatim."""
    operation_type: Literal[QueryType.RAW_QUERY] = Field(
        default=QueryType.RAW_QUERY,
        frozen=True
    )
    table_name: str = Field(default="")
    sql: str = Field(...)

    @field_validator('table_name', mode='before')
    @classmethod
    def validate_table_name(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator('sql', mode='before')
    @classmethod
    def validate_sql(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            raise invalid_argument_error("query")
        return str(v)
