"""Database operations module.

This module provides data structures that describe database operations
independent of how they are executed. Operations are pure data that are
transformed into SQL by query builders and run by a QueryExecutor.
"""

# Base operation
from dbwrapper.operations.base import BaseOperation

# DML operations
from dbwrapper.operations.dml import (
    Select,
    Insert,
    Update,
    Delete,
    Truncate,
    RawQuery,
)

__all__ = [
    # Base
    "BaseOperation",
    # DML
    "Select",
    "Insert",
    "Update",
    "Delete",
    "Truncate",
    "RawQuery",
]
