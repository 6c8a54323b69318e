"""Dialect value formatting.

A ValueFormatter turns Python values into SQL literal text for one
dialect. Statement builders and the predicate compiler both route every
right-hand value through it, so quoting and escaping rules live in a
single place per dialect.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Union

from dbwrapper.constants.database import DatabaseType


class ValueFormatter(ABC):
    """Abstract base class for dialect literal formatting.

    Subclasses implement ``sanitize`` and ``format_timestamp``; the literal
    rules built on top of them are shared.
    """

    db_type: DatabaseType

    #: Prefix applied to string literals that carry non-ASCII characters.
    national_prefix: str = ""

    @abstractmethod
    def sanitize(self, value: Any) -> str:
        """Escape ``value`` for embedding inside single quotes."""
        pass

    @abstractmethod
    def format_timestamp(self, ts: datetime) -> str:
        """Render ``ts`` in the dialect's timestamp literal format."""
        pass

    @staticmethod
    def has_extended_characters(value: str) -> bool:
        """Return True when ``value`` contains any non-ASCII character."""
        return any(ord(ch) > 127 for ch in value)

    def quote(self, value: Any) -> str:
        """Sanitize and wrap ``value`` in single quotes."""
        text = str(value)
        prefix = self.national_prefix if self.has_extended_characters(text) else ""
        return f"{prefix}'{self.sanitize(text)}'"

    def format_literal(self, value: Any) -> str:
        """Render ``value`` as a SQL literal.

        Args:
            value: Python value to render

        Returns:
            ``null`` for None, a quoted timestamp for datetimes, ``'1'``/``'0'``
            for booleans and a quoted, sanitized string otherwise.
        """
        if value is None:
            return "null"
        if isinstance(value, datetime):
            return f"'{self.format_timestamp(value)}'"
        if isinstance(value, bool):
            return "'1'" if value else "'0'"
        return self.quote(value)

    def format_like(self, value: Any, prefix: str = "", suffix: str = "") -> str:
        """Render a quoted LIKE pattern around the sanitized ``value``."""
        if value is None:
            value = ""
        text = str(value)
        national = self.national_prefix if self.has_extended_characters(text) else ""
        return f"{national}'{prefix}{self.sanitize(text)}{suffix}'"

    def format_identifier_list(self, names) -> str:
        """Join sanitized column names with commas, ``*`` when empty."""
        if not names:
            return "*"
        return ",".join(self.sanitize(name) for name in names)


def db_timestamp(db_type: Union[DatabaseType, str], ts: datetime) -> str:
    """Format ``ts`` for ``db_type`` without needing a client.

    Args:
        db_type: Target dialect, as enum member or its string value
        ts: Timestamp to render

    Returns:
        Unquoted timestamp text in the dialect's format
    """
    from dbwrapper.query_builder.factory import get_value_formatter

    return get_value_formatter(db_type).format_timestamp(ts)
