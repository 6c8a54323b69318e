"""SQL Server value formatting."""

from datetime import datetime
from typing import Any

from dbwrapper.constants.database import DatabaseType
from dbwrapper.constants.sql import MSSQL_TIMESTAMP_FORMAT
from dbwrapper.query_builder.formatting import ValueFormatter


_COMMENT_TOKENS = ("--", "/*", "*/")


class MsSqlValueFormatter(ValueFormatter):
    """Formats literals for SQL Server.

    Strings are stripped of control characters and comment markers before
    quotes are doubled. Non-ASCII strings get the ``N`` prefix.
    """

    db_type = DatabaseType.MSSQL
    national_prefix = "N"

    def sanitize(self, value: Any) -> str:
        if value is None:
            return ""
        text = str(value)
        if not text:
            return ""

        # Drop control characters, keep line breaks
        text = "".join(ch for ch in text if ord(ch) >= 32 or ch in "\r\n")

        # Removing one marker can join two halves into a new one
        while any(token in text for token in _COMMENT_TOKENS):
            for token in _COMMENT_TOKENS:
                text = text.replace(token, "")

        return text.replace("'", "''")

    def format_timestamp(self, ts: datetime) -> str:
        # 12-hour clock with seven fractional digits, e.g. 03/05/2024 01:02:03.1234560 PM
        return MSSQL_TIMESTAMP_FORMAT.format(
            month=ts.month,
            day=ts.day,
            year=ts.year,
            hour=ts.hour % 12 or 12,
            minute=ts.minute,
            second=ts.second,
            fraction=ts.microsecond * 10,
            meridiem="AM" if ts.hour < 12 else "PM",
        )
