"""MySQL value formatting."""

from datetime import datetime
from typing import Any

from pymysql.converters import escape_string

from dbwrapper.constants.database import DatabaseType
from dbwrapper.constants.sql import MYSQL_TIMESTAMP_FORMAT
from dbwrapper.query_builder.formatting import ValueFormatter


class MySqlValueFormatter(ValueFormatter):
    """Formats literals for MySQL using the driver's own string escaping."""

    db_type = DatabaseType.MYSQL

    def sanitize(self, value: Any) -> str:
        if value is None:
            return ""
        text = str(value)
        if not text:
            return ""
        return escape_string(text)

    def format_timestamp(self, ts: datetime) -> str:
        return MYSQL_TIMESTAMP_FORMAT.format(
            year=ts.year,
            month=ts.month,
            day=ts.day,
            hour=ts.hour,
            minute=ts.minute,
            second=ts.second,
            fraction=ts.microsecond,
        )
