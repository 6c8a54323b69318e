"""SQL Server engine.

Connects through pyodbc with an ODBC connection string passed to
SQLAlchemy as ``odbc_connect``.
"""

from typing import Any, Dict, TYPE_CHECKING
from urllib import parse

import pyodbc
from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

from dbwrapper.engines.base import BaseSQLEngine

if TYPE_CHECKING:
    from dbwrapper.settings import ClientSettings


class MsSqlEngine(BaseSQLEngine):
    """SQL engine implementation for Microsoft SQL Server."""

    def __init__(self, settings: 'ClientSettings'):
        super().__init__(settings)
        self._connection_info.update({
            "platform": "mssql",
            "instance": settings.instance,
            "integrated_security": settings.uses_integrated_security,
        })

    @property
    def server_address(self) -> str:
        """``host[\\instance][,port]`` as expected by the ODBC ``Server`` key."""
        server = self.settings.server_ip
        if self.settings.instance:
            server += f"\\{self.settings.instance}"
        if self.settings.server_port > 0:
            server += f",{self.settings.server_port}"
        return server

    def build_odbc_string(self) -> str:
        """Assemble the ODBC connection string from settings.

        Without a username and password, Windows integrated authentication
        (``Trusted_Connection=yes``) is used.
        """
        parts = [
            f"Driver={{{self.settings.odbc_driver}}}",
            f"Server={self.server_address}",
            f"Database={self.settings.database}",
        ]
        if self.settings.uses_integrated_security:
            parts.append("Trusted_Connection=yes")
        else:
            if self.settings.username:
                parts.append(f"UID={self.settings.username}")
            if self.settings.password_value:
                parts.append(f"PWD={self.settings.password_value}")
        for key, value in self.settings.odbc_extra.items():
            parts.append(f"{key}={value}")
        return ";".join(parts) + ";"

    def build_url(self) -> str:
        params = parse.quote_plus(self.build_odbc_string())
        return f"mssql+pyodbc:///?odbc_connect={params}"

    def _create_engine(self) -> Engine:
        # Disable pyodbc pooling as SQLAlchemy handles it
        pyodbc.pooling = False
        return super()._create_engine()

    def _apply_connection_settings(self, conn: Connection) -> None:
        """Make timestamp literals parse as month/day/year.

        Args:
            conn: SQLAlchemy Connection object
        """
        conn.execute(text("SET DATEFORMAT mdy"))

    def get_connection_info(self) -> Dict[str, Any]:
        info = super().get_connection_info()
        info["odbc_driver"] = self.settings.odbc_driver
        return info
