"""MySQL engine backed by PyMySQL."""

from typing import Any, Dict, TYPE_CHECKING

from pymysql.constants import CLIENT
from sqlalchemy.engine import URL

from dbwrapper.engines.base import BaseSQLEngine

if TYPE_CHECKING:
    from dbwrapper.settings import ClientSettings


class MySqlEngine(BaseSQLEngine):
    """SQL engine implementation for MySQL.

    Multi-statement batches are enabled so an INSERT and its
    ``LAST_INSERT_ID()`` lookup travel in one round trip.
    """

    def __init__(self, settings: 'ClientSettings'):
        super().__init__(settings)
        self._connection_info["platform"] = "mysql"

    def build_url(self) -> URL:
        return URL.create(
            drivername="mysql+pymysql",
            username=self.settings.username,
            password=self.settings.password_value,
            host=self.settings.server_ip,
            port=self.settings.server_port or None,
            database=self.settings.database,
            query={"charset": "utf8mb4"},
        )

    def _connect_args(self) -> Dict[str, Any]:
        return {
            "autocommit": True,
            "client_flag": CLIENT.MULTI_STATEMENTS | CLIENT.FOUND_ROWS,
        }
