from typing import Any, Dict, Optional

from pydantic import Field, SecretStr, field_validator

from dbwrapper.constants.database import DatabaseType
from .base import DbWrapperBaseSettings


class ClientSettings(DbWrapperBaseSettings):
    """Connection and behaviour settings for a DatabaseClient.

    Environment variables:
        DBWRAPPER_DB_TYPE: ``mssql`` or ``mysql`` (case-insensitive)
        DBWRAPPER_SERVER_IP: Hostname or IP address of the server
        DBWRAPPER_SERVER_PORT: TCP port; 0 uses the driver default
        DBWRAPPER_USERNAME / DBWRAPPER_PASSWORD: Credentials. When both are
            empty SQL Server uses integrated (trusted) authentication
        DBWRAPPER_INSTANCE: SQL Server named instance
        DBWRAPPER_DATABASE: Database name

    Example:
        ```python
        settings = ClientSettings(
            db_type="mysql",
            server_ip="localhost",
            server_port=3306,
            username="app",
            password="secret",
            database="inventory",
        )
        ```
    """

    db_type: DatabaseType = Field(
        default=DatabaseType.MSSQL,
        description="SQL dialect of the target server"
    )
    server_ip: str = Field(
        ...,
        description="IP address or hostname of the database server"
    )
    server_port: int = Field(
        default=0,
        ge=0,
        description="TCP port of the database server (0 = driver default)"
    )
    username: Optional[str] = Field(default=None)
    password: Optional[SecretStr] = Field(default=None)
    instance: Optional[str] = Field(
        default=None,
        description="Named instance on the server (SQL Server only)"
    )
    database: str = Field(
        ...,
        description="Name of the database to connect to"
    )

    odbc_driver: str = Field(
        default="ODBC Driver 18 for SQL Server",
        description="ODBC driver used for SQL Server connections"
    )
    odbc_extra: Dict[str, str] = Field(
        default_factory=dict,
        description="Additional ODBC attributes, e.g. {'TrustServerCertificate': 'yes'}"
    )

    sql_pool_size: int = Field(default=5, ge=1, le=100)
    sql_pool_timeout: int = Field(default=30, ge=1)
    sql_max_overflow: int = Field(default=10, ge=0)

    debug_raw_query: bool = Field(
        default=False,
        description="Log every statement sent to the server"
    )
    debug_result_row_count: bool = Field(
        default=False,
        description="Log the row count of every successful statement"
    )
    log_level: str = Field(default="INFO")

    @field_validator("db_type", mode="before")
    @classmethod
    def validate_db_type(cls, v: Any) -> DatabaseType:
        """Accept dialect names in any case."""
        return DatabaseType.parse(v)

    @field_validator("server_ip", "database")
    @classmethod
    def validate_required_text(cls, v: str, info) -> str:
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty")
        return v.strip()

    @field_validator("username", "instance")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def password_value(self) -> Optional[str]:
        """Plain-text password, None when unset or empty."""
        if self.password is None:
            return None
        value = self.password.get_secret_value()
        return value or None

    @property
    def uses_integrated_security(self) -> bool:
        """True when neither username nor password is configured."""
        return not self.username and not self.password_value


_settings: Optional[ClientSettings] = None


def get_settings(force_reload: bool = False) -> ClientSettings:
    """Get the singleton settings instance loaded from the environment.

    Args:
        force_reload: If True, creates a new ClientSettings instance even if
                     one already exists. Useful for testing or when
                     environment variables have changed.

    Returns:
        ClientSettings: The singleton settings instance

    Example:
        ```python
        settings = get_settings()
        assert settings is get_settings()

        new_settings = get_settings(force_reload=True)
        assert new_settings is not settings
        ```
    """
    global _settings

    if _settings is None or force_reload:
        _settings = ClientSettings()

    return _settings


def _reload_settings() -> ClientSettings:
    """Force reload of settings.

    This is primarily for testing purposes where you need to reset
    the singleton instance.
    """
    global _settings
    _settings = None
    return get_settings(force_reload=True)
