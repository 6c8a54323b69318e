from pydantic_settings import BaseSettings, SettingsConfigDict


class DbWrapperBaseSettings(BaseSettings):
    """Common configuration for every dbwrapper settings class.

    Values are read from ``DBWRAPPER_``-prefixed environment variables and
    an optional ``.env`` file. Nested values use ``__`` as delimiter.
    """
    model_config = SettingsConfigDict(
        env_prefix="DBWRAPPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )
