import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = Field(default="eventlog", alias="APP_NAME")
    debug_mode: bool = Field(default=False, alias="EVENTLOG_DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    logger_name: str = Field(default="eventlog", alias="EVENTLOG_LOGGER")

    @property
    def log_level_value(self) -> int:
        value = logging.getLevelName(self.log_level.upper())
        return value if isinstance(value, int) else logging.INFO


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
