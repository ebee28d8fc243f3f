from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Public origin used for canonical URLs; request headers are used when unset
    PUBLIC_BASE_URL: str | None = Field(
        default=None,
        validation_alias=AliasChoices("PUBLIC_BASE_URL", "BASE_URL"),
    )
    # Client-app bootstrap script; discovered from the SPA index.html when unset
    PUBLIC_APP_ENTRY: str | None = None
    PUBLIC_APP_ROOT_ID: str = "root"
    APP_ENTRY_FETCH_TIMEOUT: float = 3.0

    REDIS_URL: str | None = None
    REDIS_HOST: str | None = None
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str | None = None
    REDIS_RETRY_SECONDS: float = 60.0
    # 6 hours
    SEO_CACHE_TTL_SECONDS: int = 6 * 60 * 60

    DIRECTORY_BACKEND: Literal["memory", "stub"] = "memory"
    DIRECTORY_FIXTURE_PATH: str | None = None

    RATE_LIMIT: str = "300/minute"
    LOG_LEVEL: str = "INFO"

    @property
    def redis_configured(self) -> bool:
        return bool(self.REDIS_URL or self.REDIS_HOST)


@lru_cache
def get_settings() -> Settings:
    return Settings()
