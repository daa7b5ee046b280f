"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, HttpUrl, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DebounceSettings(BaseModel):
    delay_seconds: float = Field(
        default=1.0,
        gt=0,
        le=10,
        description="Quiet period after the last keystroke before a search is issued.",
    )


class SearchIndexSettings(BaseModel):
    app_id: str | None = None
    api_key: SecretStr | None = None
    base_url: HttpUrl | None = Field(
        default=None,
        description="Optional override for the hosted index endpoint.",
    )
    index_name: str = Field(default="references", min_length=1)
    hits_per_page: int = Field(default=10, ge=1, le=100)
    request_timeout_seconds: float = Field(default=10, gt=0, le=60)
    max_attempts: int = Field(default=2, ge=1, le=5)

    @field_validator("app_id", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def endpoint(self) -> str | None:
        """Return the base URL of the search host, if one can be derived."""

        if self.base_url:
            return str(self.base_url).rstrip("/")
        if self.app_id:
            return f"https://{self.app_id.lower()}-dsn.algolia.net"
        return None


class SuggestSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SUGGEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: str = "INFO"
    error_history_size: int = Field(default=20, ge=1, le=1000)

    debounce: DebounceSettings = Field(default_factory=DebounceSettings)
    search: SearchIndexSettings = Field(default_factory=SearchIndexSettings)


@lru_cache
def get_settings() -> SuggestSettings:
    """Return cached settings instance."""

    return SuggestSettings()


__all__ = [
    "DebounceSettings",
    "SearchIndexSettings",
    "SuggestSettings",
    "get_settings",
]
