"""Pydantic models shared by the form, editor and suggestion layers."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ControllerState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    SEARCHING = "searching"
    READY = "ready"
    FAILED = "failed"


class _PayloadModel(BaseModel):
    """Index payloads often carry explicit nulls; those fall back to field defaults."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {key: item for key, item in value.items() if item is not None}
        return value


class ReferenceType(_PayloadModel):
    primary: str = ""
    secondary: str = ""


class ReferenceRelease(_PayloadModel):
    original: date | None = None
    before_common_era: bool = Field(default=False, alias="beforeJC")


class ReferenceUrls(_PayloadModel):
    affiliate: str = ""
    amazon: str = ""
    facebook: str = ""
    image: str = ""
    instagram: str = ""
    netflix: str = ""
    prime_video: str = Field(default="", alias="primeVideo")
    twitch: str = ""
    twitter: str = ""
    website: str = ""
    wikipedia: str = ""
    youtube: str = ""


class Reference(_PayloadModel):
    """Metadata of a film, book, show or other work a quote comes from."""

    id: str = ""
    name: str = ""
    summary: str = ""
    lang: str = "en"
    type: ReferenceType = Field(default_factory=ReferenceType)
    release: ReferenceRelease = Field(default_factory=ReferenceRelease)
    urls: ReferenceUrls = Field(default_factory=ReferenceUrls)


class SuggestionResult(BaseModel):
    """One candidate returned by the search index.

    ``data`` is the provider payload, kept as-is.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_hit(cls, hit: Mapping[str, Any]) -> "SuggestionResult":
        data = dict(hit)
        hit_id = data.pop("id", None) or data.get("objectID")
        if not hit_id:
            raise ValueError("search hit has no id")
        return cls(id=str(hit_id), data=data)

    @property
    def title(self) -> str:
        name = self.data.get("name")
        return str(name) if name else self.id

    @property
    def image_url(self) -> str:
        urls = self.data.get("urls")
        if isinstance(urls, Mapping):
            return str(urls.get("image") or "")
        return ""

    def to_reference(self) -> Reference:
        return Reference.model_validate({**self.data, "id": self.id})


__all__ = [
    "ControllerState",
    "Reference",
    "ReferenceRelease",
    "ReferenceType",
    "ReferenceUrls",
    "SuggestionResult",
]
