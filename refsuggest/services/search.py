"""Search providers backing the suggestion controller."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

import httpx

from refsuggest.config import SearchIndexSettings
from refsuggest.logging import logger
from refsuggest.services.exceptions import ProviderFailure, ProviderNotConfigured
from refsuggest.utils.retry import retry_async


class SearchProvider(Protocol):
    """Anything that can answer a free-text query with an ordered list of hits.

    Each hit is a mapping carrying at least an ``id`` key.
    """

    async def search(self, query: str) -> Sequence[Mapping[str, Any]]:  # pragma: no cover
        ...


class AlgoliaSearchProvider:
    """Query a hosted Algolia-compatible index over its REST API."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: SearchIndexSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or SearchIndexSettings()

    @staticmethod
    def _read_secret(secret: Any) -> str | None:
        if not secret:
            return None
        try:
            return secret.get_secret_value()
        except AttributeError:
            return str(secret)

    def _query_url(self) -> str:
        endpoint = self._settings.endpoint()
        if not endpoint:
            raise ProviderNotConfigured("Search index application id is not configured.")
        return f"{endpoint}/1/indexes/{self._settings.index_name}/query"

    def _headers(self) -> dict[str, str]:
        api_key = self._read_secret(self._settings.api_key)
        if not api_key or not self._settings.app_id:
            raise ProviderNotConfigured("Search index credentials are not configured.")
        return {
            "X-Algolia-Application-Id": self._settings.app_id,
            "X-Algolia-API-Key": api_key,
            "Content-Type": "application/json",
        }

    async def search(self, query: str) -> list[dict[str, Any]]:
        url = self._query_url()
        headers = self._headers()
        payload = {"query": query, "hitsPerPage": self._settings.hits_per_page}

        async def _request():
            response = await self._client.post(
                url,
                json=payload,
                headers=headers,
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
            return response

        try:
            response = await retry_async(
                _request,
                max_attempts=self._settings.max_attempts,
                retry_on=(httpx.TransportError,),
                logger=logger,
                operation_name="search_index_query",
            )
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text[:500] if exc.response is not None else str(exc)
            status_code = exc.response.status_code if exc.response is not None else None
            raise ProviderFailure(
                f"Search request failed ({status_code or 'unknown'}): {detail}",
                query=query,
                status_code=status_code,
            ) from exc
        except httpx.TimeoutException as exc:
            raise ProviderFailure(f"Search request timed out: {exc}", query=query) from exc
        except httpx.RequestError as exc:
            raise ProviderFailure(f"Search request failed: {exc}", query=query) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderFailure("Search service returned invalid JSON.", query=query) from exc
        if not isinstance(data, Mapping):
            raise ProviderFailure("Search service returned an unexpected payload.", query=query)

        return self._extract_hits(data.get("hits") or [])

    @staticmethod
    def _extract_hits(raw_hits: Sequence[Any]) -> list[dict[str, Any]]:
        hits: list[dict[str, Any]] = []
        for raw in raw_hits:
            if not isinstance(raw, Mapping) or not raw.get("objectID"):
                logger.warning("search_hit_skipped", reason="missing_object_id")
                continue
            hit = dict(raw)
            hit["id"] = str(hit["objectID"])
            hits.append(hit)
        return hits


__all__ = ["AlgoliaSearchProvider", "SearchProvider"]
