"""Domain-specific exceptions."""

from __future__ import annotations


class ServiceError(Exception):
    pass


class ProviderFailure(ServiceError):
    """Raised when the search service cannot answer a query."""

    def __init__(self, message: str, *, query: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.query = query
        self.status_code = status_code


class ProviderNotConfigured(ProviderFailure):
    pass
