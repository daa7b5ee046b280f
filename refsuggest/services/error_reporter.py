"""Report failed suggestion searches."""

from __future__ import annotations

import traceback
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from refsuggest.config import SuggestSettings
from refsuggest.logging import logger

TRACEBACK_CHAR_LIMIT = 1800
QUERY_CHAR_LIMIT = 200


class ErrorReporter(Protocol):
    def report(self, error: BaseException, *, query: str, generation: int) -> None:  # pragma: no cover
        ...


@dataclass(slots=True)
class FailureReport:
    query: str
    generation: int
    exception_type: str
    message: str
    reported_at: str


class LoggingErrorReporter:
    """Log provider failures and keep the most recent ones for display."""

    def __init__(self, settings: SuggestSettings | None = None, *, history_size: int | None = None) -> None:
        if history_size is None:
            history_size = settings.error_history_size if settings is not None else 20
        self._environment = settings.environment if settings is not None else "dev"
        self._history: deque[FailureReport] = deque(maxlen=history_size)

    def report(self, error: BaseException, *, query: str, generation: int) -> None:
        record = FailureReport(
            query=self._truncate(query, QUERY_CHAR_LIMIT),
            generation=generation,
            exception_type=error.__class__.__name__,
            message=str(error),
            reported_at=datetime.now(timezone.utc).isoformat(),
        )
        self._history.append(record)
        logger.error(
            "suggestion_search_failed",
            environment=self._environment,
            exception_type=record.exception_type,
            exception=record.message,
            query=record.query,
            generation=generation,
            traceback=self._format_traceback(error),
        )

    def recent(self) -> list[FailureReport]:
        return list(self._history)

    def _format_traceback(self, error: BaseException) -> str:
        trace = "".join(traceback.format_exception(error.__class__, error, error.__traceback__))
        return self._truncate(trace, TRACEBACK_CHAR_LIMIT)

    @staticmethod
    def _truncate(value: str, limit: int) -> str:
        value = value.strip()
        if len(value) <= limit:
            return value
        return f"{value[: limit - 15].rstrip()}\n...[truncated]"


__all__ = ["ErrorReporter", "FailureReport", "LoggingErrorReporter"]
