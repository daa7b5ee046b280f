"""Debounced search-as-you-type suggestions."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from pydantic import ValidationError

from refsuggest.config import DebounceSettings
from refsuggest.domain.models import ControllerState, SuggestionResult
from refsuggest.logging import logger
from refsuggest.services.error_reporter import ErrorReporter
from refsuggest.services.exceptions import ProviderFailure
from refsuggest.services.search import SearchProvider

ChangeListener = Callable[["DebouncedSuggestionController"], None]


@dataclass(slots=True)
class SearchOutcome:
    query: str
    hits: Sequence[Mapping[str, Any]] | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class DebouncedSuggestionController:
    """Turn keystrokes into at most one live search against a provider.

    Every keystroke restarts the debounce timer and bumps the generation
    counter. A search is tagged with the generation current when it was
    issued, and its outcome is applied only if that generation is still
    current, so a slow answer to an older query can never overwrite newer
    suggestions. Superseded searches are not aborted, their results are
    dropped.

    Must be driven from inside a running event loop.
    """

    def __init__(
        self,
        provider: SearchProvider,
        *,
        delay_seconds: float = 1.0,
        error_reporter: ErrorReporter | None = None,
        on_change: ChangeListener | None = None,
    ) -> None:
        if delay_seconds <= 0:
            raise ValueError("delay_seconds must be positive")
        self._provider = provider
        self.delay_seconds = delay_seconds
        self._reporter = error_reporter
        self._on_change = on_change
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._generation = 0
        self._closed = False

        self.state = ControllerState.IDLE
        self.suggestions: list[SuggestionResult] = []
        self.is_loading = False
        self.pending_query = ""
        self.last_error: BaseException | None = None

    @classmethod
    def from_settings(
        cls,
        provider: SearchProvider,
        settings: DebounceSettings,
        **kwargs: Any,
    ) -> "DebouncedSuggestionController":
        return cls(provider, delay_seconds=settings.delay_seconds, **kwargs)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    def on_text_changed(self, text: str) -> None:
        if self._closed:
            logger.warning("suggestion_input_after_close", query=text)
            return

        self.pending_query = text
        self._cancel_timer()
        self._generation += 1
        self.is_loading = False
        self.last_error = None

        if not text:
            self.suggestions = []
            self.state = ControllerState.IDLE
            self._notify()
            return

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay_seconds, self._fire, text)
        self.state = ControllerState.DEBOUNCING
        self._notify()

    def flush(self) -> bool:
        """Issue the pending search now instead of waiting for the timer."""

        if self._timer is None:
            return False
        self._cancel_timer()
        self._fire(self.pending_query)
        return True

    def on_search_completed(self, generation: int, outcome: SearchOutcome) -> bool:
        """Apply a provider outcome; return False when it was stale."""

        if generation != self._generation:
            logger.debug(
                "suggestion_result_discarded",
                query=outcome.query,
                generation=generation,
                current_generation=self._generation,
            )
            return False

        self.is_loading = False
        error = outcome.error
        results: list[SuggestionResult] = []
        if error is None:
            try:
                results = [SuggestionResult.from_hit(hit) for hit in outcome.hits or ()]
            except (TypeError, ValueError, ValidationError) as exc:
                error = ProviderFailure("Search service returned a malformed hit.", query=outcome.query)
                error.__cause__ = exc

        if error is not None:
            self.suggestions = []
            self.state = ControllerState.FAILED
            self.last_error = error
            self._report(error, outcome.query, generation)
        else:
            self.suggestions = results
            self.state = ControllerState.READY
            logger.debug(
                "suggestion_results_applied",
                query=outcome.query,
                generation=generation,
                count=len(results),
            )
        self._notify()
        return True

    def cancel(self) -> None:
        self._cancel_timer()
        self._generation += 1
        self.pending_query = ""
        self.suggestions = []
        self.is_loading = False
        self.state = ControllerState.IDLE
        self._notify()

    def select_suggestion(self, result: SuggestionResult) -> SuggestionResult:
        self.cancel()
        return result

    def close(self) -> None:
        if self._closed:
            return
        self.cancel()
        self._closed = True

    async def aclose(self) -> None:
        """Tear down and abandon any provider calls still running."""

        self.close()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def drain(self) -> None:
        """Wait until every provider call issued so far has finished."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _fire(self, query: str) -> None:
        self._timer = None
        self._generation += 1
        generation = self._generation
        self.state = ControllerState.SEARCHING
        self.suggestions = []
        self.is_loading = True
        logger.debug("suggestion_search_issued", query=query, generation=generation)

        task = asyncio.get_running_loop().create_task(self._run_search(generation, query))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._notify()

    async def _run_search(self, generation: int, query: str) -> None:
        try:
            hits = await self._provider.search(query)
        except Exception as exc:
            outcome = SearchOutcome(query=query, error=exc)
        else:
            outcome = SearchOutcome(query=query, hits=hits)
        self.on_search_completed(generation, outcome)

    def _report(self, error: BaseException, query: str, generation: int) -> None:
        if self._reporter is None:
            logger.warning(
                "suggestion_search_failed",
                exception_type=error.__class__.__name__,
                exception=str(error),
                query=query,
                generation=generation,
            )
            return
        try:
            self._reporter.report(error, query=query, generation=generation)
        except Exception:
            logger.exception("suggestion_error_report_failed", query=query, generation=generation)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _notify(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(self)
        except Exception:
            logger.exception(
                "suggestion_listener_failed",
                state=self.state.value,
                generation=self._generation,
            )


__all__ = ["DebouncedSuggestionController", "SearchOutcome"]
