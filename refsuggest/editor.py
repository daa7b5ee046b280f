"""Reference editor: form state plus name suggestions."""

from __future__ import annotations

import httpx

from refsuggest.config import SuggestSettings, get_settings
from refsuggest.domain.models import Reference, SuggestionResult
from refsuggest.forms.reference import ReferenceFormState
from refsuggest.services.error_reporter import LoggingErrorReporter
from refsuggest.services.search import AlgoliaSearchProvider
from refsuggest.services.suggestions import ChangeListener, DebouncedSuggestionController


class ReferenceEditor:
    def __init__(self, form: ReferenceFormState, controller: DebouncedSuggestionController) -> None:
        self.form = form
        self.controller = controller

    def on_name_changed(self, text: str) -> None:
        self.form.set_name(text)
        self.controller.on_text_changed(text)

    def choose(self, result: SuggestionResult) -> Reference:
        reference = result.to_reference()
        self.controller.select_suggestion(result)
        return self.form.apply_reference(reference)

    def clear(self) -> None:
        self.form.clear()
        self.controller.cancel()

    def close(self) -> None:
        self.controller.close()

    async def aclose(self) -> None:
        await self.controller.aclose()


def build_reference_editor(
    http_client: httpx.AsyncClient,
    settings: SuggestSettings | None = None,
    *,
    on_change: ChangeListener | None = None,
) -> ReferenceEditor:
    settings = settings or get_settings()
    provider = AlgoliaSearchProvider(http_client, settings=settings.search)
    controller = DebouncedSuggestionController.from_settings(
        provider,
        settings.debounce,
        error_reporter=LoggingErrorReporter(settings),
        on_change=on_change,
    )
    return ReferenceEditor(ReferenceFormState(), controller)


__all__ = ["ReferenceEditor", "build_reference_editor"]
