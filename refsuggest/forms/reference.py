"""Editable state of the reference being attached to a quote."""

from __future__ import annotations

from refsuggest.domain.models import Reference, SuggestionResult

EDIT_HINT = "Tap to edit"
PREFILLED_HINT = "-"


class ReferenceFormState:
    """Form values owned by a single editor instance.

    ``prefilled`` is set once a suggestion populated the form and is reset by
    any manual edit of the name.
    """

    def __init__(self, reference: Reference | None = None) -> None:
        self.reference = reference or Reference()
        self.prefilled = False
        self.edit_hint = EDIT_HINT

    def set_name(self, text: str) -> None:
        self.reference.name = text
        self.prefilled = False
        self.edit_hint = EDIT_HINT

    def apply_suggestion(self, result: SuggestionResult) -> Reference:
        return self.apply_reference(result.to_reference())

    def apply_reference(self, reference: Reference) -> Reference:
        self.reference = reference
        self.prefilled = True
        self.edit_hint = PREFILLED_HINT
        return self.reference

    def clear(self) -> None:
        self.reference = Reference()
        self.prefilled = False
        self.edit_hint = EDIT_HINT


__all__ = ["EDIT_HINT", "PREFILLED_HINT", "ReferenceFormState"]
