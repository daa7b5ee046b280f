"""Tests for logging configuration and the console entrypoint."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
import structlog

from conftest import FakeSearchProvider, hits
from refsuggest import main as main_module
from refsuggest.editor import ReferenceEditor
from refsuggest.forms.reference import ReferenceFormState
from refsuggest.logging import configure_logging
from refsuggest.services.exceptions import ProviderFailure
from refsuggest.services.suggestions import DebouncedSuggestionController


def test_configure_logging_outputs_json(capsys):
    configure_logging("info")
    logger = structlog.get_logger()
    logger.info("unit-test", foo="bar")
    out = capsys.readouterr().out
    assert "unit-test" in out
    assert "foo" in out


def _scripted(lines: list[str]):
    pending = list(lines)

    async def read_line():
        return pending.pop(0) if pending else None

    return read_line


def _editor(provider: FakeSearchProvider) -> ReferenceEditor:
    controller = DebouncedSuggestionController(provider, delay_seconds=5)
    return ReferenceEditor(ReferenceFormState(), controller)


@pytest.mark.asyncio
async def test_console_searches_each_line_and_selects():
    provider = FakeSearchProvider({"Blade": hits("Blade Runner", "Blade Runner 2049")})
    editor = _editor(provider)
    output: list[str] = []

    await main_module.run_console(
        editor, read_line=_scripted(["Blade\n", ":2\n"]), write=output.append
    )

    assert provider.calls == ["Blade"]
    assert output[:2] == ["1. Blade Runner", "2. Blade Runner 2049"]
    assert '"name": "Blade Runner 2049"' in output[2]
    assert editor.form.prefilled is True


@pytest.mark.asyncio
async def test_console_reports_failures_and_clears():
    provider = FakeSearchProvider({"Heat": ProviderFailure("Search request timed out")})
    editor = _editor(provider)
    output: list[str] = []

    await main_module.run_console(
        editor, read_line=_scripted(["Heat\n", "Nothing\n", "\n"]), write=output.append
    )

    assert output == [
        "search failed: Search request timed out",
        "no suggestions",
        "(cleared)",
    ]


@pytest.mark.asyncio
async def test_main_bootstrap(monkeypatch):
    settings = SimpleNamespace(
        environment="dev",
        log_level="INFO",
        search=SimpleNamespace(index_name="references"),
        debounce=SimpleNamespace(delay_seconds=1.0),
    )
    captured: dict = {}

    class DummyEditor:
        def __init__(self) -> None:
            self.closed = False

        async def aclose(self) -> None:
            self.closed = True

    def fake_build(client, passed_settings):
        captured["client"] = client
        captured["settings"] = passed_settings
        captured["editor"] = DummyEditor()
        return captured["editor"]

    async def fake_run_console(editor):
        captured["ran_with"] = editor

    monkeypatch.setattr(main_module, "get_settings", lambda: settings)
    monkeypatch.setattr(main_module, "configure_logging", lambda level: captured.setdefault("level", level))
    monkeypatch.setattr(main_module, "build_reference_editor", fake_build)
    monkeypatch.setattr(main_module, "run_console", fake_run_console)

    await main_module.main()

    assert captured["level"] == "INFO"
    assert captured["settings"] is settings
    assert captured["ran_with"] is captured["editor"]
    assert captured["editor"].closed is True


@pytest.mark.asyncio
async def test_console_survives_invalid_pick():
    provider = FakeSearchProvider(
        {
            "Dune": [
                {"id": "r1", "name": "Dune", "release": {"original": "not-a-date"}},
                {"id": "r2", "name": "Dune Messiah", "summary": None},
            ]
        }
    )
    editor = _editor(provider)
    output: list[str] = []

    await main_module.run_console(
        editor, read_line=_scripted(["Dune\n", ":1\n", ":2\n"]), write=output.append
    )

    assert output[:2] == ["1. Dune", "2. Dune Messiah"]
    assert output[2].startswith("cannot use Dune:")
    assert '"name": "Dune Messiah"' in output[3]
    assert editor.form.prefilled is True
