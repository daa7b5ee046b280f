"""Console entrypoint for trying reference suggestions against a live index."""

from __future__ import annotations

import asyncio
import sys
from typing import Awaitable, Callable

import httpx
from pydantic import ValidationError

from refsuggest.config import get_settings
from refsuggest.domain.models import ControllerState
from refsuggest.editor import ReferenceEditor, build_reference_editor
from refsuggest.logging import configure_logging, logger

LineReader = Callable[[], Awaitable[str | None]]

# Lines starting with this prefix pick a suggestion by its 1-based position.
SELECT_PREFIX = ":"


async def _read_stdin_line() -> str | None:
    line = await asyncio.to_thread(sys.stdin.readline)
    return line or None


async def run_console(
    editor: ReferenceEditor,
    *,
    read_line: LineReader = _read_stdin_line,
    write: Callable[[str], None] = print,
) -> None:
    controller = editor.controller
    while True:
        line = await read_line()
        if line is None:
            break
        text = line.rstrip("\r\n")

        if not text:
            editor.clear()
            write("(cleared)")
            continue

        if text.startswith(SELECT_PREFIX) and controller.suggestions:
            position = text[len(SELECT_PREFIX):].strip()
            if position.isdigit() and 1 <= int(position) <= len(controller.suggestions):
                suggestion = controller.suggestions[int(position) - 1]
                try:
                    reference = editor.choose(suggestion)
                except ValidationError as exc:
                    logger.warning(
                        "suggestion_pick_rejected",
                        suggestion_id=suggestion.id,
                        errors=exc.error_count(),
                    )
                    write(f"cannot use {suggestion.title}: {exc.error_count()} invalid field(s)")
                    continue
                write(reference.model_dump_json(indent=2))
                continue

        editor.on_name_changed(text)
        controller.flush()
        await controller.drain()

        if controller.state is ControllerState.FAILED:
            write(f"search failed: {controller.last_error}")
        elif not controller.suggestions:
            write("no suggestions")
        else:
            for index, suggestion in enumerate(controller.suggestions, start=1):
                write(f"{index}. {suggestion.title}")


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    async with httpx.AsyncClient() as client:
        editor = build_reference_editor(client, settings)
        logger.info(
            "suggest_console_starting",
            environment=settings.environment,
            index=settings.search.index_name,
            delay_seconds=settings.debounce.delay_seconds,
        )
        try:
            await run_console(editor)
        finally:
            await editor.aclose()


def cli() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    cli()
