"""Shared fakes for controller and editor tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest


class FakeSearchProvider:
    """Records queries; answers immediately or waits for a manual release."""

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[str] = []
        self._gates: dict[str, asyncio.Future] = {}

    def hold(self, query: str) -> None:
        self._gates[query] = asyncio.get_running_loop().create_future()

    def release(self, query: str, result: Any) -> None:
        self._gates[query].set_result(result)

    async def search(self, query: str):
        self.calls.append(query)
        gate = self._gates.get(query)
        result = await gate if gate is not None else self.responses.get(query, [])
        if isinstance(result, BaseException):
            raise result
        return result


class RecordingReporter:
    def __init__(self) -> None:
        self.reports: list[dict[str, Any]] = []

    def report(self, error: BaseException, *, query: str, generation: int) -> None:
        self.reports.append({"error": error, "query": query, "generation": generation})


def hits(*names: str) -> list[dict[str, Any]]:
    return [{"id": f"ref-{index}", "name": name} for index, name in enumerate(names, start=1)]


@pytest.fixture
def provider() -> FakeSearchProvider:
    return FakeSearchProvider()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
