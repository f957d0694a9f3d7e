"""Pytest fixtures and fakes shared across the suite."""

from __future__ import annotations

import asyncio
from collections import defaultdict

import pytest

from models import Entity, EntitySeries, SeriesPoint


CATALOG = [
    Entity(code=1, name="北海道"),
    Entity(code=2, name="青森県"),
    Entity(code=7, name="福島県"),
    Entity(code=13, name="東京都"),
]


def make_series(code: int, name: str, *pairs: tuple[int, int]) -> EntitySeries:
    """Build an EntitySeries from (year, value) pairs."""

    return EntitySeries(
        code=code,
        name=name,
        points=tuple(SeriesPoint(year=year, value=value) for year, value in pairs),
    )


class FakeFetcher:
    """Scripted async fetch collaborator.

    Responses and gates are consumed per code in call order. A response that
    is an exception is raised; with no scripted response an empty series is
    returned. A gate holds the call open until the test sets it.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[int, str]] = []
        self._responses: dict[int, list] = defaultdict(list)
        self._gates: dict[int, list[asyncio.Event]] = defaultdict(list)

    def respond(self, code: int, *responses) -> None:
        self._responses[code].extend(responses)

    def hold(self, code: int) -> asyncio.Event:
        """Hold the next call for `code`. Must be called inside a running loop."""

        gate = asyncio.Event()
        self._gates[code].append(gate)
        return gate

    async def __call__(self, code: int, name: str) -> EntitySeries:
        self.calls.append((code, name))
        responses = self._responses[code]
        response = responses.pop(0) if responses else EntitySeries(code=code, name=name)
        gates = self._gates[code]
        gate = gates.pop(0) if gates else None

        if gate is not None:
            await gate.wait()
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def catalog() -> list[Entity]:
    return list(CATALOG)


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()
