import asyncio

import pytest

from carlocator.schemas.location import NotFound


class FakeGateway:
    """In-memory GeocodingGateway with optional per-query gates."""

    def __init__(self, configured: bool = True) -> None:
        self.configured = configured
        self.forward_calls: list[str] = []
        self.resolve_calls: list[str] = []
        self.reverse_calls: list = []
        self.forward_results: dict = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.resolve_result = NotFound()
        self.reverse_result = NotFound()
        self.resolve_gate: asyncio.Event | None = None
        self.reverse_gate: asyncio.Event | None = None

    def is_configured(self) -> bool:
        return self.configured

    async def forward_lookup(self, query, session_token=None):
        self.forward_calls.append(query)
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        result = self.forward_results.get(query, NotFound())
        if isinstance(result, Exception):
            raise result
        return result

    async def resolve_candidate(self, candidate_id, session_token=None):
        self.resolve_calls.append(candidate_id)
        if self.resolve_gate is not None:
            await self.resolve_gate.wait()
        if isinstance(self.resolve_result, Exception):
            raise self.resolve_result
        return self.resolve_result

    async def reverse_lookup(self, coordinate):
        self.reverse_calls.append(coordinate)
        if self.reverse_gate is not None:
            await self.reverse_gate.wait()
        if isinstance(self.reverse_result, Exception):
            raise self.reverse_result
        return self.reverse_result


class Recorder:
    """Collects session callback invocations."""

    def __init__(self) -> None:
        self.selected = []
        self.cleared = 0
        self.errors = []
        self.predictions = []

    def on_select(self, place):
        self.selected.append(place)

    def on_clear(self):
        self.cleared += 1

    def on_error(self, message):
        self.errors.append(message)

    def on_predictions(self, items):
        self.predictions.append(items)


async def _wait_for_calls(calls: list, count: int, timeout: float = 1.0) -> None:
    async def _poll():
        while len(calls) < count:
            await asyncio.sleep(0.001)

    await asyncio.wait_for(_poll(), timeout)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def unconfigured_gateway():
    return FakeGateway(configured=False)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def wait_for_calls():
    return _wait_for_calls
