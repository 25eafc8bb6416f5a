from __future__ import annotations

import pytest

from tracked import EventChannel, SequenceEvent


@pytest.fixture(autouse=True)
def _no_threads_in_unit_tests(monkeypatch: pytest.MonkeyPatch):
    """Run `asyncio.to_thread` inline for unit tests.

    The recorder uses `asyncio.to_thread` to keep sink I/O off the event loop.
    In unit tests, this can create threadpool workers that keep the Python
    process alive longer than expected under some runtimes.
    """

    async def _to_thread(func, /, *args, **kwargs):  # noqa: ANN001, D401
        return func(*args, **kwargs)

    monkeypatch.setattr("observability.recorder.asyncio.to_thread", _to_thread)
    yield


class Collector:
    """Wiring that captures every event of every sequence it is handed."""

    def __init__(self) -> None:
        self.events: list[SequenceEvent] = []
        self.channels: list[EventChannel] = []

    def __call__(self, channel: EventChannel) -> None:
        self.channels.append(channel)
        channel.attach(self.events.append)

    def operations(self) -> list[tuple[str, str]]:
        return [(e.kind, e.operation) for e in self.events]


@pytest.fixture
def collector() -> Collector:
    return Collector()
