"""Shared fixtures for all tests."""

import asyncio

import pytest

from vidchat.core.events import Annotation, TextDelta


class FakeChatEngine:
    """Chat engine double that replays a fixed list of events.

    Args:
        events: Events to yield, in order.
        fail_after: Raise RuntimeError after yielding this many events.
        error: Message of the raised error.
    """

    def __init__(self, events=(), fail_after=None, error="backend exploded"):
        self.events = list(events)
        self.fail_after = fail_after
        self.error = error
        self.calls = []
        self.closed = False

    async def _stream(self):
        try:
            for i, event in enumerate(self.events):
                if self.fail_after is not None and i == self.fail_after:
                    raise RuntimeError(self.error)
                yield event
            if self.fail_after is not None and self.fail_after >= len(self.events):
                raise RuntimeError(self.error)
        finally:
            self.closed = True

    def chat(self, message, chat_history, stream=True):
        self.calls.append({"message": message, "chat_history": list(chat_history), "stream": stream})
        return self._stream()


def run_async(coro):
    return asyncio.run(coro)


async def collect(aiter) -> list:
    return [item async for item in aiter]


@pytest.fixture
def hello_events() -> list:
    return [TextDelta("Hi"), TextDelta(" there")]


@pytest.fixture
def sources_annotation() -> Annotation:
    return Annotation("sources", {"nodes": [{"id": "n1", "score": 0.9, "text": "chunk", "metadata": {}}]})


@pytest.fixture
def fake_engine_factory():
    return FakeChatEngine
