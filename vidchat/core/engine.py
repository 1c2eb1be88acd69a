"""Chat engine invocation.

The engine itself is built elsewhere (see vidchat.engine.chat_engine) and
injected through app state. This module issues the single streaming chat call
per request and separates failures that happen before the first event from
those that happen mid-stream.
"""

from collections.abc import AsyncIterator, Sequence
from typing import Protocol

import structlog

from vidchat.api.schemas import ChatMessage, MessageContent
from vidchat.core.events import StreamEvent

logger = structlog.get_logger(__name__)


class EngineError(Exception):
    """Engine missing, misconfigured, or failed before producing any output."""
    pass


class ChatEngine(Protocol):
    def chat(
        self,
        message: MessageContent,
        chat_history: Sequence[ChatMessage],
        stream: bool = True,
    ) -> AsyncIterator[StreamEvent]:
        ...


async def _replay(
    first: StreamEvent | None, rest: AsyncIterator[StreamEvent]
) -> AsyncIterator[StreamEvent]:
    """Yield the already-awaited first event, then the rest of the stream."""
    try:
        if first is None:
            return
        yield first
        async for event in rest:
            yield event
    finally:
        aclose = getattr(rest, "aclose", None)
        if aclose is not None:
            await aclose()


async def invoke_engine(
    engine: ChatEngine | None,
    message: MessageContent,
    chat_history: list[ChatMessage],
) -> AsyncIterator[StreamEvent]:
    """Start a streaming chat and wait for its first event.

    Args:
        engine: Injected chat engine, or None if it failed to build at startup.
        message: Normalized content of the active user turn.
        chat_history: Prior turns, passed through unchanged.

    Returns:
        Async iterator yielding every engine event, starting with the first.

    Raises:
        EngineError: If the engine is unavailable or fails before yielding.
    """
    if engine is None:
        raise EngineError("Chat engine is not configured")

    try:
        stream = engine.chat(message=message, chat_history=chat_history, stream=True)
        iterator = stream.__aiter__()
        first = await iterator.__anext__()
    except StopAsyncIteration:
        logger.info("engine.empty_stream")
        return _replay(None, iterator)
    except Exception as e:
        logger.error("engine.invoke_failed", error=str(e))
        raise EngineError(str(e)) from e

    logger.debug("engine.first_event", kind=type(first).__name__)
    return _replay(first, iterator)
