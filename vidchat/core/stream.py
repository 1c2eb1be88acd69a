"""Transcode a chat engine stream into text and data channels.

The engine yields text deltas interleaved with annotations. Text goes out as
soon as it arrives; annotations are collected on a side "data" channel that is
merged into the same response so the client can tell the two apart. A failure
after the first frame cannot change the HTTP status any more, so it is turned
into a terminal error frame instead.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import aclosing
from dataclasses import dataclass
from typing import Any, Union

import structlog

from vidchat.core.events import Annotation, StreamEvent, TextDelta

logger = structlog.get_logger(__name__)

_CLOSED = object()


@dataclass(frozen=True)
class TextFrame:
    text: str


@dataclass(frozen=True)
class DataFrame:
    value: Any


@dataclass(frozen=True)
class ErrorFrame:
    message: str


WireFrame = Union[TextFrame, DataFrame, ErrorFrame]


class StreamData:
    """Single-producer, single-consumer data channel for one response.

    Items are consumed either by ``drain()`` (non-blocking, used when merging
    with the text channel) or by iterating with ``async for`` until closed.
    """

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def append(self, value: Any) -> None:
        if self._closed:
            raise RuntimeError("Data stream is already closed")
        self._queue.put_nowait(value)

    def close(self) -> None:
        if self._closed:
            raise RuntimeError("Data stream is already closed")
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    def drain(self) -> list[Any]:
        """Return every item appended since the last drain."""
        items = []
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if item is _CLOSED:
                continue
            items.append(item)
        return items

    async def __aiter__(self) -> AsyncIterator[Any]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item


class StreamTranscoder:
    """Turns one engine response stream into wire frames.

    Args:
        response: Async iterator of engine events. Closed by the transcoder.
        image_url: Image attached to the user turn, echoed on the data channel.
    """

    def __init__(self, response: AsyncIterator[StreamEvent], image_url: str | None = None):
        self._response = response
        self._image_url = image_url
        self.data = StreamData()
        self.error: Exception | None = None

    async def text_stream(self) -> AsyncIterator[TextFrame | ErrorFrame]:
        """Yield text frames in arrival order, closing the data channel at the end.

        Annotations found along the way are appended to ``self.data``. If the
        source raises, a single ErrorFrame is yielded last.
        """
        if self._image_url:
            self.data.append(Annotation("image_url", {"url": self._image_url}).to_data())

        try:
            async for event in self._response:
                if isinstance(event, TextDelta):
                    if event.value:
                        yield TextFrame(event.value)
                elif isinstance(event, Annotation):
                    self.data.append(event.to_data())
                else:
                    logger.warning("stream.unknown_event", kind=type(event).__name__)
        except Exception as e:
            self.error = e
            logger.error("stream.mid_stream_error", error=str(e), exc_info=True)
            self._close()
            yield ErrorFrame(str(e) or type(e).__name__)
        finally:
            self._close()
            aclose = getattr(self._response, "aclose", None)
            if aclose is not None:
                await aclose()

    async def frames(self) -> AsyncIterator[WireFrame]:
        """Merge the text and data channels into one ordered frame sequence.

        Pending data items are flushed ahead of each text frame, so every
        annotation keeps its position relative to the text around it.
        """
        async with aclosing(self.text_stream()) as text:
            async for frame in text:
                for value in self.data.drain():
                    yield DataFrame(value)
                yield frame
        for value in self.data.drain():
            yield DataFrame(value)

    def _close(self) -> None:
        if not self.data.closed:
            self.data.close()
