"""Line-based wire encoding for streamed chat responses.

Follows the Vercel AI SDK stream data protocol, one frame per line:

    0:"text chunk"
    2:[{"type": "sources", "data": {...}}]
    3:"error message"
"""

import json
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import aclosing

from vidchat.core.stream import DataFrame, ErrorFrame, TextFrame, WireFrame

TEXT_CODE = "0"
DATA_CODE = "2"
ERROR_CODE = "3"

STREAM_DATA_HEADERS = {
    "X-Experimental-Stream-Data": "true",
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}


class FrameDecodeError(Exception):
    pass


def encode_frame(frame: WireFrame) -> str:
    """Serialize a frame to a single protocol line (newline included)."""
    if isinstance(frame, TextFrame):
        return f"{TEXT_CODE}:{json.dumps(frame.text)}\n"
    if isinstance(frame, DataFrame):
        return f"{DATA_CODE}:{json.dumps([frame.value], default=str)}\n"
    if isinstance(frame, ErrorFrame):
        return f"{ERROR_CODE}:{json.dumps(frame.message)}\n"
    raise TypeError(f"Unsupported frame type: {type(frame).__name__}")


def decode_frame(line: str) -> WireFrame:
    """Parse one protocol line back into a frame.

    Raises:
        FrameDecodeError: On a missing prefix, unknown code, or bad JSON.
    """
    code, sep, raw = line.rstrip("\n").partition(":")
    if not sep:
        raise FrameDecodeError(f"Missing frame code in line: {line!r}")

    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise FrameDecodeError(f"Invalid JSON in frame {code}: {e}") from e

    if code == TEXT_CODE and isinstance(value, str):
        return TextFrame(value)
    if code == DATA_CODE and isinstance(value, list) and len(value) == 1:
        return DataFrame(value[0])
    if code == ERROR_CODE and isinstance(value, str):
        return ErrorFrame(value)
    raise FrameDecodeError(f"Unknown or malformed frame: {line!r}")


async def encode_stream(frames: AsyncGenerator[WireFrame, None]) -> AsyncIterator[str]:
    """Encode an async frame sequence for a streaming HTTP response.

    The source generator is closed when the response is, including on client
    disconnect.
    """
    async with aclosing(frames):
        async for frame in frames:
            yield encode_frame(frame)
