"""FastAPI endpoints for the vidchat API.

POST /api/chat - stream an assistant reply in the Vercel AI data stream format
GET /health - component health check
"""

import json
from contextlib import aclosing

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from vidchat.api.schemas import ChatRequest, ErrorResponse
from vidchat.core.content import normalize_content
from vidchat.core.conversation import InvalidRequestError, split_conversation
from vidchat.core.engine import EngineError, invoke_engine
from vidchat.core.stream import StreamTranscoder
from vidchat.core.wire import STREAM_DATA_HEADERS, encode_stream

logger = structlog.get_logger(__name__)

router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


async def _logged(transcoder: StreamTranscoder):
    """Forward frames, logging how the stream ended."""
    frames = 0
    async with aclosing(transcoder.frames()) as source:
        async for frame in source:
            frames += 1
            yield frame

    if transcoder.error is not None:
        logger.warning("chat.partially_failed", frames=frames, error=str(transcoder.error))
    else:
        logger.info("chat.completed", frames=frames)


@router.post("/api/chat")
async def chat(req: Request):
    """Validate the conversation, start the engine, and stream its reply."""
    try:
        body = await req.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("chat.malformed_body", error=str(e))
        return _error(400, "Request body must be valid JSON")

    try:
        request = ChatRequest.model_validate(body)
    except ValidationError as e:
        logger.warning("chat.invalid_request", errors=e.error_count())
        return _error(400, f"Invalid request body: {e.errors(include_url=False)[0]['msg']}")

    try:
        history, user_message = split_conversation(request.messages)
    except InvalidRequestError as e:
        logger.warning("chat.invalid_request", error=str(e))
        return _error(400, str(e))

    # data.imageUrl wins over an image part inside the user turn
    image_url = request.image_url or user_message.image_url
    logger.info(
        "chat.request",
        history=len(history),
        msg_len=len(user_message.text),
        image=bool(image_url),
        embeddings=len(request.embeddings or []),
    )

    content = normalize_content(user_message.text, image_url)

    try:
        response = await invoke_engine(req.app.state.chat_engine, content, history)
    except EngineError as e:
        logger.error("chat.engine_failed", error=str(e))
        return _error(500, str(e))

    logger.info("chat.streaming")
    transcoder = StreamTranscoder(response, image_url=image_url)
    return StreamingResponse(
        encode_stream(_logged(transcoder)),
        media_type="text/plain; charset=utf-8",
        headers=STREAM_DATA_HEADERS,
    )


@router.get("/health")
def health(req: Request):
    """Check health of all backend components."""
    components = {}

    llm = req.app.state.llm_adapter
    components["llm"] = "ok" if llm.is_healthy() else "error"

    qdrant = req.app.state.qdrant
    components["vector_store"] = "ok" if qdrant.is_healthy() else "error"

    components["engine"] = "ok" if req.app.state.chat_engine is not None else "error"

    errors = [k for k, v in components.items() if v == "error"]
    if not errors:
        status = "healthy"
    elif len(errors) == len(components):
        status = "unhealthy"
    else:
        status = "degraded"

    return {"status": status, "components": components}


@router.get("/")
@router.head("/")
def root_health():
    """Basic root health check for deployment platforms."""
    return {"status": "ok", "service": "vidchat-api"}
