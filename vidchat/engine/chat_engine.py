"""Retrieval-augmented chat engine over video transcripts.

Wires together the LLM adapter, the transcript retriever, and the system
prompt. Each chat call retrieves context, streams the model's tokens as text
deltas, and finishes with a "sources" annotation listing the chunks used.
"""

from collections.abc import AsyncIterator, Sequence

import structlog
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_core.runnables import Runnable

from vidchat.api.schemas import ChatMessage, MessageContent
from vidchat.core.events import Annotation, StreamEvent, TextDelta
from vidchat.engine.llm_adapter import LLMAdapter
from vidchat.engine.prompts import build_system_prompt
from vidchat.engine.qdrant_manager import QdrantManager
from vidchat.engine.retriever import TranscriptRetriever

logger = structlog.get_logger(__name__)

_ROLE_TO_MESSAGE = {
    "user": HumanMessage,
    "assistant": AIMessage,
    "system": SystemMessage,
}


def _to_langchain_content(content: MessageContent) -> str | list[dict]:
    if isinstance(content, str):
        return content
    return [part.model_dump() for part in content]


def _query_text(content: MessageContent) -> str:
    if isinstance(content, str):
        return content
    return " ".join(getattr(part, "text", "") for part in content).strip()


def _chunk_text(chunk: BaseMessage) -> str:
    """Extract plain text from a streamed message chunk."""
    content = chunk.content
    if isinstance(content, str):
        return content
    return "".join(
        part.get("text", "") if isinstance(part, dict) else str(part)
        for part in content
        if not isinstance(part, dict) or part.get("type") == "text"
    )


class ContextChatEngine:
    """Chat engine that answers with retrieved transcript context.

    Stateless per call; a single instance is shared by all requests.
    """

    def __init__(self, model: Runnable, retriever: TranscriptRetriever | None = None):
        self.model = model
        self.retriever = retriever

    def build_messages(
        self,
        message: MessageContent,
        chat_history: Sequence[ChatMessage],
        nodes: list,
    ) -> list[BaseMessage]:
        messages: list[BaseMessage] = [SystemMessage(content=build_system_prompt(nodes))]
        for msg in chat_history:
            cls = _ROLE_TO_MESSAGE[msg.role]
            messages.append(cls(content=_to_langchain_content(msg.content)))
        messages.append(HumanMessage(content=_to_langchain_content(message)))
        return messages

    async def chat(
        self,
        message: MessageContent,
        chat_history: Sequence[ChatMessage],
        stream: bool = True,
    ) -> AsyncIterator[StreamEvent]:
        """Answer one user turn.

        Args:
            message: Normalized content of the user turn (text or parts).
            chat_history: Prior turns, oldest first.
            stream: Yield tokens as they arrive; otherwise yield the full
                reply as a single delta.

        Yields:
            TextDelta events, then one Annotation("sources") if any context
            was retrieved.
        """
        nodes = []
        if self.retriever is not None:
            nodes = await self.retriever.retrieve(_query_text(message))

        messages = self.build_messages(message, chat_history, nodes)
        logger.info("engine.chat", history=len(chat_history), nodes=len(nodes), stream=stream)

        if stream:
            async for chunk in self.model.astream(messages):
                text = _chunk_text(chunk)
                if text:
                    yield TextDelta(text)
        else:
            reply = await self.model.ainvoke(messages)
            yield TextDelta(_chunk_text(reply))

        if nodes:
            yield Annotation("sources", {"nodes": [node.to_dict() for node in nodes]})


def create_chat_engine(llm_adapter: LLMAdapter, qdrant: QdrantManager | None = None) -> ContextChatEngine:
    """Build the chat engine.

    Args:
        llm_adapter: Initialized LLM adapter with failover.
        qdrant: Transcript index; retrieval is skipped when None.

    Returns:
        ContextChatEngine, ready to be shared across requests.

    Raises:
        LLMConfigurationError: If no LLM provider is configured.
    """
    model = llm_adapter.get_chat_model()
    retriever = TranscriptRetriever(qdrant) if qdrant is not None else None
    logger.info("engine.created", retrieval=retriever is not None)
    return ContextChatEngine(model, retriever)
