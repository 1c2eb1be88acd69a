"""Transcript retrieval: embed the question, search Qdrant.

Both SDKs are blocking, so retrieval runs in a worker thread.
"""

import asyncio
import os

import structlog

from vidchat.engine.embeddings import EmbeddingError, embed_query
from vidchat.engine.qdrant_manager import QdrantManager, SourceNode

logger = structlog.get_logger(__name__)


class TranscriptRetriever:
    """Finds transcript chunks relevant to a question."""

    def __init__(self, qdrant: QdrantManager, top_k: int | None = None):
        self.qdrant = qdrant
        self.top_k = top_k or int(os.environ.get("RETRIEVAL_TOP_K", "3"))

    def retrieve_sync(self, query: str) -> list[SourceNode]:
        if not query.strip() or not self.qdrant.is_healthy():
            return []

        try:
            embedding = embed_query(query)
        except EmbeddingError as e:
            logger.error("retrieve.embedding_failed", error=str(e))
            return []

        nodes = self.qdrant.search_nodes(embedding, limit=self.top_k)
        logger.info("retrieve.ok", nodes=len(nodes))
        return nodes

    async def retrieve(self, query: str) -> list[SourceNode]:
        return await asyncio.to_thread(self.retrieve_sync, query)
