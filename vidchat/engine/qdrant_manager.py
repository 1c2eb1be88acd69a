"""Qdrant vector store manager.

Read side of the transcript index. The collection is populated by a separate
ingestion process; this manager only makes sure it exists and searches it,
degrading to empty results if the database is unreachable.
"""

import os
from dataclasses import dataclass, field

import structlog
from qdrant_client import QdrantClient
from qdrant_client.http import models

logger = structlog.get_logger(__name__)

VECTOR_SIZE = 3072


@dataclass
class SourceNode:
    """A retrieved transcript chunk.

    Attributes:
        id: Qdrant point id.
        score: Cosine similarity to the query.
        text: Chunk text used as context.
        metadata: Remaining payload fields (video id, title, offsets...).
    """
    id: str
    score: float
    text: str
    metadata: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"id": self.id, "score": self.score, "text": self.text, "metadata": self.metadata}


class QdrantManager:
    """Wraps QdrantClient with collection setup and graceful degradation."""

    def __init__(self):
        self._url = os.environ.get("QDRANT_URL")
        self._api_key = os.environ.get("QDRANT_API_KEY")
        self.collection = os.environ.get("QDRANT_COLLECTION", "transcripts")
        self._client = None

        if not self._url:
            logger.warning("qdrant.no_url")
            return

        try:
            self._client = QdrantClient(url=self._url, api_key=self._api_key, timeout=10)
            self._ensure_collection()
            logger.info("qdrant.connected", collection=self.collection)
        except Exception as e:
            logger.error("qdrant.init_failed", error=str(e))
            self._client = None

    def _ensure_collection(self):
        """Create the transcript collection if it is missing."""
        if self._client.collection_exists(self.collection):
            return

        logger.info("qdrant.create_collection", name=self.collection)
        self._client.create_collection(
            collection_name=self.collection,
            vectors_config=models.VectorParams(
                size=VECTOR_SIZE,
                distance=models.Distance.COSINE,
            ),
        )
        self._client.create_payload_index(
            collection_name=self.collection,
            field_name="video_id",
            field_schema=models.PayloadSchemaType.KEYWORD,
        )

    def is_healthy(self) -> bool:
        return self._client is not None

    def search_nodes(self, embedding: list[float], limit: int = 3) -> list[SourceNode]:
        """Return the top transcript chunks for a query vector.

        Args:
            embedding: Query vector.
            limit: Maximum number of chunks.

        Returns:
            SourceNodes ordered by descending score; empty on any failure.
        """
        if not self._client:
            return []

        try:
            response = self._client.query_points(
                collection_name=self.collection,
                query=embedding,
                limit=limit,
                with_payload=True,
            )
            points = response.points if response else []
        except Exception as e:
            logger.error("qdrant.search_err", collection=self.collection, error=str(e))
            return []

        nodes = []
        for point in points:
            payload = dict(point.payload or {})
            text = payload.pop("text", "")
            nodes.append(SourceNode(id=str(point.id), score=point.score, text=text, metadata=payload))
        return nodes
