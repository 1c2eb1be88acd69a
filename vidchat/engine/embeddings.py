"""Gemini embedding adapter.

Wraps the google-genai SDK to embed user questions for transcript retrieval.
"""

import os

import structlog
from google import genai
from google.genai import types

from vidchat.engine.qdrant_manager import VECTOR_SIZE

logger = structlog.get_logger(__name__)


class EmbeddingError(Exception):
    pass


_client = None


def _init_client():
    global _client
    api_key = os.environ.get("GEMINI_API_KEY", "")
    _client = genai.Client(api_key=api_key)


def embed_query(
    text: str,
    model_name: str | None = None,
    dims: int | None = VECTOR_SIZE,
) -> list[float]:
    """Generate a query embedding via Gemini (RETRIEVAL_QUERY task type).

    The vector must match the transcript collection's size, otherwise a
    Qdrant search would fail on every request.

    Args:
        text: The question to embed.
        model_name: Gemini embedding model. Defaults to EMBEDDING_MODEL.
        dims: Expected vector size, or None to skip the check.

    Returns:
        Embedding vector as a list of floats.

    Raises:
        EmbeddingError: If the API key is missing, the API call fails, or the
            vector has the wrong size.
    """
    api_key = os.environ.get("GEMINI_API_KEY")
    if not api_key:
        raise EmbeddingError("GEMINI_API_KEY environment variable is not set.")

    if _client is None:
        _init_client()

    model_name = model_name or os.environ.get("EMBEDDING_MODEL", "gemini-embedding-001")

    try:
        response = _client.models.embed_content(
            model=model_name,
            contents=text,
            config=types.EmbedContentConfig(
                task_type="RETRIEVAL_QUERY",
                output_dimensionality=dims,
            ),
        )
        embedding = list(response.embeddings[0].values)
    except Exception as e:
        logger.error("embed.failed", model=model_name, error=str(e))
        raise EmbeddingError(f"Gemini API Error: {e}")

    if dims is not None and len(embedding) != dims:
        logger.error("embed.dims_mismatch", model=model_name, expected=dims, got=len(embedding))
        raise EmbeddingError(f"Expected a {dims}-dim embedding from {model_name}, got {len(embedding)}")

    logger.debug("embed.ok", model=model_name, dims=len(embedding))
    return embedding
