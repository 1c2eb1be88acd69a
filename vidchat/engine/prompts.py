"""System prompt template for the video transcript chat engine."""

from vidchat.engine.qdrant_manager import SourceNode

SYSTEM_PROMPT_TEMPLATE = """You are a helpful assistant that answers questions about a collection of YouTube videos.

## Rules
1. Ground your answers in the transcript excerpts below when they are relevant.
2. If the excerpts do not cover the question, say so and answer from general knowledge.
3. When the user attaches an image, describe or use it as the question asks.
4. Keep responses concise. Quote short passages rather than paraphrasing at length.

## Transcript Excerpts
{context}"""

NO_CONTEXT = "No transcript excerpts were retrieved for this question."


def format_context(nodes: list[SourceNode]) -> str:
    """Render retrieved chunks as a numbered list for the prompt."""
    if not nodes:
        return NO_CONTEXT

    lines = []
    for i, node in enumerate(nodes, start=1):
        video = node.metadata.get("video_id")
        header = f"[{i}] (video {video})" if video else f"[{i}]"
        lines.append(f"{header}\n{node.text.strip()}")
    return "\n\n".join(lines)


def build_system_prompt(nodes: list[SourceNode]) -> str:
    """Build the system prompt with retrieved transcript context injected.

    Args:
        nodes: Retrieved transcript chunks, best match first.

    Returns:
        Formatted system prompt string.
    """
    return SYSTEM_PROMPT_TEMPLATE.format(context=format_context(nodes))
