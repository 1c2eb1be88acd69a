"""Events produced by a chat engine's response stream."""

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class TextDelta:
    """Incremental piece of generated text."""
    value: str


@dataclass(frozen=True)
class Annotation:
    """Structured, non-text item emitted alongside the generated text.

    Attributes:
        kind: Annotation type, e.g. "sources" or "image_url".
        payload: JSON-serializable body of the annotation.
    """
    kind: str
    payload: dict[str, Any] = field(default_factory=dict)

    def to_data(self) -> dict[str, Any]:
        """Shape used on the data channel: ``{"type": kind, "data": payload}``."""
        return {"type": self.kind, "data": self.payload}


StreamEvent = Union[TextDelta, Annotation]
