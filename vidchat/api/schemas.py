"""Pydantic models for the API layer.

Defines the inbound chat request (Vercel AI `useChat` body) and the
canonical multimodal message content passed to the chat engine.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class TextPart(BaseModel):
    """Text segment of a multimodal message."""
    type: Literal["text"] = "text"
    text: str


class ImageURL(BaseModel):
    url: str = Field(..., min_length=1)


class ImagePart(BaseModel):
    """Image segment of a multimodal message, referenced by URL."""
    type: Literal["image_url"] = "image_url"
    image_url: ImageURL


ContentPart = Annotated[Union[TextPart, ImagePart], Field(discriminator="type")]

# Plain text, or an ordered list of typed parts (text before image).
MessageContent = Union[str, list[ContentPart]]


class ChatMessage(BaseModel):
    """Single conversation turn."""
    model_config = ConfigDict(extra="ignore")

    role: Literal["user", "assistant", "system"]
    content: MessageContent

    @property
    def text(self) -> str:
        """Concatenated text of the message, ignoring image parts."""
        if isinstance(self.content, str):
            return self.content
        return "".join(p.text for p in self.content if isinstance(p, TextPart))

    @property
    def image_url(self) -> str | None:
        """URL of the first image part, if any."""
        if isinstance(self.content, str):
            return None
        for part in self.content:
            if isinstance(part, ImagePart):
                return part.image_url.url
        return None


class ChatData(BaseModel):
    """Free-form `data` object sent by the client alongside the messages."""
    model_config = ConfigDict(extra="allow")

    imageUrl: str | None = None


class ChatRequest(BaseModel):
    """Incoming chat request body."""
    model_config = ConfigDict(extra="ignore")

    messages: list[ChatMessage] | None = None
    data: ChatData | None = None
    embeddings: list[list[float]] | None = None

    @property
    def image_url(self) -> str | None:
        return self.data.imageUrl if self.data else None


class ErrorResponse(BaseModel):
    """JSON body returned for failures before streaming starts."""
    error: str
