"""Unit tests for Pydantic API schemas."""

import pytest
from pydantic import ValidationError

from vidchat.api.schemas import ChatMessage, ChatRequest, ImagePart, TextPart


class TestChatMessage:

    def test_plain_text(self):
        msg = ChatMessage(role="user", content="Hello")
        assert msg.text == "Hello"
        assert msg.image_url is None

    def test_multimodal_parts(self):
        msg = ChatMessage.model_validate({
            "role": "user",
            "content": [
                {"type": "text", "text": "Describe this"},
                {"type": "image_url", "image_url": {"url": "http://x/img.png"}},
            ],
        })
        assert isinstance(msg.content[0], TextPart)
        assert isinstance(msg.content[1], ImagePart)
        assert msg.text == "Describe this"
        assert msg.image_url == "http://x/img.png"

    def test_invalid_role_rejected(self):
        with pytest.raises(ValidationError):
            ChatMessage(role="tool", content="hello")

    def test_unknown_part_type_rejected(self):
        with pytest.raises(ValidationError):
            ChatMessage.model_validate({"role": "user", "content": [{"type": "audio", "data": "x"}]})

    def test_client_extras_ignored(self):
        msg = ChatMessage.model_validate({"id": "abc", "role": "assistant", "content": "ok"})
        assert msg.role == "assistant"


class TestChatRequest:

    def test_minimal(self):
        req = ChatRequest.model_validate({"messages": [{"role": "user", "content": "Hello"}]})
        assert len(req.messages) == 1
        assert req.image_url is None
        assert req.embeddings is None

    def test_missing_messages_allowed_at_schema_level(self):
        assert ChatRequest.model_validate({}).messages is None

    def test_image_url_from_data(self):
        req = ChatRequest.model_validate({
            "messages": [{"role": "user", "content": "Describe this"}],
            "data": {"imageUrl": "http://x/img.png", "other": 1},
        })
        assert req.image_url == "http://x/img.png"

    def test_image_url_wrong_type_rejected(self):
        with pytest.raises(ValidationError):
            ChatRequest.model_validate({"messages": [], "data": {"imageUrl": 42}})

    def test_embeddings_must_be_vectors(self):
        with pytest.raises(ValidationError):
            ChatRequest.model_validate({"messages": [], "embeddings": ["not-a-vector"]})

    def test_messages_must_be_list(self):
        with pytest.raises(ValidationError):
            ChatRequest.model_validate({"messages": "hello"})
