"""Tests for message content normalization."""

import pytest

from vidchat.api.schemas import ImagePart, TextPart
from vidchat.core.content import normalize_content


def test_text_only_returned_unchanged():
    assert normalize_content("Hello", None) == "Hello"


def test_empty_image_url_is_text_only():
    assert normalize_content("Hello", "") == "Hello"


@pytest.mark.parametrize("text,url", [
    ("Describe this", "http://x/img.png"),
    ("What is shown?", "https://cdn.example.com/a.jpg"),
])
def test_image_produces_text_then_image(text, url):
    content = normalize_content(text, url)
    assert isinstance(content, list)
    assert len(content) == 2
    assert isinstance(content[0], TextPart)
    assert isinstance(content[1], ImagePart)
    assert content[0].text == text
    assert content[1].image_url.url == url


def test_serialized_shape():
    content = normalize_content("Describe this", "http://x/img.png")
    assert [part.model_dump() for part in content] == [
        {"type": "text", "text": "Describe this"},
        {"type": "image_url", "image_url": {"url": "http://x/img.png"}},
    ]
