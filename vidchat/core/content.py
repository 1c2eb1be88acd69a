"""Message content normalization.

Converts the user's text and an optional image URL into the content shape
the chat engine accepts.
"""

from vidchat.api.schemas import ImagePart, ImageURL, MessageContent, TextPart


def normalize_content(text: str, image_url: str | None) -> MessageContent:
    """Build canonical message content for the active user turn.

    Args:
        text: The user's message text.
        image_url: Optional URL of an attached image.

    Returns:
        ``text`` unchanged when there is no image, otherwise a two-part list
        with the text part first and the image part second.
    """
    if not image_url:
        return text
    return [
        TextPart(text=text),
        ImagePart(image_url=ImageURL(url=image_url)),
    ]
