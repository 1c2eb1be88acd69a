"""Conversation validation.

Splits the inbound message list into prior history and the active user turn.
"""

from vidchat.api.schemas import ChatMessage

INVALID_CONVERSATION_MESSAGE = (
    "messages are required in the request body and the last message must be from the user"
)


class InvalidRequestError(Exception):
    """Client-caused request shape or role violation."""
    pass


def split_conversation(
    messages: list[ChatMessage] | None,
) -> tuple[list[ChatMessage], ChatMessage]:
    """Pop the trailing user turn off a conversation.

    The caller's list is left untouched; history is a copy in original order.

    Args:
        messages: Full conversation as received from the client.

    Returns:
        Tuple of (history, user_message).

    Raises:
        InvalidRequestError: If there are no messages or the last one is not
            from the user.
    """
    if not messages:
        raise InvalidRequestError(INVALID_CONVERSATION_MESSAGE)

    history = list(messages)
    user_message = history.pop()
    if user_message is None or user_message.role != "user":
        raise InvalidRequestError(INVALID_CONVERSATION_MESSAGE)

    return history, user_message
