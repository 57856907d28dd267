"""Models for conversation store."""

from database.conversation_store.models.conversation import DEFAULT_TITLE, Conversation
from database.conversation_store.models.message import Message, MessageRole

__all__ = ["Conversation", "DEFAULT_TITLE", "Message", "MessageRole"]
