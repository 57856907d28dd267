"""Conversation store backed by a single MongoDB collection."""

from database.conversation_store.conversation_manager import ConversationManager

__all__ = ["ConversationManager"]
