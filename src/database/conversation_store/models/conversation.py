"""Conversation model for chat history."""

from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field, field_validator

from database.conversation_store.models.message import Message

DEFAULT_TITLE = "New Conversation"


class Conversation(BaseModel):
    """Persisted conversation document, keyed by thread id.

    Field aliases are the camelCase names used both in MongoDB and on the wire.
    """

    thread_id: str = Field(..., alias="threadId", description="Natural key of the conversation")
    title: str = Field(default=DEFAULT_TITLE, description="Title of the conversation")
    messages: List[Message] = Field(default_factory=list, description="Messages in chronological order")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="createdAt")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="updatedAt")

    model_config = {"populate_by_name": True}

    @field_validator("title", mode="before")
    @classmethod
    def default_empty_title(cls, value):
        """Fall back to the placeholder title when none is given."""
        return value or DEFAULT_TITLE
