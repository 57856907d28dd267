"""API request and response models."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from database.conversation_store.models import Conversation, Message, MessageRole


class MessagePayload(BaseModel):
    """A message as sent by a sync client."""

    id: str = Field(..., description="Message identifier")
    role: MessageRole = Field(..., description="Role of the message sender")
    content: Optional[str] = Field(default=None, description="Text of the message")
    timestamp: Optional[datetime] = Field(default=None, description="Creation timestamp, defaults to now")

    def to_message(self) -> Message:
        return Message(
            id=self.id,
            role=self.role,
            content=self.content or "",
            timestamp=self.timestamp or datetime.now(timezone.utc),
        )


class ConversationUpsertRequest(BaseModel):
    """Request model for creating or replacing a conversation.

    threadId and messages are optional here so that their absence can be
    answered with a 400 instead of a validation error.
    """

    thread_id: Optional[str] = Field(default=None, alias="threadId", description="Thread identifier")
    title: Optional[str] = Field(default=None, description="Title of the conversation")
    messages: Optional[List[MessagePayload]] = Field(default=None, description="Messages in chronological order")

    model_config = {"populate_by_name": True}


class ConversationListResponse(BaseModel):
    """Response model for listing conversations."""

    conversations: List[Conversation] = Field(..., description="Conversations, most recently updated first")


class ConversationDetailResponse(BaseModel):
    """Response model for a single conversation."""

    conversation: Conversation = Field(..., description="The requested conversation")


class SuccessResponse(BaseModel):
    """Response model for write operations."""

    success: bool = Field(default=True)
