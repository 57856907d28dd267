"""Message model embedded in a persisted conversation."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    """Enum for message roles."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single chat turn stored inside its parent conversation."""

    id: str = Field(..., description="Message identifier, unique within its conversation")
    role: MessageRole = Field(..., description="Role of the message sender")
    content: str = Field(default="", description="Text of the message")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="When the message was created")

    model_config = {"use_enum_values": True}
