"""Local thread and item models used by the chat application."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class Thread(BaseModel):
    """The application's view of a conversation, including pin state."""

    id: str
    title: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    pinned: bool = False
    pinned_at: Optional[datetime] = None


class ItemAnswer(BaseModel):
    """Answer attached to a thread item."""

    text: str = ""


class ThreadItem(BaseModel):
    """A single turn of a thread: a query, an answer, or both.

    parent_id links items into a tree so that a thread can branch.
    """

    id: str
    thread_id: str
    query: Optional[str] = None
    answer: Optional[ItemAnswer] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    parent_id: Optional[str] = None
    mode: Optional[str] = Field(default=None, description="Processing mode the item was produced with")
