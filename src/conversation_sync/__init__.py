"""Client-side synchronization of local threads with the conversation API."""

from conversation_sync.client import ConversationsClient
from conversation_sync.models import ItemAnswer, Thread, ThreadItem
from conversation_sync.service import ConversationSyncService, get_sync_service

__all__ = [
    "ConversationSyncService",
    "ConversationsClient",
    "ItemAnswer",
    "Thread",
    "ThreadItem",
    "get_sync_service",
]
