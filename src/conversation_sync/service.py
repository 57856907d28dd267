"""Best-effort synchronization of local threads with the conversation store."""

import asyncio
from datetime import datetime, timezone
from functools import lru_cache
from typing import List, Optional, Sequence, Set, Tuple

from conversation_sync.client import ConversationsClient
from conversation_sync.models import ItemAnswer, Thread, ThreadItem
from database.conversation_store.models import Conversation, Message, MessageRole
from settings import settings
from utils.logging import logger


class ConversationSyncService:
    """Mirror local threads to the remote store without ever failing the caller.

    The service is enabled only on the server side and only when a database
    connection string is configured. When disabled every operation is a
    no-op returning a safe default, so the application keeps working on its
    local store alone.
    """

    def __init__(
        self,
        client: Optional[ConversationsClient] = None,
        connection_string: Optional[str] = None,
        server_context: Optional[bool] = None,
    ):
        """Initialize the sync service.

        Args:
            client: HTTP client for the conversation routes, created on first use if omitted
            connection_string: Database connection string, defaults to the configured one
            server_context: Whether we run on the backend, defaults to the configured execution context
        """
        self.connection_string = connection_string if connection_string is not None else settings.database_connection_string
        self.server_context = server_context if server_context is not None else settings.is_server_context
        self._client = client
        self._pending: Set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return self.server_context and bool(self.connection_string)

    @property
    def client(self) -> ConversationsClient:
        if self._client is None:
            self._client = ConversationsClient()
        return self._client

    async def save(self, thread: Thread, items: Sequence[ThreadItem]) -> None:
        """Push a thread and its items to the store. Failures are logged, never raised."""
        if not self.enabled:
            logger.debug("Conversation sync disabled - skipping save")
            return

        try:
            conversation = self.to_persisted_format(thread, items)
            await self.client.save_conversation(conversation)
            logger.info(f"Conversation saved to MongoDB: {thread.id}")
        except Exception as e:
            logger.error(f"Error saving conversation {thread.id} to MongoDB: {str(e)}")

    def schedule_save(self, thread: Thread, items: Sequence[ThreadItem]) -> Optional[asyncio.Task]:
        """Run save() as a detached background task and return it.

        Returns None when sync is disabled or no event loop is running.
        """
        if not self.enabled:
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.error(f"Cannot schedule save of conversation {thread.id}: no running event loop")
            return None

        task = loop.create_task(self.save(thread, list(items)))
        # The loop only keeps weak references to tasks
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def load(self) -> List[Conversation]:
        """Fetch every stored conversation, most recent first. Returns [] on any failure."""
        if not self.enabled:
            return []

        try:
            return await self.client.list_conversations()
        except Exception as e:
            logger.error(f"Error loading conversations from MongoDB: {str(e)}")
            return []

    async def load_conversation(self, thread_id: str) -> Optional[Conversation]:
        """Fetch a single conversation, None if it is missing or the request fails."""
        if not self.enabled:
            return None

        try:
            return await self.client.get_conversation(thread_id)
        except Exception as e:
            logger.error(f"Error loading conversation {thread_id} from MongoDB: {str(e)}")
            return None

    async def load_threads(self) -> List[Tuple[Thread, List[ThreadItem]]]:
        """Load all conversations in the local thread/item shape."""
        return [self.to_local_format(conversation) for conversation in await self.load()]

    async def delete(self, thread_id: str) -> None:
        """Remove a conversation from the store. Failures are logged, never raised."""
        if not self.enabled:
            return

        try:
            await self.client.delete_conversation(thread_id)
            logger.info(f"Conversation deleted from MongoDB: {thread_id}")
        except Exception as e:
            logger.error(f"Error deleting conversation {thread_id} from MongoDB: {str(e)}")

    async def aclose(self) -> None:
        """Wait for background saves to finish and close the HTTP client."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if self._client is not None:
            await self._client.close()
            self._client = None

    @staticmethod
    def to_persisted_format(thread: Thread, items: Sequence[ThreadItem]) -> Conversation:
        """Flatten a thread into a conversation with one message per item.

        An item with a query becomes a user message, anything else an
        assistant message carrying the answer text. Answers on items that
        also have a query are not persisted.
        """
        messages = [
            Message(
                id=item.id,
                role=MessageRole.USER if item.query else MessageRole.ASSISTANT,
                content=item.query or (item.answer.text if item.answer else "") or "",
                timestamp=item.created_at,
            )
            for item in sorted(items, key=lambda item: item.created_at)
        ]

        return Conversation(
            thread_id=thread.id,
            title=thread.title,
            messages=messages,
            created_at=thread.created_at,
            updated_at=datetime.now(timezone.utc),
        )

    @staticmethod
    def to_local_format(conversation: Conversation) -> Tuple[Thread, List[ThreadItem]]:
        """Rebuild a thread and its items from a stored conversation.

        Pin state is not stored, so the thread comes back unpinned with no
        pin time. Items are chained linearly through parent_id; branches of
        the local thread cannot be recovered.
        """
        thread = Thread(
            id=conversation.thread_id,
            title=conversation.title,
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
            pinned=False,
            pinned_at=None,
        )

        items = []
        previous_id = None
        for message in conversation.messages:
            is_user = message.role == MessageRole.USER
            items.append(
                ThreadItem(
                    id=message.id,
                    thread_id=conversation.thread_id,
                    query=message.content if is_user else "",
                    answer=None if is_user else ItemAnswer(text=message.content),
                    created_at=message.timestamp,
                    parent_id=previous_id,
                )
            )
            previous_id = message.id

        return thread, items


@lru_cache(maxsize=1)
def get_sync_service() -> ConversationSyncService:
    """Return the process-wide sync service built from settings."""
    return ConversationSyncService()
