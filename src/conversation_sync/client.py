"""HTTP client for the conversation endpoints."""

from typing import List, Optional
from urllib.parse import quote

import httpx

from database.conversation_store.models import Conversation
from settings import settings


class ConversationsClient:
    """Thin wrapper over the /conversations routes.

    Every method raises httpx errors as-is; callers decide what a failure means.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = (base_url or settings.sync_api_url).rstrip("/") + settings.api_prefix
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.sync_timeout_seconds,
            transport=transport,
        )

    @staticmethod
    def _conversation_path(thread_id: str) -> str:
        # Thread ids may contain "/", "?" or "#"
        return f"/conversations/{quote(thread_id, safe='')}"

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()

    async def list_conversations(self) -> List[Conversation]:
        response = await self.client.get("/conversations")
        response.raise_for_status()
        data = response.json()
        return [Conversation.model_validate(doc) for doc in data.get("conversations") or []]

    async def get_conversation(self, thread_id: str) -> Optional[Conversation]:
        """Fetch one conversation, None if the server has no such thread."""
        response = await self.client.get(self._conversation_path(thread_id))
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        return Conversation.model_validate(response.json()["conversation"])

    async def save_conversation(self, conversation: Conversation) -> None:
        response = await self.client.post(
            "/conversations",
            json=conversation.model_dump(mode="json", by_alias=True),
        )
        response.raise_for_status()

    async def delete_conversation(self, thread_id: str) -> None:
        response = await self.client.delete(self._conversation_path(thread_id))
        response.raise_for_status()
