#!/usr/bin/env python
"""
Connection check for the conversation store.

Connects with the configured MONGODB_URI, then creates, reads, updates and
deletes a throwaway conversation, reporting each step. Without MONGODB_URI
the script only reports that sync is disabled.
"""

import asyncio
import sys
from datetime import datetime, timezone

from database.conversation_store.exceptions import ConversationStoreError
from database.conversation_store.models import Message, MessageRole
from database.manager import DatabaseManager
from settings import settings


async def run_check() -> bool:
    """Exercise every repository operation once. Returns True on success."""
    if not settings.database_connection_string:
        print("MONGODB_URI not set - conversation sync is disabled, nothing to check")
        return True

    db_manager = DatabaseManager()
    thread_id = f"check-thread-{int(datetime.now(timezone.utc).timestamp())}"
    messages = [
        Message(id="msg-1", role=MessageRole.USER, content="Hello, this is a test message"),
        Message(id="msg-2", role=MessageRole.ASSISTANT, content="Hello! This is a test response."),
    ]

    try:
        conversations = await db_manager.setup_conversation_manager()
        print(f"Connected to database '{settings.database_name}'")

        await conversations.upsert_conversation(thread_id, "Connection check", messages)
        print(f"Conversation created: {thread_id}")

        found = await conversations.get_conversation(thread_id)
        print(f"Conversation found: {'yes' if found else 'no'}")

        await conversations.upsert_conversation(thread_id, "Connection check (updated)", messages[:1])
        updated = await conversations.get_conversation(thread_id)
        print(f"Conversation updated: title={updated.title!r}, messages={len(updated.messages)}")

        deleted = await conversations.delete_conversation(thread_id)
        print(f"Conversation deleted: {'yes' if deleted else 'no'}")
        return bool(found and deleted)

    except ConversationStoreError as e:
        print(f"Conversation store check failed: {str(e)}")
        return False
    finally:
        db_manager.close()


if __name__ == "__main__":
    sys.exit(0 if asyncio.run(run_check()) else 1)
