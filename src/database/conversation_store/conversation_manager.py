"""Manager for persisted conversation documents."""

from datetime import datetime, timezone
from typing import Iterable, List, Optional

import pymongo
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from database.conversation_store.exceptions import StorageError
from database.conversation_store.models.conversation import DEFAULT_TITLE, Conversation
from database.conversation_store.models.message import Message
from utils.logging import logger

# Never hand the store's generated identifier back to callers
NO_OBJECT_ID = {"_id": 0}


class ConversationManager:
    """Collection-level operations on conversations keyed by thread id."""

    COLLECTION_CONVERSATIONS: str = "conversations"

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        """Initialize manager with a MongoDB database handle.
        Note: Use ConversationManager.setup() to create a properly initialized instance."""
        self._db = database
        self._conversations: AsyncIOMotorCollection = self._db.get_collection(self.COLLECTION_CONVERSATIONS)

    @classmethod
    async def setup(cls, database: AsyncIOMotorDatabase) -> "ConversationManager":
        """Factory method to create and setup a ConversationManager instance."""
        manager = cls(database)
        try:
            await manager._conversations.create_indexes(
                [
                    # One document per thread
                    pymongo.IndexModel([("threadId", pymongo.ASCENDING)], unique=True),
                    # Recency ordering for listing
                    pymongo.IndexModel([("updatedAt", pymongo.DESCENDING)]),
                ]
            )
        except PyMongoError as e:
            raise StorageError(f"Failed to setup indexes: {str(e)}")
        return manager

    async def list_conversations(self) -> List[Conversation]:
        """Lists every conversation, most recently updated first."""
        try:
            logger.info("Listing conversations")
            cursor = self._conversations.find({}, projection=NO_OBJECT_ID).sort([("updatedAt", pymongo.DESCENDING)])

            conversations = []
            async for doc in cursor:
                conversations.append(Conversation.model_validate(doc))
            return conversations

        except PyMongoError as e:
            raise StorageError(f"Failed to list conversations: {str(e)}")

    async def get_conversation(self, thread_id: str) -> Optional[Conversation]:
        """Retrieves a conversation by thread id, or None if there is none."""
        try:
            logger.debug(f"Getting conversation {thread_id}")
            doc = await self._conversations.find_one({"threadId": thread_id}, projection=NO_OBJECT_ID)
        except PyMongoError as e:
            raise StorageError(f"Failed to get conversation: {str(e)}")

        if not doc:
            return None
        return Conversation.model_validate(doc)

    async def upsert_conversation(self, thread_id: str, title: Optional[str], messages: Iterable[Message]) -> None:
        """Creates the conversation on first save, otherwise replaces its title and messages.

        createdAt is only ever written by the insert branch.
        """
        now = datetime.now(tz=timezone.utc)
        message_docs = [message.model_dump(mode="python") for message in messages]
        update_data = {"title": title or DEFAULT_TITLE, "messages": message_docs, "updatedAt": now}

        try:
            existing = await self._conversations.find_one({"threadId": thread_id}, projection={"_id": 1})

            if existing:
                if await self._update(thread_id, update_data):
                    return
                # Deleted between our lookup and update
                logger.warning(f"Conversation {thread_id} disappeared before update, inserting instead")

            logger.info(f"Creating conversation {thread_id}")
            try:
                await self._conversations.insert_one({"threadId": thread_id, **update_data, "createdAt": now})
            except DuplicateKeyError:
                # Another writer inserted the same thread between our lookup and insert
                logger.warning(f"Conversation {thread_id} was created concurrently, updating instead")
                await self._update(thread_id, update_data)

        except PyMongoError as e:
            raise StorageError(f"Failed to save conversation: {str(e)}")

    async def _update(self, thread_id: str, update_data: dict) -> bool:
        """Applies update_data to the thread's document. Returns whether one matched."""
        logger.info(f"Updating conversation {thread_id}")
        result = await self._conversations.update_one({"threadId": thread_id}, {"$set": update_data})
        if result.matched_count == 0:
            return False
        if result.modified_count == 0:
            logger.warning(f"No changes made to conversation {thread_id}")
        return True

    async def delete_conversation(self, thread_id: str) -> bool:
        """Deletes a conversation. Returns whether a document was removed."""
        try:
            logger.info(f"Deleting conversation {thread_id}")
            result = await self._conversations.delete_one({"threadId": thread_id})
        except PyMongoError as e:
            raise StorageError(f"Failed to delete conversation: {str(e)}")

        deleted = result.deleted_count > 0
        if not deleted:
            logger.info(f"Conversation {thread_id} did not exist")
        return deleted
