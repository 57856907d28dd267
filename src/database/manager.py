"""Database setup and initialization using a singleton pattern."""

import asyncio
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from database.conversation_store.conversation_manager import ConversationManager
from database.conversation_store.exceptions import ConfigurationError, StoreConnectionError
from settings import settings
from utils.logging import logger
from utils.singleton import Singleton


class DatabaseManager(metaclass=Singleton):
    """Singleton database manager owning the process-wide MongoDB connection.

    The connection is created lazily on the first acquire() and kept until
    close(). Settings are read at acquire time, not at construction, so a
    connection string configured after import is still honoured.
    """

    def __init__(self):
        """Initialize the database manager."""
        logger.info("Creating new DatabaseManager instance")
        self._client: Optional[AsyncIOMotorClient] = None
        self._database: Optional[AsyncIOMotorDatabase] = None
        self._conversation_manager: Optional[ConversationManager] = None
        self._connect_lock = asyncio.Lock()
        self._setup_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._database is not None

    async def acquire(self) -> AsyncIOMotorDatabase:
        """Return the shared database handle, connecting on first use.

        Raises:
            ConfigurationError: No connection string is configured.
            StoreConnectionError: The server could not be reached.
        """
        if self._database is not None:
            return self._database

        async with self._connect_lock:
            # Another caller may have connected while we waited
            if self._database is not None:
                return self._database

            connection_string = settings.database_connection_string
            if not connection_string:
                raise ConfigurationError("MONGODB_URI environment variable is not set")

            client = None
            try:
                logger.info("Connecting to MongoDB")
                client = AsyncIOMotorClient(connection_string, tz_aware=True)
                client.get_io_loop = asyncio.get_running_loop
                # Test connection
                await client.admin.command("ping")
            except PyMongoError as e:
                logger.error(f"Failed to connect to MongoDB: {str(e)}")
                if client is not None:
                    client.close()
                raise StoreConnectionError(f"Failed to connect to MongoDB: {str(e)}")

            self._client = client
            self._database = client.get_database(settings.database_name)
            logger.info(f"Connected to MongoDB database '{settings.database_name}'")
            return self._database

    async def setup_conversation_manager(self) -> ConversationManager:
        """Initialize and return the conversation manager."""
        if self._conversation_manager is not None:
            return self._conversation_manager

        async with self._setup_lock:
            if self._conversation_manager is None:
                database = await self.acquire()
                logger.info("Setting up conversation manager")
                self._conversation_manager = await ConversationManager.setup(database)
            return self._conversation_manager

    def close(self) -> None:
        """Close database connection. Safe to call when already closed."""
        if self._client is None:
            return

        logger.info("Closing database connection")
        self._client.close()
        self._client = None
        self._database = None
        self._conversation_manager = None

    release = close
