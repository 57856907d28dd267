"""Shared fixtures: an in-memory stand-in for a Motor collection and the API wired to it."""

import copy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from api.dependencies import get_database_manager
from api.main import app
from database.conversation_store.conversation_manager import ConversationManager


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    return all(doc.get(key) == value for key, value in query.items())


def _project(doc: Dict[str, Any], projection: Optional[Dict[str, int]]) -> Dict[str, Any]:
    doc = copy.deepcopy(doc)
    if not projection:
        return doc
    if projection.get("_id") == 0:
        doc.pop("_id", None)
        return doc
    return {key: value for key, value in doc.items() if projection.get(key)}


class FakeCursor:
    """Async cursor over a snapshot of documents."""

    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs

    def sort(self, keys):
        for key, direction in reversed(keys):
            self._docs.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return self

    def __aiter__(self):
        self._iter = iter(self._docs)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """Just enough of AsyncIOMotorCollection for the conversation store.

    threadId is treated as a unique key, like the index the store creates.
    """

    def __init__(self):
        self.docs: List[Dict[str, Any]] = []
        self.indexes = []

    async def create_indexes(self, indexes):
        self.indexes.extend(indexes)
        return [str(index) for index in indexes]

    async def find_one(self, query, projection=None):
        for doc in self.docs:
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    def find(self, query, projection=None):
        return FakeCursor([_project(doc, projection) for doc in self.docs if _matches(doc, query)])

    async def insert_one(self, document):
        if any(doc["threadId"] == document["threadId"] for doc in self.docs):
            raise DuplicateKeyError(f"E11000 duplicate key error threadId: {document['threadId']}")
        stored = copy.deepcopy(document)
        stored["_id"] = ObjectId()
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    async def update_one(self, query, update):
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(copy.deepcopy(update["$set"]))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query):
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDatabase:
    """Hands out one FakeCollection per name."""

    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class FakeDatabaseManager:
    """Stands in for DatabaseManager in API tests."""

    def __init__(self, conversation_manager: ConversationManager):
        self.conversation_manager = conversation_manager

    async def setup_conversation_manager(self) -> ConversationManager:
        return self.conversation_manager


@pytest.fixture
def fake_database() -> FakeDatabase:
    """In-memory database."""
    return FakeDatabase()


@pytest.fixture
def conversations_collection(fake_database: FakeDatabase) -> FakeCollection:
    """The collection backing the conversation manager."""
    return fake_database.get_collection(ConversationManager.COLLECTION_CONVERSATIONS)


@pytest.fixture
def conversation_manager(fake_database: FakeDatabase) -> ConversationManager:
    """Conversation manager over the in-memory database."""
    return ConversationManager(fake_database)


@pytest.fixture
def api_app(conversation_manager: ConversationManager):
    """The FastAPI app with its database manager replaced by the in-memory one."""
    app.dependency_overrides[get_database_manager] = lambda: FakeDatabaseManager(conversation_manager)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(api_app) -> TestClient:
    """Test client for the API."""
    return TestClient(api_app)
