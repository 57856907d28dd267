"""Tests for the conversation routes."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_database_manager
from database.conversation_store.exceptions import ConfigurationError, StorageError
from settings import settings

CONVERSATIONS_URL = f"{settings.api_prefix}/conversations"


class BrokenConversationManager:
    """Conversation manager whose every operation fails."""

    async def list_conversations(self):
        raise StorageError("connection reset")

    async def get_conversation(self, thread_id):
        raise StorageError("connection reset")

    async def upsert_conversation(self, thread_id, title, messages):
        raise StorageError("connection reset")

    async def delete_conversation(self, thread_id):
        raise StorageError("connection reset")


class BrokenDatabaseManager:
    def __init__(self, error=None):
        self.error = error

    async def setup_conversation_manager(self):
        if self.error:
            raise self.error
        return BrokenConversationManager()


@pytest.fixture
def conversation_payload():
    return {
        "threadId": "t1",
        "title": "Greetings",
        "messages": [
            {"id": "msg-1", "role": "user", "content": "Hello", "timestamp": "2024-01-01T12:00:00Z"},
            {"id": "msg-2", "role": "assistant", "content": "Hi there", "timestamp": "2024-01-01T12:01:00Z"},
        ],
    }


@pytest.fixture
def broken_client(api_app):
    """Client whose database layer fails on every operation."""
    api_app.dependency_overrides[get_database_manager] = lambda: BrokenDatabaseManager()
    return TestClient(api_app)


def test_get_conversation_before_save(api_client):
    """Test that an unknown thread is a 404."""
    response = api_client.get(f"{CONVERSATIONS_URL}/t1")

    assert response.status_code == 404
    assert response.json() == {"error": "Conversation not found"}


def test_save_and_get_conversation(api_client, conversation_payload):
    """Test saving a conversation and reading it back."""
    response = api_client.post(CONVERSATIONS_URL, json=conversation_payload)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    response = api_client.get(f"{CONVERSATIONS_URL}/t1")
    assert response.status_code == 200
    conversation = response.json()["conversation"]
    assert conversation["threadId"] == "t1"
    assert conversation["title"] == "Greetings"
    assert [(m["role"], m["content"]) for m in conversation["messages"]] == [("user", "Hello"), ("assistant", "Hi there")]
    assert "createdAt" in conversation and "updatedAt" in conversation
    assert "_id" not in conversation


def test_save_twice_keeps_created_at(api_client, conversation_payload):
    """Test that a second save replaces messages and keeps createdAt."""
    api_client.post(CONVERSATIONS_URL, json=conversation_payload)
    created_at = api_client.get(f"{CONVERSATIONS_URL}/t1").json()["conversation"]["createdAt"]

    conversation_payload["messages"] = conversation_payload["messages"][:1]
    conversation_payload["title"] = "Renamed"
    api_client.post(CONVERSATIONS_URL, json=conversation_payload)

    listed = api_client.get(CONVERSATIONS_URL).json()["conversations"]
    assert len(listed) == 1
    assert listed[0]["title"] == "Renamed"
    assert len(listed[0]["messages"]) == 1
    assert listed[0]["createdAt"] == created_at


def test_save_without_title_uses_placeholder(api_client, conversation_payload):
    del conversation_payload["title"]

    api_client.post(CONVERSATIONS_URL, json=conversation_payload)

    assert api_client.get(f"{CONVERSATIONS_URL}/t1").json()["conversation"]["title"] == "New Conversation"


def test_save_fills_missing_message_fields(api_client):
    """Test that a message without content or timestamp is still accepted."""
    response = api_client.post(CONVERSATIONS_URL, json={"threadId": "t1", "messages": [{"id": "msg-1", "role": "assistant"}]})
    assert response.status_code == 200

    message = api_client.get(f"{CONVERSATIONS_URL}/t1").json()["conversation"]["messages"][0]
    assert message["content"] == ""
    assert message["timestamp"]


@pytest.mark.parametrize("missing", ["threadId", "messages"])
def test_save_missing_required_fields(api_client, conversation_payload, missing):
    """Test that threadId and messages are required."""
    del conversation_payload[missing]

    response = api_client.post(CONVERSATIONS_URL, json=conversation_payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}


def test_save_with_empty_messages(api_client):
    """Test that an empty message list is a valid save."""
    response = api_client.post(CONVERSATIONS_URL, json={"threadId": "t1", "messages": []})

    assert response.status_code == 200
    assert api_client.get(f"{CONVERSATIONS_URL}/t1").json()["conversation"]["messages"] == []


def test_list_conversations_most_recent_first(api_client, conversations_collection):
    now = datetime.now(timezone.utc)
    for thread_id, age in [("old", 2), ("new", 0)]:
        conversations_collection.docs.append(
            {"threadId": thread_id, "title": thread_id, "messages": [], "createdAt": now, "updatedAt": now - timedelta(hours=age)}
        )

    response = api_client.get(CONVERSATIONS_URL)

    assert response.status_code == 200
    assert [c["threadId"] for c in response.json()["conversations"]] == ["new", "old"]


def test_list_conversations_empty(api_client):
    response = api_client.get(CONVERSATIONS_URL)

    assert response.status_code == 200
    assert response.json() == {"conversations": []}


def test_delete_conversation(api_client, conversation_payload):
    api_client.post(CONVERSATIONS_URL, json=conversation_payload)

    response = api_client.delete(f"{CONVERSATIONS_URL}/t1")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert api_client.get(f"{CONVERSATIONS_URL}/t1").status_code == 404


def test_delete_missing_conversation(api_client):
    """Test that deleting an unknown thread is a 404, not a failure."""
    response = api_client.delete(f"{CONVERSATIONS_URL}/missing")

    assert response.status_code == 404
    assert response.json() == {"error": "Conversation not found"}


@pytest.mark.parametrize(
    "method, path, kwargs, error",
    [
        ("get", "", {}, "Failed to fetch conversations"),
        ("post", "", {"json": {"threadId": "t1", "messages": []}}, "Failed to save conversation"),
        ("get", "/t1", {}, "Failed to fetch conversation"),
        ("delete", "/t1", {}, "Failed to delete conversation"),
    ],
)
def test_storage_failures_are_500(broken_client, method, path, kwargs, error):
    """Test that storage errors become 500 responses."""
    response = getattr(broken_client, method)(f"{CONVERSATIONS_URL}{path}", **kwargs)

    assert response.status_code == 500
    assert response.json() == {"error": error}


def test_unconfigured_database_is_500(api_app):
    """Test that a missing connection string fails the request, not the process."""
    api_app.dependency_overrides[get_database_manager] = lambda: BrokenDatabaseManager(ConfigurationError("MONGODB_URI environment variable is not set"))
    client = TestClient(api_app)

    response = client.get(CONVERSATIONS_URL)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch conversations"}


def test_health(api_client, monkeypatch):
    monkeypatch.setattr(settings, "database_connection_string", None)

    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database_configured": False}
