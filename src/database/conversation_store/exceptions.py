"""Exceptions for conversation store operations."""


class ConversationStoreError(Exception):
    """Base exception for conversation store errors."""

    pass


class ConfigurationError(ConversationStoreError):
    """Raised when the database connection string is not configured."""

    pass


class StoreConnectionError(ConversationStoreError):
    """Raised when a connection to the database cannot be established."""

    pass


class StorageError(ConversationStoreError):
    """Raised when an operation fails against an established connection."""

    pass
