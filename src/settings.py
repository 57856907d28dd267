"""App settings."""

from typing import Optional

from pydantic_settings import BaseSettings

from constants import (
    API_PREFIX,
    DATABASE_CONNECTION_STRING,
    DATABASE_NAME,
    SYNC_API_URL,
    SYNC_EXECUTION_CONTEXT,
    SYNC_TIMEOUT_SECONDS,
)


class Settings(BaseSettings):
    """Application settings configuration."""

    # API settings
    api_title: str = "Conversation Sync API"
    api_version: str = "1.0.0"
    api_description: str = "API for persisting chat conversations to MongoDB"
    api_prefix: str = API_PREFIX
    host: str = "0.0.0.0"
    port: int = 8000

    # Database settings
    database_connection_string: Optional[str] = DATABASE_CONNECTION_STRING
    database_name: str = DATABASE_NAME

    # Sync client settings
    sync_api_url: str = SYNC_API_URL
    sync_execution_context: str = SYNC_EXECUTION_CONTEXT
    sync_timeout_seconds: float = SYNC_TIMEOUT_SECONDS

    @property
    def is_server_context(self) -> bool:
        """Whether the sync client runs on the backend rather than in a rendering client."""
        return self.sync_execution_context.lower() == "server"


settings = Settings()
