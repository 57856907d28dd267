"""API dependencies."""

from database.manager import DatabaseManager


async def get_database_manager() -> DatabaseManager:
    """Dependency for database manager."""
    return DatabaseManager()
