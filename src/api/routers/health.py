"""Health check route."""

from fastapi import APIRouter

from settings import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Report liveness and whether a database is configured."""
    return {
        "status": "healthy",
        "database_configured": bool(settings.database_connection_string),
    }
