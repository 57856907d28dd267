"""Main FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routers import conversation, health
from database.manager import DatabaseManager
from settings import settings
from utils.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The connection is opened lazily by the first request
    yield

    # uvicorn turns SIGINT/SIGTERM into this shutdown phase
    logger.info("Shutting down, releasing database connection")
    DatabaseManager().close()


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": ...} bodies."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=getattr(exc, "headers", None))


def create_app() -> FastAPI:
    """Create FastAPI application."""
    app = FastAPI(title=settings.api_title, version=settings.api_version, description=settings.api_description, lifespan=lifespan)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Allows all origins
        allow_credentials=True,
        allow_methods=["*"],  # Allows all methods
        allow_headers=["*"],  # Allows all headers
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Add routers
    app.include_router(health.router)
    app.include_router(conversation.router, prefix=settings.api_prefix)

    return app


app = create_app()
