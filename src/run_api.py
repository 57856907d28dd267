"""Run the FastAPI server."""

import multiprocessing
import os

import uvicorn

from settings import settings

if __name__ == "__main__":
    # Each worker process owns its own MongoDB connection
    num_cores = multiprocessing.cpu_count()
    num_workers = int(os.environ.get("API_WORKERS", (2 * num_cores) + 1))

    uvicorn.run(
        "api.main:app",
        host=settings.host,
        port=settings.port,
        workers=num_workers,
    )
