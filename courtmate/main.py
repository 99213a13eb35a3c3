# courtmate/main.py
"""
CourtMate scheduling API with database pool lifecycle management.
"""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from courtmate.config import settings
from courtmate.db.pool import db_pool
from courtmate.features.scheduling.api.router import router as scheduling_router
from courtmate.infrastructure.observability.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    log_request,
    setup_logging,
)
from courtmate.routes import health, ratings, recommendations

# Setup logging before creating the app
setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database pool on startup and close it on shutdown."""
    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    try:
        await db_pool.initialize()
    except Exception as e:
        logger.error("Failed to initialize services", error=str(e))
        raise

    yield

    logger.info("Application shutting down")
    try:
        await db_pool.close()
    except Exception as e:
        logger.error("Error closing database pool", error=str(e))


app = FastAPI(
    title="CourtMate Scheduling",
    description="Mutual availability, smart scheduling and player recommendations",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(scheduling_router)
app.include_router(recommendations.router)
app.include_router(ratings.router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Tag each request with an id, log it with timing and echo the id back."""
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    clear_request_context()
    bind_request_context(request_id=request_id)

    start_time = time.time()
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.time() - start_time) * 1000, 2),
        user_id=getattr(request.state, "user_id", None),
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
