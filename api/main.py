"""
FastAPI application initialization and configuration.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import RedisError

from core.cache import redis_cache
from core.config import settings
from database.engine import AsyncSessionLocal, init_db, close_db
from database.seed import load_initial_data
from api.services.quiz import invalidate_quiz_schema_cache
from api.routes import health
from api.routes.v1 import bookings, coaches, quiz, slots, users

from core.middleware import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    StructuredLoggingMiddleware,
    setup_logging,
)

# Setup structured logging (do this first, before anything else)
setup_logging(
    log_level=settings.log_level,
    json_logs=settings.json_logs,
)

logger = logging.getLogger(__name__)


async def _init_cache() -> None:
    if not settings.cache_enabled:
        logger.info("Cache disabled")
        return
    try:
        await redis_cache.init()
        await redis_cache.redis.ping()
    except (RedisError, OSError) as e:
        # the cache fails open; run without it
        logger.warning(f"Redis unavailable, continuing without cache: {e}")
        await redis_cache.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events."""
    # Startup
    logger.info(f"Starting {settings.app_name} in {settings.app_env} environment")
    await init_db()
    await _init_cache()

    if settings.seed_initial_data:
        async with AsyncSessionLocal() as session:
            if await load_initial_data(session):
                # questions may have changed under cached schemas
                await invalidate_quiz_schema_cache()

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")
    await redis_cache.close()
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Coach matching and slot booking",
    version="0.1.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Setup error handlers (before middleware)
setup_error_handlers(app)

# Add middleware (order matters - they execute in reverse order)
# 1. Error handling middleware (catches whatever the handlers did not)
app.add_middleware(
    ErrorHandlingMiddleware,
    debug=settings.debug,
)

# 2. Structured logging middleware (sees the final status of every request)
app.add_middleware(
    StructuredLoggingMiddleware,
    log_request_body=settings.log_request_body,
    max_body_size=settings.log_max_body_size,
)

# 3. CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health check routes
app.include_router(health.router)

# API v1 routes
for module in (users, quiz, coaches, slots, bookings):
    app.include_router(module.router, prefix=settings.api_v1_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
