"""Health check endpoints."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from api.schemas.common import HealthResponse
from core.cache import redis_cache
from core.config import settings
from database.engine import check_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

VERSION = "0.1.0"


@router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
async def health_check():
    """Liveness check; does not touch the database."""
    return HealthResponse(status="healthy", service=settings.app_name, version=VERSION)


@router.get("/health/db", response_model=HealthResponse, response_model_exclude_none=True)
async def database_health_check():
    """Check that the database answers a trivial query."""
    try:
        await check_db()
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=HealthResponse(
                status="unhealthy", service=settings.app_name, database="unreachable"
            ).model_dump(exclude_none=True),
        )
    return HealthResponse(status="healthy", service=settings.app_name, database="connected")


@router.get("/ready", response_model=HealthResponse, response_model_exclude_none=True)
async def readiness_check():
    """Readiness check for load balancers."""
    try:
        await check_db()
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Not ready, database unavailable: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "service": settings.app_name},
        )

    cache_state = "connected" if redis_cache.is_ready else "disabled"
    return HealthResponse(
        status="ready", service=settings.app_name, database="connected", cache=cache_state
    )
