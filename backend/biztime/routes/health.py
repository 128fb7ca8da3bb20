"""
BizTime Backend — Health Check Route
=====================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the engine and reports the result.

Status levels:
    - healthy:   Database reachable (HTTP 200)
    - unhealthy: Database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from biztime import __version__
from biztime.database import engine
from biztime.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check():
    """Probe the database with SELECT 1 and report uptime."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        body = HealthResponse(
            status="unhealthy",
            version=__version__,
            database="disconnected",
            uptime_seconds=round(time.time() - _start_time, 2),
            detail=type(e).__name__,
        )
        return JSONResponse(status_code=503, content=body.model_dump())

    return HealthResponse(
        status="healthy",
        version=__version__,
        database="connected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
