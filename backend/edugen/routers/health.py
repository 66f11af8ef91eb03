"""
Liveness and dependency checks.

- GET /health: process is up
- GET /health/detailed: adds Redis reachability (cache + exercise store)
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter

from edugen.config import settings
from edugen.db.redis import get_redis

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check() -> dict[str, Any]:
    """Report that the engine is running."""
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/detailed")
async def detailed_health_check() -> dict[str, Any]:
    """
    Report Redis reachability alongside liveness.

    Without Redis, generation still answers (every lookup is a cache miss)
    but exercises cannot be stored, so grading, hints and solutions fail.
    The status is then "degraded".
    """
    redis_status: dict[str, Any] = {"status": "healthy"}
    try:
        client = await get_redis()
        await client.ping()
    except Exception as e:
        redis_status = {"status": "unhealthy", "error": str(e)}

    return {
        "status": "ok" if redis_status["status"] == "healthy" else "degraded",
        "service": settings.APP_NAME,
        "dependencies": {"redis": redis_status},
    }
