"""
Health check endpoints
"""

import logging

import redis
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quizly.core.config import settings
from quizly.core.database import check_connection, get_db

logger = logging.getLogger(__name__)

router = APIRouter()


def check_redis() -> str:
    try:
        client = redis.Redis.from_url(settings.REDIS_URL, socket_connect_timeout=2)
        client.ping()
        return "healthy"
    except redis.RedisError as e:
        logger.warning(f"Redis health check failed: {e}")
        return f"unhealthy: {e}"


@router.get("/health")
async def health_check():
    """Basic health check"""
    return {
        "success": True,
        "message": "healthy",
        "data": {"service": settings.APP_NAME, "version": settings.APP_VERSION},
    }


@router.get("/health/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """Database check, plus Redis when it is configured"""
    checks = {"database": "healthy" if check_connection(db) else "unhealthy"}
    if settings.REDIS_URL:
        checks["redis"] = check_redis()

    healthy = all(value == "healthy" for value in checks.values())
    return {
        "success": healthy,
        "message": "healthy" if healthy else "degraded",
        "data": {
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "checks": checks,
        },
    }
