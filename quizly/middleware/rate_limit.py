"""
Rate limiting middleware for Quizly
Default per-client limits through slowapi, stored in memory or Redis
"""

import logging

from fastapi import FastAPI, Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from quizly.core.config import settings
from quizly.core.exceptions import create_error_response

logger = logging.getLogger(__name__)


def build_limiter() -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        default_limits=[f"{settings.RATE_LIMIT_REQUESTS}/{settings.RATE_LIMIT_PERIOD} seconds"],
        storage_uri=settings.get_rate_limit_storage_uri(),
        enabled=settings.RATE_LIMIT_ENABLED,
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(
        "Rate limit exceeded",
        extra={"path": request.url.path, "client": get_remote_address(request), "limit": str(exc.detail)},
    )
    response = create_error_response(429, "Too many requests. Please try again later.")
    response.headers["Retry-After"] = str(settings.RATE_LIMIT_PERIOD)
    return response


def add_rate_limiting(app: FastAPI) -> Limiter:
    """Add rate limiting to application"""
    limiter = build_limiter()
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    logger.info(f"Rate limiting enabled: {settings.RATE_LIMIT_REQUESTS} requests per {settings.RATE_LIMIT_PERIOD}s")
    return limiter
