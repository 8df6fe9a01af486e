"""Middleware modules for Quizly"""

from .logging_middleware import LoggingMiddleware
from .rate_limit import add_rate_limiting
from .request_id import RequestIDMiddleware

__all__ = [
    "add_rate_limiting",
    "RequestIDMiddleware",
    "LoggingMiddleware",
]
