"""FastAPI middleware for request processing.

Middleware components:
- Rate limiting for login and registration
"""

from .rate_limiting import RateLimitMiddleware, RateLimiter

__all__ = [
    "RateLimitMiddleware",
    "RateLimiter",
]
