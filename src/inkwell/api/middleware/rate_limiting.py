"""Rate limiting middleware for the login and registration endpoints.

Uses a sliding window per client IP with in-memory storage, so limits are per
process.
"""
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

DEFAULT_LIMITED_PATHS = ("/api/auth/register", "/api/auth/login")


@dataclass
class RateLimitEntry:
    """Request timestamps for a single client."""

    requests: list[float] = field(default_factory=list)


class RateLimiter:
    """In-memory rate limiter using sliding window algorithm."""

    def __init__(self, max_requests: int = 5, window_seconds: int = 15 * 60):
        """Initialize rate limiter.

        Args:
            max_requests: Requests allowed per window
            window_seconds: Time window for rate limiting (default: 15 minutes)
        """
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._entries: dict[str, RateLimitEntry] = defaultdict(RateLimitEntry)
        self._last_sweep = time.time()

    def __len__(self) -> int:
        """Number of clients currently tracked."""
        return len(self._entries)

    def _sweep(self, now: float) -> None:
        """Drop clients with no requests inside the window. Runs once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        window_start = now - self.window_seconds
        stale = [
            key
            for key, entry in self._entries.items()
            if not any(ts > window_start for ts in entry.requests)
        ]
        for key in stale:
            del self._entries[key]
        self._last_sweep = now

    def is_allowed(self, key: str) -> tuple[bool, dict[str, str]]:
        """Check if request is allowed under rate limit.

        Args:
            key: Client identifier (IP address)

        Returns:
            Tuple of (is_allowed, headers_dict with rate limit info)
        """
        now = time.time()
        self._sweep(now)
        window_start = now - self.window_seconds

        entry = self._entries[key]
        entry.requests = [ts for ts in entry.requests if ts > window_start]

        remaining = self.max_requests - len(entry.requests)
        oldest = entry.requests[0] if entry.requests else now
        reset_time = int(oldest + self.window_seconds)

        headers = {
            "X-RateLimit-Limit": str(self.max_requests),
            "X-RateLimit-Remaining": str(max(0, remaining)),
            "X-RateLimit-Reset": str(reset_time),
        }

        if remaining <= 0:
            headers["Retry-After"] = str(max(1, int(reset_time - now)))
            return False, headers

        entry.requests.append(now)
        headers["X-RateLimit-Remaining"] = str(remaining - 1)
        return True, headers

    def reset(self) -> None:
        """Forget all recorded requests."""
        self._entries.clear()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply a per-IP rate limit to selected path prefixes."""

    def __init__(
        self,
        app: Callable,
        limiter: RateLimiter | None = None,
        limited_paths: tuple[str, ...] = DEFAULT_LIMITED_PATHS,
    ):
        super().__init__(app)
        self.limiter = limiter or RateLimiter()
        self.limited_paths = limited_paths

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with rate limiting."""
        path = request.url.path
        if not any(path.startswith(prefix) for prefix in self.limited_paths):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        is_allowed, headers = self.limiter.is_allowed(client_ip)

        if not is_allowed:
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "message": "Too many requests from this IP, please try again later.",
                },
                headers=headers,
            )

        response = await call_next(request)
        for key, value in headers.items():
            response.headers[key] = value
        return response
