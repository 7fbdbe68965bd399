"""Per-IP fixed-window rate limiting backed by Redis."""

import time
from typing import Any

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from moneyglow.redis_client import get_redis

logger = structlog.get_logger()

_EXEMPT_PATHS = frozenset({"/health", "/ready", "/version"})


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Count requests per client IP per window; answer 429 once the window is full."""

    def __init__(self, app: Any, requests_per_window: int = 100, window_seconds: int = 60) -> None:  # noqa: ANN401
        super().__init__(app)
        self.requests_per_window = requests_per_window
        self.window_seconds = window_seconds

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _EXEMPT_PATHS:
            return await call_next(request)

        try:
            redis = get_redis()
        except RuntimeError:
            # No pool (tests, scripts): unlimited.
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        window = int(time.time()) // self.window_seconds
        key = f"ratelimit:{client_ip}:{window}"

        pipe = redis.pipeline()
        pipe.incr(key)
        pipe.expire(key, self.window_seconds + 1)
        results: list[Any] = await pipe.execute()
        count: int = results[0]

        if count > self.requests_per_window:
            logger.warning("rate_limited", client_ip=client_ip, count=count)
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests. Slow down a little."},
                headers={
                    "Retry-After": str(self.window_seconds),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Limit": str(self.requests_per_window),
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self.requests_per_window - count))
        response.headers["X-RateLimit-Limit"] = str(self.requests_per_window)
        return response
