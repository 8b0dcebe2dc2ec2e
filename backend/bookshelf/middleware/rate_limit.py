"""
Bookshelf Backend — Rate Limiting Middleware
==============================================

What:  Per-IP sliding window rate limiter.
Why:   Login and registration each cost a bcrypt computation; unthrottled
       they are both a brute-force and a CPU-exhaustion vector.
How:   Keeps the timestamps of each IP's requests inside the window; once the
       count reaches the limit, answers 429 with the standard error envelope
       and a Retry-After header.

Algorithm: Sliding Window Counter
    1. Each IP gets a list of request timestamps
    2. On each request, drop timestamps older than the window
    3. If remaining count >= limit, reject with 429
    4. Otherwise record the current timestamp and let the request through

This state lives in process memory, so the limit is per worker process.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from bookshelf.config import settings
from bookshelf.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Configuration (from settings):
        rate_limit_requests: Max requests per window (default: 100)
        rate_limit_window:   Window duration in seconds (default: 3600)

    Runs outside the exception handlers registered on the app (and before a
    request ID exists), so it builds the error response itself from a
    RateLimitExceededError.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._seen = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = (
            getattr(request.client, "host", "unknown")
            if request.client
            else "unknown"
        )

        now = time.time()
        window_start = now - settings.rate_limit_window

        timestamps = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = timestamps

        if len(timestamps) >= settings.rate_limit_requests:
            retry_after = int(timestamps[0] + settings.rate_limit_window - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(timestamps),
                settings.rate_limit_window,
            )
            return self._reject(RateLimitExceededError(retry_after=retry_after))

        timestamps.append(now)

        # Every 1000 requests, forget IPs with nothing left in the window
        self._seen += 1
        if self._seen % 1000 == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    @staticmethod
    def _reject(exc: RateLimitExceededError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.error_type.value,
                "message": exc.message,
                "details": exc.context,
            },
            headers={"Retry-After": str(exc.retry_after)},
        )

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or max(timestamps) < window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
