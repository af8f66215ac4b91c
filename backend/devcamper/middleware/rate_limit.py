"""
DevCamper API - Rate Limiting Middleware
========================================

What:  Per-IP sliding-window rate limit (RATE_LIMIT_REQUESTS per
       RATE_LIMIT_WINDOW seconds, 100 per 10 minutes by default).
How:   Keeps the timestamps of each client's requests inside the window in
       memory. A client at the limit gets 429 with a `Retry-After` header and
       the API's error body.

State is per process; several workers each enforce their own window.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from devcamper.config import Settings, get_settings
from devcamper.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    EXCLUDED_PATHS = frozenset({"/health", "/docs", "/openapi.json", "/redoc"})

    # Drop idle clients every this many requests
    CLEANUP_EVERY = 1000

    def __init__(self, app, settings: Optional[Settings] = None):
        super().__init__(app)
        settings = settings or get_settings()
        self.limit = settings.rate_limit_requests
        self.window = settings.rate_limit_window
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._seen = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        window_start = now - self.window

        timestamps = self._requests[client_ip]
        while timestamps and timestamps[0] <= window_start:
            timestamps.popleft()

        if len(timestamps) >= self.limit:
            retry_after = int(timestamps[0] + self.window - now) + 1
            error = RateLimitExceededError(retry_after=retry_after)
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(timestamps),
                self.window,
            )
            return JSONResponse(
                status_code=error.status_code,
                content={"success": False, "error": error.message},
                headers={"Retry-After": str(retry_after)},
            )

        timestamps.append(now)
        self._seen += 1
        if self._seen % self.CLEANUP_EVERY == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        inactive = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in inactive:
            del self._requests[ip]
        if inactive:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive))
