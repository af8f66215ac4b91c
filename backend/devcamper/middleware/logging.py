"""
DevCamper API - Access Log Middleware
=====================================

What:  One access-log line per request on the `devcamper.access` logger.
How:   Times the rest of the chain, then logs the route template the
       request matched (`/bootcamps/{bootcamp_id}`, not the concrete id) so
       lines group by endpoint. Requests that matched no route log their raw
       path. The level follows the status class: 5xx ERROR, 4xx WARNING,
       otherwise INFO.

    GET /bootcamps/{bootcamp_id} 404 3.1ms 61B [3f2a9c1e] from 127.0.0.1

Query strings and bodies are never logged; login bodies carry passwords.
`/health` is not logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from devcamper.middleware.request_id import request_id_var

logger = logging.getLogger("devcamper.access")

SKIPPED_PATHS = frozenset({"/health"})


def level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        endpoint = route_template(request)
        size = response.headers.get("content-length", "-")
        client = request.client.host if request.client else "unknown"
        logger.log(
            level_for(response.status_code),
            "%s %s %d %.1fms %sB [%s] from %s",
            request.method,
            endpoint,
            response.status_code,
            elapsed_ms,
            size,
            request_id_var.get(),
            client,
            extra={
                "endpoint": endpoint,
                "status": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
            },
        )
        return response
