"""
DevCamper API - Request ID Middleware
=====================================

What:  Assigns a correlation id to each request and echoes it back in the
       `X-Request-ID` response header.
How:   A client-supplied `X-Request-ID` is reused; otherwise a short uuid4 is
       generated. The id lives in a ContextVar so loggers can read it without
       access to the request.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local; each concurrent request sees its own value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(HEADER) or uuid.uuid4().hex[:8]
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[HEADER] = rid
        return response
