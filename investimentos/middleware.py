"""
Custom middleware for request tracing and timing.

- **Request ID injection**: every request/response carries a trace id
  (``X-Request-ID``). The id is also published to the logging context so
  that repository, service and market-data client logs emitted while serving
  the request carry it.
- **Request timing**: logs wall-clock duration and adds ``X-Process-Time``.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from investimentos.core.logging import request_id_ctx

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
SLOW_REQUEST_MS = 500


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Honour an upstream ``X-Request-ID`` or generate a UUID4, expose it on
    ``request.state.request_id`` and in the logging context, and echo it back
    on the response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_ctx.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """
    Adds ``X-Process-Time`` to every response. Requests slower than
    ``SLOW_REQUEST_MS`` are logged at WARNING; market-data pass-through calls
    are the usual suspects since they wait on a third party.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Process-Time"] = f"{elapsed_ms:.2f}ms"

        if elapsed_ms > SLOW_REQUEST_MS:
            logger.warning(
                "%s %s completed in %.2fms (SLOW)",
                request.method,
                request.url.path,
                elapsed_ms,
                extra={"method": request.method, "path": request.url.path, "elapsed_ms": elapsed_ms},
            )
        else:
            logger.debug(
                "%s %s completed in %.2fms",
                request.method,
                request.url.path,
                elapsed_ms,
            )

        return response
