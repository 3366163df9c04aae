"""Request tracing for the offer API."""
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("tme-offers.http")

REQUEST_ID_HEADER = "X-Request-ID"
UNLOGGED_PATHS = frozenset({"/health", "/docs", "/openapi.json"})


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an id and its processing time.

    A caller-supplied X-Request-ID is kept so the proposal form can correlate
    its own logs; otherwise a uuid4 is issued. The id is exposed to routes as
    `request.state.request_id`. Rejected requests (4xx/5xx) log at WARNING.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response: Response = await call_next(request)

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed_ms}"

        path = request.url.path
        if path not in UNLOGGED_PATHS:
            level = logging.WARNING if response.status_code >= 400 else logging.INFO
            logger.log(
                level,
                f"{request.method} {path} -> {response.status_code}",
                extra={
                    "request_id": request_id,
                    "http_method": request.method,
                    "http_path": path,
                    "http_status": response.status_code,
                    "duration_ms": elapsed_ms,
                },
            )
        return response
