# agenda/middleware/request_logging.py
import logging
import time
import uuid
from typing import Iterable, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from agenda.services.audit import ip_from_request

logger = logging.getLogger("agenda.request")

QUIET_PREFIXES: Tuple[str, ...] = (
    "/api/healthz",
    "/api/readyz",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
)


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One log line per request: method, path, status, caller and duration.
    Every response carries X-Request-ID (taken from the request or generated).
    Probes, docs and CORS preflights are not logged.
    """

    def __init__(self, app, quiet_prefixes: Iterable[str] = QUIET_PREFIXES):
        super().__init__(app)
        self.quiet_prefixes = tuple(quiet_prefixes)

    def _quiet(self, request: Request) -> bool:
        return request.method == "OPTIONS" or request.url.path.startswith(self.quiet_prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        trace_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.trace_id = trace_id
        quiet = self._quiet(request)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # error handlers render the response; record the timing here
            if not quiet:
                logger.exception(
                    "request CRASH %s %s ip=%s dur_ms=%s trace_id=%s",
                    request.method,
                    request.url.path,
                    ip_from_request(request),
                    int((time.perf_counter() - start) * 1000),
                    trace_id,
                )
            raise

        response.headers["X-Request-ID"] = trace_id
        if quiet:
            return response

        # set by get_current_principal on authenticated routes
        user_id = getattr(request.state, "user_id", None)
        role = getattr(request.state, "role", None)

        logger.log(
            _level_for(response.status_code),
            "request %s %s -> %s user=%s role=%s ip=%s dur_ms=%s trace_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            user_id,
            role,
            ip_from_request(request),
            int((time.perf_counter() - start) * 1000),
            trace_id,
        )
        return response
