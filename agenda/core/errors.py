# agenda/core/errors.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = logging.getLogger("agenda.errors")


# -----------------------------
# Error taxonomy
# -----------------------------
class AppError(Exception):
    """Base for errors raised by crud/services and rendered by the handlers below."""

    status_code = 400
    error_type = "app_error"

    def __init__(self, message: str, *, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AppError):
    status_code = 422
    error_type = "validation_error"


class InvalidRehearsalDate(ValidationError):
    error_type = "invalid_rehearsal_date"


class IncompleteSchedule(ValidationError):
    error_type = "incomplete_schedule"


class CannotResend(ValidationError):
    error_type = "cannot_resend"


class NotFoundError(AppError):
    status_code = 404
    error_type = "not_found"


class InvalidToken(NotFoundError):
    error_type = "invalid_token"


class PermissionDenied(AppError):
    status_code = 403
    error_type = "forbidden"


class DuplicateError(AppError):
    status_code = 409
    error_type = "duplicate"


class DuplicateInvitation(DuplicateError):
    error_type = "duplicate_invitation"


class ExpiredError(AppError):
    status_code = 410
    error_type = "expired"


class ExpiredInvitation(ExpiredError):
    error_type = "expired_invitation"


class ExternalServiceError(AppError):
    """Data service or mail endpoint failure. ``message`` is user-facing."""

    status_code = 502
    error_type = "external_service_error"


# -----------------------------
# Trace / request id helpers
# -----------------------------
def _ensure_trace_id(request: Request) -> str:
    """
    Return a stable trace_id for this request.
    Prefer a value already set on request.state, then common headers,
    and finally generate a new one (and store it on request.state).
    """
    for attr in ("trace_id", "request_id"):
        val = getattr(request.state, attr, None)
        if val:
            return str(val)

    for h in ("x-request-id", "x-correlation-id", "x-trace-id"):
        v = request.headers.get(h)
        if v:
            request.state.trace_id = v
            return v

    new_id = uuid.uuid4().hex
    request.state.trace_id = new_id
    return new_id


def _payload(
    *,
    message: str,
    typ: str,
    status: int,
    trace_id: str,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "ok": False,
        "error": {
            "type": typ,
            "message": message,
            "status": status,
            "trace_id": trace_id,
        },
    }
    if details is not None:
        body["error"]["details"] = details
    return body


# -----------------------------
# Install / register handlers
# -----------------------------
def register_exception_handlers(app: FastAPI) -> None:
    """
    Registers consistent JSON error handlers.
    Also ensures X-Request-ID header is present on error responses.
    """

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        trace_id = _ensure_trace_id(request)
        status_code = exc.status_code

        if isinstance(exc, ExternalServiceError):
            # original cause (if chained) goes to the server log only
            log.error(
                "%s %s %s -> %s | trace_id=%s | message=%r",
                type(exc).__name__,
                request.method,
                request.url.path,
                status_code,
                trace_id,
                exc.message,
                exc_info=exc.__cause__ is not None,
            )
        else:
            log.warning(
                "%s %s %s -> %s | trace_id=%s | message=%r",
                type(exc).__name__,
                request.method,
                request.url.path,
                status_code,
                trace_id,
                exc.message,
            )

        return JSONResponse(
            status_code=status_code,
            headers={"X-Request-ID": trace_id},
            content=_payload(
                message=exc.message,
                typ=exc.error_type,
                status=status_code,
                trace_id=trace_id,
                details=exc.details,
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exc_handler(request: Request, exc: HTTPException):
        trace_id = _ensure_trace_id(request)
        status_code = int(exc.status_code)
        # detail can be str, dict, or other; keep a safe message
        message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        details = exc.detail if isinstance(exc.detail, dict) else None

        headers = dict(exc.headers or {})
        headers["X-Request-ID"] = trace_id

        level = logging.ERROR if status_code >= 500 else logging.WARNING
        log.log(
            level,
            "HTTPException %s %s -> %s | trace_id=%s | detail=%r",
            request.method,
            request.url.path,
            status_code,
            trace_id,
            exc.detail,
        )

        return JSONResponse(
            status_code=status_code,
            headers=headers,
            content=_payload(
                message=message,
                typ="http_error",
                status=status_code,
                trace_id=trace_id,
                details=details,
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):
        trace_id = _ensure_trace_id(request)
        errors = exc.errors()
        log.warning(
            "ValidationError %s %s -> 422 | trace_id=%s | errors=%s",
            request.method,
            request.url.path,
            trace_id,
            errors,
        )
        return JSONResponse(
            status_code=422,
            headers={"X-Request-ID": trace_id},
            content=_payload(
                message="Validation failed.",
                typ="validation_error",
                status=422,
                trace_id=trace_id,
                # ctx may hold exception instances; keep it JSON-safe
                details=[{k: v for k, v in e.items() if k != "ctx"} for e in errors],
            ),
        )

    @app.exception_handler(Exception)
    async def unhandled_exc_handler(request: Request, exc: Exception):
        trace_id = _ensure_trace_id(request)
        # Full traceback to server logs; generic message to client
        log.exception(
            "Unhandled exception %s %s -> 500 | trace_id=%s",
            request.method,
            request.url.path,
            trace_id,
        )
        return JSONResponse(
            status_code=500,
            headers={"X-Request-ID": trace_id},
            content=_payload(
                message="Internal server error.",
                typ="internal_error",
                status=500,
                trace_id=trace_id,
            ),
        )
