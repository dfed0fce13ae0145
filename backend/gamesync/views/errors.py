"""Error envelope and exception handlers for the JSON API.

Every failure is answered with the same envelope::

    {"timestamp": ..., "status": 404, "error": "Not Found", "message": ...}

Validation failures add an ``errors`` mapping of field name to message.
"""

from __future__ import annotations

from datetime import UTC, datetime
from http import HTTPStatus
from typing import TYPE_CHECKING, cast

import structlog
from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse, Response

from shared.errors import ServiceError, UnauthenticatedError, ValidationFailedError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from starlette.requests import Request

logger = structlog.get_logger()

BASIC_CHALLENGE = {"WWW-Authenticate": 'Basic realm="gamesync"'}


def error_response(
    status: HTTPStatus,
    message: str,
    *,
    field_errors: Mapping[str, str] | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, object] = {
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "status": status.value,
        "error": status.phrase,
        "message": message,
    }
    if field_errors is not None:
        body["errors"] = dict(field_errors)
    return JSONResponse(body, status_code=status, headers=dict(headers) if headers else None)


async def service_error_handler(request: Request, exc: Exception) -> Response:
    """Translate a ServiceError raised by a handler or service into the envelope."""
    error = cast("ServiceError", exc)
    if isinstance(error, ValidationFailedError):
        return error_response(error.status, str(error), field_errors=error.field_errors)
    if isinstance(error, UnauthenticatedError):
        return error_response(error.status, str(error), headers=BASIC_CHALLENGE)
    logger.info("request failed", path=request.url.path, status=error.status, reason=str(error))
    return error_response(error.status, str(error))


async def http_exception_handler(_request: Request, exc: Exception) -> Response:
    """Render routing and auth HTTPExceptions (401, 404, 405) as the envelope."""
    http_exc = cast("HTTPException", exc)
    status = HTTPStatus(http_exc.status_code)
    if status == HTTPStatus.UNAUTHORIZED:
        return error_response(status, "Authentication required", headers=BASIC_CHALLENGE)
    if status in {HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED}:
        return Response(status_code=status, headers=http_exc.headers)
    message = http_exc.detail if http_exc.detail and http_exc.detail != status.phrase else status.description
    return error_response(status, message, headers=http_exc.headers)


async def internal_error_handler(request: Request, exc: Exception) -> Response:
    """Log an unexpected failure and answer 500 without leaking internals."""
    logger.error("unhandled error", path=request.url.path, method=request.method, exc_info=exc)
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "An unexpected error occurred")


EXCEPTION_HANDLERS: dict[type[Exception] | int, Callable[[Request, Exception], Awaitable[Response]]] = {
    ServiceError: service_error_handler,
    HTTPException: http_exception_handler,
    Exception: internal_error_handler,
}
