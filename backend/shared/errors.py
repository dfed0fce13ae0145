"""Typed service errors shared by the account and game services.

Services raise subclasses of ServiceError; the HTTP boundary maps each
subclass to a status code and renders the error envelope. Any other
exception reaching the boundary is treated as an internal error.
"""

from __future__ import annotations

from http import HTTPStatus


class ServiceError(Exception):
    """Base class for expected failures of a service operation."""

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR


class UnauthenticatedError(ServiceError):
    """No valid caller identity was presented."""

    status = HTTPStatus.UNAUTHORIZED


class ValidationFailedError(ServiceError):
    """Input is structurally invalid.

    Attributes:
        field_errors: Mapping of field name to a human-readable message,
            one entry per violated field.
    """

    status = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str, field_errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.field_errors = field_errors or {}


class ConflictError(ServiceError):
    """A uniqueness constraint would be violated."""

    status = HTTPStatus.CONFLICT


class NotFoundError(ServiceError):
    """Record is absent or the caller may not access it.

    The two causes share one error so that callers cannot probe for the
    existence of records they do not own.
    """

    status = HTTPStatus.NOT_FOUND
