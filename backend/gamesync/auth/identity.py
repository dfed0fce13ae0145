"""Resolve the caller of a request into an explicit CallerContext."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gamesync.auth.models import AuthenticatedAccount
from shared.errors import UnauthenticatedError

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.auth.models import CallerContext


def caller_from_request(request: Request) -> CallerContext:
    """Return the authenticated caller or raise UnauthenticatedError."""
    user = request.user
    if not isinstance(user, AuthenticatedAccount):
        raise UnauthenticatedError("Authentication required")
    return user.to_caller()
