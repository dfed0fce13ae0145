"""Starlette AuthenticationBackend for HTTP Basic credentials."""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING

import structlog
from starlette.authentication import AuthCredentials, AuthenticationBackend

from gamesync.auth.models import AuthenticatedAccount
from shared.errors import UnauthenticatedError

if TYPE_CHECKING:
    from starlette.requests import HTTPConnection

    from shared.auth.service import AccountService

logger = structlog.get_logger()


def parse_basic_credentials(header: str | None) -> tuple[str, str] | None:
    """Decode an ``Authorization: Basic`` header into (username, password).

    Returns None for a missing header, another scheme, or a payload that is
    not valid base64 ``username:password``.
    """
    if not header:
        return None
    scheme, _, encoded = header.partition(" ")
    if scheme.lower() != "basic" or not encoded.strip():
        return None
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep or not username:
        return None
    return username, password


class BasicAuthBackend(AuthenticationBackend):
    """Authenticate every request from its Basic credentials.

    There are no sessions: each request carries the username and password
    and is verified against the account store. Invalid credentials leave the
    request anonymous, so protected routes answer 401.
    """

    def __init__(self, account_service: AccountService) -> None:
        self._account_service = account_service

    async def authenticate(
        self,
        conn: HTTPConnection,
    ) -> tuple[AuthCredentials, AuthenticatedAccount] | None:
        credentials = parse_basic_credentials(conn.headers.get("authorization"))
        if credentials is None:
            return None

        username, password = credentials
        try:
            account = await self._account_service.authenticate(username, password)
        except UnauthenticatedError:
            logger.info("basic auth rejected", username=username)
            return None

        scopes = ["authenticated"]
        if account.is_admin:
            scopes.append("admin")
        return AuthCredentials(scopes), AuthenticatedAccount.from_account(account)
