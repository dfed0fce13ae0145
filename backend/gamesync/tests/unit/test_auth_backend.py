"""Tests for the Basic auth backend."""

from __future__ import annotations

import base64
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.requests import HTTPConnection

from gamesync.auth.backend import BasicAuthBackend, parse_basic_credentials
from gamesync.auth.models import AuthenticatedAccount
from shared.auth.models import Account, Role
from shared.errors import UnauthenticatedError


def _header(raw: str) -> str:
    return "Basic " + base64.b64encode(raw.encode()).decode()


def _conn(authorization: str | None = None) -> HTTPConnection:
    headers = [] if authorization is None else [(b"authorization", authorization.encode())]
    return HTTPConnection({"type": "http", "headers": headers})


def _account(roles: frozenset[Role] = frozenset({Role.USER})) -> Account:
    return Account(
        account_id="a1",
        username="alice",
        email="alice@x.com",
        password_hash="simple$abc",
        roles=roles,
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
    )


@pytest.fixture
def account_service() -> MagicMock:
    svc = MagicMock()
    svc.authenticate = AsyncMock(return_value=_account())
    return svc


class TestParseBasicCredentials:
    def test_decodes_username_and_password(self):
        assert parse_basic_credentials(_header("alice:pw:with:colons")) == ("alice", "pw:with:colons")

    def test_scheme_is_case_insensitive(self):
        assert parse_basic_credentials("basic " + base64.b64encode(b"alice:pw").decode()) == ("alice", "pw")

    @pytest.mark.parametrize(
        "header",
        [None, "", "Bearer token", "Basic", "Basic ###", _header("no-colon"), _header(":pw-only")],
    )
    def test_rejects_malformed(self, header):
        assert parse_basic_credentials(header) is None


class TestBasicAuthBackend:
    async def test_valid_credentials(self, account_service):
        backend = BasicAuthBackend(account_service)

        result = await backend.authenticate(_conn(_header("alice:pw123456")))

        assert result is not None
        creds, user = result
        assert creds.scopes == ["authenticated"]
        assert isinstance(user, AuthenticatedAccount)
        assert user.account_id == "a1"
        assert user.username == "alice"
        account_service.authenticate.assert_awaited_once_with("alice", "pw123456")

    async def test_admin_gets_admin_scope(self, account_service):
        account_service.authenticate.return_value = _account(frozenset({Role.USER, Role.ADMIN}))
        backend = BasicAuthBackend(account_service)

        result = await backend.authenticate(_conn(_header("alice:pw123456")))

        assert result is not None
        assert result[0].scopes == ["authenticated", "admin"]

    async def test_invalid_credentials_leave_request_anonymous(self, account_service):
        account_service.authenticate.side_effect = UnauthenticatedError("Invalid credentials")
        backend = BasicAuthBackend(account_service)

        assert await backend.authenticate(_conn(_header("alice:wrong"))) is None

    async def test_missing_header_skips_lookup(self, account_service):
        backend = BasicAuthBackend(account_service)

        assert await backend.authenticate(_conn()) is None
        account_service.authenticate.assert_not_awaited()


class TestAuthenticatedAccount:
    def test_to_caller(self):
        user = AuthenticatedAccount.from_account(_account(frozenset({Role.ADMIN})))

        caller = user.to_caller()

        assert caller.account_id == "a1"
        assert caller.username == "alice"
        assert caller.is_admin is True
