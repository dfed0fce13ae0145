"""User model for Starlette AuthenticationMiddleware integration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.authentication import BaseUser

from shared.auth.models import CallerContext, Role

if TYPE_CHECKING:
    from shared.auth.models import Account


class AuthenticatedAccount(BaseUser):
    """Authenticated account for Starlette's request.user.

    Created by the auth backend after the Basic credentials were verified.
    """

    def __init__(
        self,
        account_id: str,
        username: str,
        roles: frozenset[Role] = frozenset({Role.USER}),
    ) -> None:
        self._account_id = account_id
        self._username = username
        self._roles = roles

    @classmethod
    def from_account(cls, account: Account) -> AuthenticatedAccount:
        return cls(account_id=account.account_id, username=account.username, roles=account.roles)

    @property
    def is_authenticated(self) -> bool:  # pragma: no cover
        return True

    @property
    def display_name(self) -> str:  # pragma: no cover
        return self._username

    @property
    def identity(self) -> str:  # pragma: no cover
        return self._account_id

    @property
    def account_id(self) -> str:
        return self._account_id

    @property
    def username(self) -> str:
        return self._username

    @property
    def roles(self) -> frozenset[Role]:
        return self._roles

    def to_caller(self) -> CallerContext:
        return CallerContext(account_id=self._account_id, username=self._username, roles=self._roles)
