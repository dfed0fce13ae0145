"""Account service coordinating registration, profile updates, and account deletion."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol
from uuid import uuid4

import structlog

from shared.auth.models import Account, Role
from shared.dal.models import fold_case
from shared.errors import ConflictError, NotFoundError, UnauthenticatedError

if TYPE_CHECKING:
    from shared.auth.models import CallerContext
    from shared.auth.password import PasswordHasher
    from shared.dal.account_repository import AccountRepository

logger = structlog.get_logger()


class OwnedResourceCleaner(Protocol):
    """Removes every resource owned by an account before the account goes away."""

    async def delete_all_owned_by(self, owner_id: str) -> int: ...


class AccountService:
    """Coordinate account registration, self-service updates, and cascading deletes."""

    def __init__(
        self,
        account_repo: AccountRepository,
        resource_cleaner: OwnedResourceCleaner,
        *,
        password_hasher: PasswordHasher,
    ) -> None:
        self._account_repo = account_repo
        self._resource_cleaner = resource_cleaner
        self._hasher = password_hasher

    async def register(
        self,
        username: str,
        password: str,
        email: str,
        steam_id: str | None = None,
    ) -> Account:
        """Register a new account with the default role set.

        Username, email, and steam_id are checked in that order and the
        first collision is reported.
        """
        steam_id = _blank_to_none(steam_id)
        if await self._account_repo.get_by_username(username) is not None:
            raise ConflictError(f"Username '{username}' already exists")
        if await self._account_repo.get_by_email(email) is not None:
            raise ConflictError(f"Email '{email}' already registered")
        if steam_id is not None and await self._account_repo.get_by_steam_id(steam_id) is not None:
            raise ConflictError(f"Steam ID '{steam_id}' already registered")

        account = Account(
            account_id=str(uuid4()),
            username=username,
            email=email,
            password_hash=await self._hasher.hash(password),
            steam_id=steam_id,
            roles=frozenset({Role.USER}),
            created_at=datetime.now(tz=UTC),
        )
        try:
            await self._account_repo.create_account(account)
        except ValueError as e:
            raise ConflictError(str(e)) from e
        logger.info("account registered", account_id=account.account_id, username=account.username)
        return account

    async def authenticate(self, username: str, password: str) -> Account:
        """Return the account for valid credentials, otherwise raise UnauthenticatedError."""
        account = await self._account_repo.get_by_username(username)
        if account is None or not await self._hasher.verify(password, account.password_hash):
            raise UnauthenticatedError("Invalid credentials")
        return account

    async def get_self(self, caller: CallerContext) -> Account:
        """Load the caller's own account."""
        account = await self._account_repo.get_by_id(caller.account_id)
        if account is None:
            raise UnauthenticatedError("Authenticated account no longer exists")
        return account

    async def find_by_id(self, caller: CallerContext, account_id: str) -> Account | None:
        """Look up an account visible to the caller: its own, or any account for admins."""
        if caller.account_id != account_id and not caller.is_admin:
            logger.info("account lookup denied", caller_id=caller.account_id, account_id=account_id)
            raise NotFoundError("Account not found or access denied")
        return await self._account_repo.get_by_id(account_id)

    async def find_by_username(self, username: str) -> Account | None:
        return await self._account_repo.get_by_username(username)

    async def update_profile(
        self,
        caller: CallerContext,
        account_id: str,
        *,
        username: str | None = None,
        email: str | None = None,
        new_password: str | None = None,
    ) -> Account | None:
        """Overwrite the supplied profile fields of the caller's own account.

        Absent or blank fields are left untouched. Returns None when the
        account does not exist.
        """
        self._require_self(caller, account_id, action="update")
        account = await self._account_repo.get_by_id(account_id)
        if account is None:
            return None

        changes: dict[str, object] = {}
        username = _blank_to_none(username)
        if username is not None:
            renamed = fold_case(username) != fold_case(account.username)
            if renamed and await self._account_repo.get_by_username(username) is not None:
                raise ConflictError(f"Username '{username}' already exists")
            changes["username"] = username

        email = _blank_to_none(email)
        if email is not None:
            readdressed = fold_case(email) != fold_case(account.email)
            if readdressed and await self._account_repo.get_by_email(email) is not None:
                raise ConflictError(f"Email '{email}' already registered")
            changes["email"] = email

        new_password = _blank_to_none(new_password)
        if new_password is not None:
            changes["password_hash"] = await self._hasher.hash(new_password)

        if not changes:
            return account

        updated = account.model_copy(update=changes)
        try:
            await self._account_repo.update_account(updated)
        except ValueError as e:
            raise ConflictError(str(e)) from e
        logger.info("account updated", account_id=account_id, fields=sorted(changes))
        return updated

    async def delete_account(self, caller: CallerContext, account_id: str) -> bool:
        """Delete the caller's own account after removing everything it owns.

        Owned resources go first, so a failure between the two steps leaves
        an empty account rather than orphaned resources.
        """
        self._require_self(caller, account_id, action="delete")
        if await self._account_repo.get_by_id(account_id) is None:
            return False

        removed = await self._resource_cleaner.delete_all_owned_by(account_id)
        deleted = await self._account_repo.delete_account(account_id)
        logger.info("account deleted", account_id=account_id, resources_removed=removed)
        return deleted

    async def grant_role(self, username: str, role: Role) -> Account:
        """Add a role to an account. Operator use only; not exposed over HTTP."""
        account = await self._account_repo.get_by_username(username)
        if account is None:
            raise NotFoundError(f"Account '{username}' not found")
        if role in account.roles:
            return account

        updated = account.model_copy(update={"roles": account.roles | {role}})
        await self._account_repo.update_account(updated)
        logger.info("role granted", account_id=account.account_id, role=role)
        return updated

    # -- private helpers --

    @staticmethod
    def _require_self(caller: CallerContext, account_id: str, *, action: str) -> None:
        if caller.account_id != account_id:
            logger.info("account access denied", caller_id=caller.account_id, account_id=account_id, action=action)
            raise NotFoundError("Account not found or access denied")


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value
