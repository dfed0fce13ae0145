"""Account model and the explicit caller context passed into services."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Self

from pydantic import BaseModel, model_validator


class Role(StrEnum):
    USER = "USER"
    ADMIN = "ADMIN"


class Account(BaseModel, frozen=True):
    """User account stored in the account repository."""

    account_id: str
    username: str
    email: str
    password_hash: str  # bcrypt hash; never serialized outbound
    steam_id: str | None = None  # external platform id, unique when present
    roles: frozenset[Role] = frozenset({Role.USER})
    created_at: datetime

    @model_validator(mode="after")
    def _validate_account_fields(self) -> Self:
        if not self.password_hash:
            raise ValueError("Accounts must have a password hash")
        if self.steam_id is not None and not self.steam_id.strip():
            raise ValueError("steam_id must be None or non-blank")
        return self

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles


@dataclass(frozen=True)
class CallerContext:
    """Identity of the account performing a service call."""

    account_id: str
    username: str
    roles: frozenset[Role] = field(default_factory=lambda: frozenset({Role.USER}))

    @classmethod
    def for_account(cls, account: Account) -> Self:
        return cls(account_id=account.account_id, username=account.username, roles=account.roles)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles
