"""Abstract interface for account persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.auth.models import Account


class AccountRepository(ABC):
    """Abstract interface for account persistence.

    Username and email lookups are case-insensitive. Implementations must
    enforce uniqueness of username, email, and steam_id themselves and
    raise ValueError on a violation.
    """

    @abstractmethod
    async def create_account(self, account: Account) -> None: ...

    @abstractmethod
    async def update_account(self, account: Account) -> None: ...

    @abstractmethod
    async def get_by_id(self, account_id: str) -> Account | None: ...

    @abstractmethod
    async def get_by_username(self, username: str) -> Account | None: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Account | None: ...

    @abstractmethod
    async def get_by_steam_id(self, steam_id: str) -> Account | None: ...

    @abstractmethod
    async def delete_account(self, account_id: str) -> bool: ...
