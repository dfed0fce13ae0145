"""SQLite-backed account repository."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from typing import TYPE_CHECKING

import structlog

from shared.auth.models import Account
from shared.dal.account_repository import AccountRepository
from shared.dal.models import fold_case

if TYPE_CHECKING:
    from shared.db.connection import Database

logger = structlog.get_logger()


class SqliteAccountRepository(AccountRepository):
    """SQLite implementation of AccountRepository.

    Writes run under an asyncio lock and rely on the unique indexes for
    username, email, and steam_id. IntegrityError is mapped to a domain
    ValueError naming the violated field.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_account(self, account: Account) -> None:
        """Insert an account. Raises ValueError on duplicate id, username, email, or steam_id."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO accounts (id, username, username_key, email, email_key, steam_id, data)"
                    " VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        account.account_id,
                        account.username,
                        fold_case(account.username),
                        account.email,
                        fold_case(account.email),
                        account.steam_id,
                        account.model_dump_json(),
                    ),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise _duplicate_error(exc, account) from exc

    async def update_account(self, account: Account) -> None:
        """Replace a stored account document. Raises ValueError on a uniqueness violation."""
        async with self._lock:
            try:
                cursor = self._db.connection.execute(
                    "UPDATE accounts SET username = ?, username_key = ?, email = ?, email_key = ?,"
                    " steam_id = ?, data = ? WHERE id = ?",
                    (
                        account.username,
                        fold_case(account.username),
                        account.email,
                        fold_case(account.email),
                        account.steam_id,
                        account.model_dump_json(),
                        account.account_id,
                    ),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise _duplicate_error(exc, account) from exc
            if cursor.rowcount == 0:
                logger.warning("update_account had no effect (not found)", account_id=account.account_id)

    async def get_by_id(self, account_id: str) -> Account | None:
        return self._fetch_one("SELECT data FROM accounts WHERE id = ?", account_id)

    async def get_by_username(self, username: str) -> Account | None:
        """Look up an account by username (case-insensitive)."""
        return self._fetch_one("SELECT data FROM accounts WHERE username_key = ?", fold_case(username))

    async def get_by_email(self, email: str) -> Account | None:
        """Look up an account by email (case-insensitive)."""
        return self._fetch_one("SELECT data FROM accounts WHERE email_key = ?", fold_case(email))

    async def get_by_steam_id(self, steam_id: str) -> Account | None:
        return self._fetch_one("SELECT data FROM accounts WHERE steam_id = ?", steam_id)

    async def delete_account(self, account_id: str) -> bool:
        """Delete an account document. Returns whether a row was removed."""
        async with self._lock:
            cursor = self._db.connection.execute("DELETE FROM accounts WHERE id = ?", (account_id,))
            self._db.connection.commit()
            return cursor.rowcount > 0

    def _fetch_one(self, query: str, value: str) -> Account | None:
        row = self._db.connection.execute(query, (value,)).fetchone()
        if row is None:
            return None
        return Account.model_validate(json.loads(row[0]))


def _duplicate_error(exc: sqlite3.IntegrityError, account: Account) -> ValueError:
    error_msg = str(exc).lower()
    if "accounts.id" in error_msg:
        return ValueError(f"Account with id '{account.account_id}' already exists")
    if "accounts.username_key" in error_msg or "idx_accounts_username" in error_msg:
        return ValueError(f"Username '{account.username}' already exists")
    if "accounts.email_key" in error_msg or "idx_accounts_email" in error_msg:
        return ValueError(f"Email '{account.email}' already registered")
    if "accounts.steam_id" in error_msg or "idx_accounts_steam_id" in error_msg:
        return ValueError(f"Steam ID '{account.steam_id}' already registered")
    return ValueError(str(exc))  # pragma: no cover
