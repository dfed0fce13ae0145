"""SQLite document store: connection management and repository implementations."""

from shared.db.account_repository import SqliteAccountRepository
from shared.db.connection import Database
from shared.db.game_repository import SqliteGameRepository

__all__ = [
    "Database",
    "SqliteAccountRepository",
    "SqliteGameRepository",
]
