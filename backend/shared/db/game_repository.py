"""SQLite-backed game repository."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from typing import TYPE_CHECKING

import structlog

from shared.dal.game_repository import GameRepository
from shared.dal.models import Game, fold_case

if TYPE_CHECKING:
    from shared.db.connection import Database

logger = structlog.get_logger()


class SqliteGameRepository(GameRepository):
    """SQLite implementation of GameRepository.

    Stores full game documents as JSON with owner, name, and added_at
    projected into indexed columns. The unique (owner_id, name_key) index
    backs the per-owner name rule, with name_key holding the case-folded name.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_game(self, game: Game) -> None:
        """Insert a game. Raises ValueError on duplicate id or duplicate name for the owner."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO games (id, owner_id, name, name_key, added_at, data) VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        game.game_id,
                        game.owner_id,
                        game.name,
                        fold_case(game.name),
                        game.added_at.isoformat(timespec="microseconds"),
                        game.model_dump_json(),
                    ),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise _duplicate_error(exc, game) from exc

    async def update_game(self, game: Game) -> None:
        """Replace a stored game document. owner_id and added_at columns are never rewritten."""
        async with self._lock:
            try:
                cursor = self._db.connection.execute(
                    "UPDATE games SET name = ?, name_key = ?, data = ? WHERE id = ?",
                    (game.name, fold_case(game.name), game.model_dump_json(), game.game_id),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise _duplicate_error(exc, game) from exc
            if cursor.rowcount == 0:
                logger.warning("update_game had no effect (not found)", game_id=game.game_id)

    async def get_game(self, game_id: str) -> Game | None:
        row = self._db.connection.execute(
            "SELECT data FROM games WHERE id = ?",
            (game_id,),
        ).fetchone()
        if row is None:
            return None
        return Game.model_validate(json.loads(row[0]))

    async def list_by_owner(self, owner_id: str) -> list[Game]:
        """Return every game of an owner, oldest first."""
        rows = self._db.connection.execute(
            "SELECT data FROM games WHERE owner_id = ? ORDER BY added_at ASC, id ASC",
            (owner_id,),
        ).fetchall()
        return [Game.model_validate(json.loads(row[0])) for row in rows]

    async def exists_by_name(self, owner_id: str, name: str) -> bool:
        """Check whether the owner already has a game with this name (case-insensitive)."""
        row = self._db.connection.execute(
            "SELECT 1 FROM games WHERE owner_id = ? AND name_key = ? LIMIT 1",
            (owner_id, fold_case(name)),
        ).fetchone()
        return row is not None

    async def delete_game(self, game_id: str) -> bool:
        async with self._lock:
            cursor = self._db.connection.execute("DELETE FROM games WHERE id = ?", (game_id,))
            self._db.connection.commit()
            return cursor.rowcount > 0

    async def delete_by_owner(self, owner_id: str) -> int:
        """Delete all games of an owner. Returns the number of removed games."""
        async with self._lock:
            cursor = self._db.connection.execute("DELETE FROM games WHERE owner_id = ?", (owner_id,))
            self._db.connection.commit()
            return cursor.rowcount


def _duplicate_error(exc: sqlite3.IntegrityError, game: Game) -> ValueError:
    error_msg = str(exc).lower()
    if "games.name_key" in error_msg or "idx_games_owner_name" in error_msg:
        return ValueError(f"Game '{game.name}' already exists for this owner")
    if "games.id" in error_msg:
        return ValueError(f"Game with id '{game.game_id}' already exists")
    return ValueError(str(exc))  # pragma: no cover
