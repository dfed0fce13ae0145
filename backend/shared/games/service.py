"""Game service: owner-scoped creation, listing, partial updates, and deletes."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from shared.dal.models import Game, GameSource, SteamDetails, fold_case
from shared.errors import ConflictError, NotFoundError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from shared.auth.models import CallerContext
    from shared.dal.game_repository import GameRepository
    from shared.games.types import GameDraft, GamePatch, SteamInput

logger = structlog.get_logger()

_TAG_SET_FIELDS = ("genres", "tags", "platforms")


class GameService:
    """Manage games on behalf of their owner.

    Every operation is scoped to the caller: a game owned by someone else
    is reported exactly like a missing one. Also serves as the
    OwnedResourceCleaner for account deletion.
    """

    def __init__(self, game_repo: GameRepository) -> None:
        self._game_repo = game_repo

    async def create(self, caller: CallerContext, draft: GameDraft) -> Game:
        """Create a game owned by the caller.

        Steam details survive only when the draft asks for source STEAM and
        carries them; anything else is stored as a MANUAL game.
        """
        if await self._game_repo.exists_by_name(caller.account_id, draft.name):
            raise ConflictError(f"Game '{draft.name}' already exists for this owner")

        if draft.source == GameSource.STEAM and draft.steam is not None:
            source, steam = GameSource.STEAM, _merge_steam(None, draft.steam)
        else:
            source, steam = GameSource.MANUAL, None

        game = Game(
            game_id=str(uuid4()),
            owner_id=caller.account_id,
            name=draft.name,
            description=draft.description,
            developer=draft.developer,
            hours_played=draft.hours_played or 0,
            favorite=bool(draft.favorite),
            genres=draft.genres or [],
            tags=draft.tags or [],
            platforms=draft.platforms or [],
            status=draft.status,
            source=source,
            steam=steam,
            added_at=datetime.now(tz=UTC),
        )
        await self._save(self._game_repo.create_game, game)
        logger.info("game created", game_id=game.game_id, owner_id=game.owner_id, source=game.source)
        return game

    async def list_owned(self, caller: CallerContext) -> list[Game]:
        """Return the caller's games, oldest first."""
        return await self._game_repo.list_by_owner(caller.account_id)

    async def get_owned(self, caller: CallerContext, game_id: str) -> Game | None:
        game = await self._game_repo.get_game(game_id)
        if game is None or game.owner_id != caller.account_id:
            return None
        return game

    async def update(self, caller: CallerContext, game_id: str, patch: GamePatch) -> Game | None:
        """Apply a partial update to one of the caller's games.

        Returns None when the game does not exist. Fields absent from the
        patch are left alone; see ``GamePatch`` for the per-field rules.
        """
        game = await self._load_owned(caller, game_id, action="update")
        if game is None:
            return None

        present = patch.model_fields_set
        changes: dict[str, object] = {}

        name = _blank_to_none(patch.name)
        if name is not None and name != game.name:
            renamed = fold_case(name) != fold_case(game.name)
            if renamed and await self._game_repo.exists_by_name(caller.account_id, name):
                raise ConflictError(f"Game '{name}' already exists for this owner")
            changes["name"] = name

        developer = _blank_to_none(patch.developer)
        if developer is not None:
            changes["developer"] = developer

        if patch.description is not None:
            changes["description"] = _blank_to_none(patch.description)

        for field in ("hours_played", "favorite", "status"):
            value = getattr(patch, field)
            if value is not None:
                changes[field] = value

        for field in _TAG_SET_FIELDS:
            if field in present:
                changes[field] = getattr(patch, field) or []

        # The source is never promoted implicitly; Steam details only live under STEAM.
        source = patch.source if patch.source is not None else game.source
        changes["source"] = source
        if source == GameSource.STEAM:
            changes["steam"] = _merge_steam(game.steam, patch.steam)
        else:
            changes["steam"] = None

        updated = Game.model_validate(game.model_dump() | changes)
        if updated == game:
            return game

        await self._save(self._game_repo.update_game, updated)
        logger.info("game updated", game_id=game_id, owner_id=caller.account_id, fields=sorted(present))
        return updated

    async def delete(self, caller: CallerContext, game_id: str) -> bool:
        """Delete one of the caller's games. Returns False when it does not exist."""
        game = await self._load_owned(caller, game_id, action="delete")
        if game is None:
            return False
        deleted = await self._game_repo.delete_game(game_id)
        if deleted:
            logger.info("game deleted", game_id=game_id, owner_id=caller.account_id)
        return deleted

    async def delete_all_owned_by(self, owner_id: str) -> int:
        """Remove every game of an owner. Used by the account deletion cascade."""
        removed = await self._game_repo.delete_by_owner(owner_id)
        logger.info("owned games removed", owner_id=owner_id, count=removed)
        return removed

    # -- private helpers --

    async def _load_owned(self, caller: CallerContext, game_id: str, *, action: str) -> Game | None:
        game = await self._game_repo.get_game(game_id)
        if game is None:
            return None
        if game.owner_id != caller.account_id:
            logger.info("game access denied", caller_id=caller.account_id, game_id=game_id, action=action)
            raise NotFoundError("Game not found or access denied")
        return game

    @staticmethod
    async def _save(write: Callable[[Game], Awaitable[None]], game: Game) -> None:
        try:
            await write(game)
        except ValueError as e:
            raise ConflictError(str(e)) from e


def _merge_steam(current: SteamDetails | None, supplied: SteamInput | None) -> SteamDetails | None:
    """Overlay the non-null supplied Steam fields onto the current details."""
    if supplied is None:
        return current
    merged = current.model_dump() if current is not None else {}
    merged.update(supplied.model_dump(exclude_none=True))
    return SteamDetails(**merged)


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value
