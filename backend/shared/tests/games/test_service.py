"""Tests for GameService."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

import pytest

from shared.auth.models import CallerContext
from shared.dal.models import GameSource, GameStatus
from shared.db import Database, SqliteGameRepository
from shared.errors import ConflictError, NotFoundError
from shared.games.service import GameService
from shared.games.types import GameDraft, GamePatch

if TYPE_CHECKING:
    from pathlib import Path

U1 = CallerContext(account_id="owner-1", username="u1")
U2 = CallerContext(account_id="owner-2", username="u2")


@pytest.fixture
def game_repo(tmp_path: Path):
    db = Database(tmp_path / "test.db")
    db.connect()
    yield SqliteGameRepository(db)
    db.close()


@pytest.fixture
def service(game_repo: SqliteGameRepository) -> GameService:
    return GameService(game_repo)


def _draft(name: str = "Chrono", **fields) -> GameDraft:
    return GameDraft.model_validate({"name": name, "developer": "Square", "status": "WISHLIST", **fields})


def _patch(**fields) -> GamePatch:
    return GamePatch.model_validate(fields)


class TestCreate:
    async def test_applies_defaults_and_owner(self, service):
        game = await service.create(U1, _draft())

        assert game.owner_id == U1.account_id
        assert game.hours_played == 0
        assert game.favorite is False
        assert game.source == GameSource.MANUAL
        assert game.steam is None
        assert game.genres == []
        assert game.added_at.tzinfo is not None

    async def test_name_unique_per_owner_case_insensitive(self, service):
        await service.create(U1, _draft("Foo"))

        with pytest.raises(ConflictError, match="already exists"):
            await service.create(U1, _draft("foo"))

    async def test_name_uniqueness_folds_non_ascii_case(self, service):
        await service.create(U1, _draft("Pokémon"))

        with pytest.raises(ConflictError, match="already exists"):
            await service.create(U1, _draft("POKÉMON"))

    async def test_same_name_allowed_for_other_owner(self, service):
        await service.create(U1, _draft("Foo"))

        game = await service.create(U2, _draft("Foo"))

        assert game.owner_id == U2.account_id

    async def test_steam_source_with_details_is_kept(self, service):
        game = await service.create(U1, _draft(source="STEAM", steam={"app_id": "620", "achievement_completion": "50%"}))

        assert game.source == GameSource.STEAM
        assert game.steam is not None
        assert game.steam.app_id == "620"
        assert game.steam.achievement_completion == "50%"

    async def test_steam_source_without_details_becomes_manual(self, service):
        game = await service.create(U1, _draft(source="STEAM"))

        assert game.source == GameSource.MANUAL
        assert game.steam is None

    async def test_steam_details_dropped_for_manual_source(self, service):
        game = await service.create(U1, _draft(steam={"app_id": "620"}))

        assert game.source == GameSource.MANUAL
        assert game.steam is None

    async def test_store_violation_reported_as_conflict(self, game_repo):
        # Simulates a concurrent create slipping past the existence check.
        game_repo.exists_by_name = AsyncMock(return_value=False)
        service = GameService(game_repo)
        await service.create(U1, _draft("Foo"))

        with pytest.raises(ConflictError, match="already exists for this owner"):
            await service.create(U1, _draft("FOO"))


class TestListAndGet:
    async def test_list_owned_is_scoped_and_ordered(self, service):
        first = await service.create(U1, _draft("Chrono"))
        second = await service.create(U1, _draft("Earthbound"))
        await service.create(U2, _draft("Mother 3"))

        games = await service.list_owned(U1)

        assert [g.game_id for g in games] == [first.game_id, second.game_id]

    async def test_list_owned_empty(self, service):
        assert await service.list_owned(U2) == []

    async def test_get_owned(self, service):
        game = await service.create(U1, _draft())

        assert await service.get_owned(U1, game.game_id) == game

    async def test_get_foreign_or_missing_returns_none(self, service):
        game = await service.create(U1, _draft())

        assert await service.get_owned(U2, game.game_id) is None
        assert await service.get_owned(U1, "missing") is None


class TestUpdate:
    async def test_absent_fields_unchanged(self, service):
        game = await service.create(U1, _draft(description="Time travel", genres=["RPG"]))

        updated = await service.update(U1, game.game_id, _patch(hours_played=10))

        assert updated is not None
        assert updated.hours_played == 10
        assert updated.name == "Chrono"
        assert updated.description == "Time travel"
        assert updated.genres == ["RPG"]
        assert updated.status == GameStatus.WISHLIST
        assert updated.added_at == game.added_at
        assert updated.owner_id == game.owner_id

    async def test_update_persists(self, service):
        game = await service.create(U1, _draft())

        await service.update(U1, game.game_id, _patch(favorite=True, status="PLAYING"))

        stored = await service.get_owned(U1, game.game_id)
        assert stored is not None
        assert stored.favorite is True
        assert stored.status == GameStatus.PLAYING

    async def test_blank_name_and_developer_ignored(self, service):
        game = await service.create(U1, _draft())

        updated = await service.update(U1, game.game_id, _patch(name="  ", developer=""))

        assert updated == game

    async def test_nulls_ignored_for_scalar_fields(self, service):
        game = await service.create(U1, _draft(hours_played=4, favorite=True))

        updated = await service.update(
            U1, game.game_id, _patch(hours_played=None, favorite=None, status=None, source=None, name=None)
        )

        assert updated == game

    async def test_null_description_leaves_it_unchanged(self, service):
        game = await service.create(U1, _draft(description="Time travel"))

        updated = await service.update(U1, game.game_id, _patch(description=None))

        assert updated == game

    async def test_blank_description_clears_it(self, service):
        game = await service.create(U1, _draft(description="Time travel"))

        updated = await service.update(U1, game.game_id, _patch(description="  "))

        assert updated is not None
        assert updated.description is None

    async def test_null_or_empty_tag_set_replaces_with_empty(self, service):
        game = await service.create(U1, _draft(genres=["RPG"], tags=["classic"], platforms=["SNES"]))

        updated = await service.update(U1, game.game_id, _patch(genres=None, tags=[], platforms=["DS", "DS"]))

        assert updated is not None
        assert updated.genres == []
        assert updated.tags == []
        assert updated.platforms == ["DS"]

    async def test_rename_conflict(self, service):
        await service.create(U1, _draft("Foo"))
        game = await service.create(U1, _draft("Bar"))

        with pytest.raises(ConflictError):
            await service.update(U1, game.game_id, _patch(name="FOO"))

    async def test_rename_conflict_folds_non_ascii_case(self, service):
        await service.create(U1, _draft("Ōkami"))
        game = await service.create(U1, _draft("Bar"))

        with pytest.raises(ConflictError):
            await service.update(U1, game.game_id, _patch(name="ōKAMI"))

    async def test_non_ascii_case_only_rename_allowed(self, service):
        game = await service.create(U1, _draft("pokémon"))

        updated = await service.update(U1, game.game_id, _patch(name="POKÉMON"))

        assert updated is not None
        assert updated.name == "POKÉMON"

    async def test_case_only_rename_allowed(self, service):
        game = await service.create(U1, _draft("chrono trigger"))

        updated = await service.update(U1, game.game_id, _patch(name="Chrono Trigger"))

        assert updated is not None
        assert updated.name == "Chrono Trigger"

    async def test_foreign_game_is_not_found(self, service):
        game = await service.create(U1, _draft())

        with pytest.raises(NotFoundError):
            await service.update(U2, game.game_id, _patch(hours_played=99))

        stored = await service.get_owned(U1, game.game_id)
        assert stored is not None
        assert stored.hours_played == 0

    async def test_missing_game_returns_none(self, service):
        assert await service.update(U1, "missing", _patch(hours_played=1)) is None


class TestUpdateSteamDetails:
    async def test_merges_supplied_fields(self, service):
        game = await service.create(U1, _draft(source="STEAM", steam={"app_id": "620", "store_url": "https://s/620"}))

        updated = await service.update(
            U1, game.game_id, _patch(steam={"achievement_completion": "10/20", "store_url": None})
        )

        assert updated is not None
        assert updated.steam is not None
        assert updated.steam.app_id == "620"
        assert updated.steam.store_url == "https://s/620"
        assert updated.steam.achievement_completion == "10/20"

    async def test_switching_to_manual_clears_steam_details(self, service):
        game = await service.create(U1, _draft(source="STEAM", steam={"app_id": "620"}))

        updated = await service.update(U1, game.game_id, _patch(source="MANUAL"))

        assert updated is not None
        assert updated.source == GameSource.MANUAL
        assert updated.steam is None

    async def test_steam_fields_ignored_for_manual_game(self, service):
        game = await service.create(U1, _draft())

        updated = await service.update(U1, game.game_id, _patch(steam={"app_id": "620"}))

        assert updated is not None
        assert updated.source == GameSource.MANUAL
        assert updated.steam is None

    async def test_switching_to_steam_with_details(self, service):
        game = await service.create(U1, _draft())

        updated = await service.update(U1, game.game_id, _patch(source="STEAM", steam={"app_id": "620"}))

        assert updated is not None
        assert updated.source == GameSource.STEAM
        assert updated.steam is not None
        assert updated.steam.app_id == "620"


class TestDelete:
    async def test_delete_own_game(self, service):
        game = await service.create(U1, _draft())

        assert await service.delete(U1, game.game_id) is True
        assert await service.get_owned(U1, game.game_id) is None

    async def test_delete_missing_returns_false(self, service):
        assert await service.delete(U1, "missing") is False

    async def test_delete_foreign_game_is_not_found(self, service):
        game = await service.create(U1, _draft())

        with pytest.raises(NotFoundError):
            await service.delete(U2, game.game_id)

        assert await service.get_owned(U1, game.game_id) is not None

    async def test_delete_all_owned_by(self, service):
        await service.create(U1, _draft("A"))
        await service.create(U1, _draft("B"))
        await service.create(U2, _draft("A"))

        assert await service.delete_all_owned_by(U1.account_id) == 2
        assert await service.delete_all_owned_by(U1.account_id) == 0
        assert await service.list_owned(U1) == []
        assert len(await service.list_owned(U2)) == 1
