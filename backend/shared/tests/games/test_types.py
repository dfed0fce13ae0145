"""Tests for game request models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shared.dal.models import GameSource, GameStatus
from shared.games.types import GameDraft, GamePatch


class TestGameDraft:
    def test_minimal_draft(self):
        draft = GameDraft.model_validate({"name": "Chrono", "developer": "Square", "status": "WISHLIST"})

        assert draft.status == GameStatus.WISHLIST
        assert draft.hours_played is None
        assert draft.source is None
        assert draft.genres is None

    def test_tag_sets_are_trimmed_and_deduplicated(self):
        draft = GameDraft(
            name="Chrono",
            developer="Square",
            status=GameStatus.PLAYING,
            genres=["RPG", " RPG ", "JRPG"],
            platforms=["SNES", "SNES"],
        )

        assert draft.genres == ["RPG", "JRPG"]
        assert draft.platforms == ["SNES"]

    def test_reports_all_violations_at_once(self):
        with pytest.raises(ValidationError) as exc_info:
            GameDraft.model_validate(
                {"name": " ", "developer": "d" * 101, "status": "BOGUS", "hours_played": -1, "tags": [""]}
            )

        fields = {str(err["loc"][0]) for err in exc_info.value.errors()}
        assert fields == {"name", "developer", "status", "hours_played", "tags"}

    def test_required_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            GameDraft.model_validate({})

        fields = {str(err["loc"][0]) for err in exc_info.value.errors()}
        assert fields == {"name", "developer", "status"}

    def test_owner_cannot_be_supplied(self):
        with pytest.raises(ValidationError, match="owner_id"):
            GameDraft.model_validate(
                {"name": "Chrono", "developer": "Square", "status": "WISHLIST", "owner_id": "someone-else"}
            )

    def test_steam_field_limits(self):
        with pytest.raises(ValidationError):
            GameDraft.model_validate(
                {
                    "name": "Chrono",
                    "developer": "Square",
                    "status": "WISHLIST",
                    "source": "STEAM",
                    "steam": {"app_id": "1" * 51},
                }
            )

    def test_hours_played_rejects_strings(self):
        with pytest.raises(ValidationError, match="hours_played"):
            GameDraft.model_validate_json('{"name": "A", "developer": "B", "status": "PLAYING", "hours_played": "5"}')


class TestGamePatch:
    def test_tracks_present_fields(self):
        patch = GamePatch.model_validate({"description": None, "tags": []})

        assert patch.model_fields_set == {"description", "tags"}
        assert patch.description is None
        assert patch.tags == []

    def test_blank_name_passes_validation(self):
        patch = GamePatch(name="  ", developer="")

        assert patch.name == "  "

    def test_enum_fields(self):
        patch = GamePatch.model_validate({"status": "COMPLETED", "source": "STEAM"})

        assert patch.status == GameStatus.COMPLETED
        assert patch.source == GameSource.STEAM

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            GamePatch.model_validate({"added_at": "2020-01-01T00:00:00Z"})
