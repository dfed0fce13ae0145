"""Request models for creating and partially updating games."""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints

from shared.dal.models import GameSource, GameStatus

NAME_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 2000
DEVELOPER_MAX_LENGTH = 100
TAG_MAX_LENGTH = 50


def _dedupe(values: list[str]) -> list[str]:
    """Drop repeated entries, keeping the first occurrence."""
    return list(dict.fromkeys(values))


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TAG_MAX_LENGTH)]
TagSet = Annotated[list[Tag], AfterValidator(_dedupe)]
Name = Annotated[str, Field(max_length=NAME_MAX_LENGTH), AfterValidator(_not_blank)]
Developer = Annotated[str, Field(max_length=DEVELOPER_MAX_LENGTH), AfterValidator(_not_blank)]


class SteamInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    app_id: str | None = Field(default=None, max_length=50)
    store_url: str | None = Field(default=None, max_length=255)
    header_image_url: str | None = Field(default=None, max_length=255)
    achievement_completion: str | None = Field(default=None, max_length=50)


class GameDraft(BaseModel):
    """Input for a new game. The owner is never part of the input."""

    model_config = ConfigDict(extra="forbid")

    name: Name
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    developer: Developer
    hours_played: int | None = Field(default=None, ge=0, strict=True)
    favorite: bool | None = None
    genres: TagSet | None = None
    tags: TagSet | None = None
    platforms: TagSet | None = None
    status: GameStatus
    source: GameSource | None = None
    steam: SteamInput | None = None


class GamePatch(BaseModel):
    """Partial update of a game.

    Only fields present in the request body are applied; use
    ``model_fields_set`` to tell an absent field from an explicit null.
    Blank ``name``/``developer`` values pass validation and are ignored by
    the service. A null ``description`` is ignored and a blank one clears it.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    developer: str | None = Field(default=None, max_length=DEVELOPER_MAX_LENGTH)
    hours_played: int | None = Field(default=None, ge=0, strict=True)
    favorite: bool | None = None
    genres: TagSet | None = None
    tags: TagSet | None = None
    platforms: TagSet | None = None
    status: GameStatus | None = None
    source: GameSource | None = None
    steam: SteamInput | None = None
