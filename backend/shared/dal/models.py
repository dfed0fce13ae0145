"""Persistence models for the data access layer."""

from datetime import datetime
from enum import StrEnum
from typing import Self

from pydantic import BaseModel, Field, model_validator


def fold_case(value: str) -> str:
    """Key under which names, usernames, and emails are compared for uniqueness."""
    return value.casefold()


class GameStatus(StrEnum):
    PLAYING = "PLAYING"
    COMPLETED = "COMPLETED"
    DROPPED = "DROPPED"
    WISHLIST = "WISHLIST"
    NOT_STARTED = "NOT_STARTED"


class GameSource(StrEnum):
    MANUAL = "MANUAL"
    STEAM = "STEAM"


class SteamDetails(BaseModel, frozen=True):
    """Store metadata for games imported from Steam."""

    app_id: str | None = None
    store_url: str | None = None
    header_image_url: str | None = None
    achievement_completion: str | None = None  # free-form, e.g. "50%" or "10/20"


class Game(BaseModel, frozen=True):
    """Game record owned by exactly one account."""

    game_id: str
    owner_id: str  # Account.account_id; set from the caller, never from input
    name: str
    description: str | None = None
    developer: str
    hours_played: int = Field(default=0, ge=0)
    favorite: bool = False
    genres: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    platforms: list[str] = Field(default_factory=list)
    status: GameStatus
    source: GameSource = GameSource.MANUAL
    steam: SteamDetails | None = None  # only when source is STEAM
    added_at: datetime

    @model_validator(mode="after")
    def _validate_platform_data(self) -> Self:
        if self.steam is not None and self.source != GameSource.STEAM:
            raise ValueError("Steam details require source STEAM")
        return self
