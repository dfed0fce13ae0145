"""Abstract interface for game persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import Game


class GameRepository(ABC):
    """Abstract interface for game persistence.

    Names are unique per owner under case-insensitive comparison.
    Implementations raise ValueError when a write would break that rule.
    """

    @abstractmethod
    async def create_game(self, game: Game) -> None: ...

    @abstractmethod
    async def update_game(self, game: Game) -> None: ...

    @abstractmethod
    async def get_game(self, game_id: str) -> Game | None: ...

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> list[Game]: ...

    @abstractmethod
    async def exists_by_name(self, owner_id: str, name: str) -> bool: ...

    @abstractmethod
    async def delete_game(self, game_id: str) -> bool: ...

    @abstractmethod
    async def delete_by_owner(self, owner_id: str) -> int: ...
