"""Owner-scoped game library management."""

from shared.games.service import GameService
from shared.games.types import GameDraft, GamePatch, SteamInput

__all__ = [
    "GameDraft",
    "GamePatch",
    "GameService",
    "SteamInput",
]
