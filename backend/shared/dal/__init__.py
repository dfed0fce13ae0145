"""Data access layer: repository interfaces and shared persistence models."""

from shared.dal.account_repository import AccountRepository
from shared.dal.game_repository import GameRepository
from shared.dal.models import Game, GameSource, GameStatus, SteamDetails, fold_case

__all__ = [
    "AccountRepository",
    "Game",
    "GameRepository",
    "GameSource",
    "GameStatus",
    "SteamDetails",
    "fold_case",
]
