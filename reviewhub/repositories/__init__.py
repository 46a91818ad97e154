"""Repository package: expose all concrete repositories from one import."""
from .base import BaseRepository
from .game_repository import GameRepository
from .review_repository import ReviewRepository
from .user_repository import UserRepository

__all__ = [
    'BaseRepository',
    'GameRepository',
    'ReviewRepository',
    'UserRepository',
]
