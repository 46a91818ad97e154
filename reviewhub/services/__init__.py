"""Services package: expose all concrete services from one import."""
from sqlalchemy.orm import Session

from .base import BaseService
from .game_service import GameService, GameUpdate
from .review_service import ReviewService
from .user_service import UserService


class ServiceRegistry:
    """Builds every service around one session.

    The boundary creates one registry per request and hands it to resolvers,
    so all calls made while serving that request share the session.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.users = UserService(db)
        self.games = GameService(db)
        self.reviews = ReviewService(db)


__all__ = [
    'BaseService',
    'GameService',
    'GameUpdate',
    'ReviewService',
    'ServiceRegistry',
    'UserService',
]
