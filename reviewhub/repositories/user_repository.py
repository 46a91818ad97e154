"""Repository for user accounts (``users`` table)."""
from typing import Optional

from ..database import User
from .base import BaseRepository


class UserRepository(BaseRepository):
    """Row access for :class:`~reviewhub.database.User`."""

    model = User

    def find_by_email(self, email: str) -> Optional[User]:
        return self.find_by('email', email)
