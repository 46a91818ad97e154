"""Repository for catalogue games (``game`` table)."""
from typing import Optional

from ..database import Game
from .base import BaseRepository


class GameRepository(BaseRepository):
    """Row access for :class:`~reviewhub.database.Game`.

    ``platform`` is stored as a JSON array and comes back as a list in the
    order it was written.
    """

    model = Game

    def find_by_name(self, name: str) -> Optional[Game]:
        return self.find_by('name', name)
