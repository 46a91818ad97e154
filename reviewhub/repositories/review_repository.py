"""Repository for reviews (``review`` table)."""
from typing import List

from ..database import Review
from .base import BaseRepository


class ReviewRepository(BaseRepository):
    """Row access for :class:`~reviewhub.database.Review`.

    Columns::

        id       <int, generated>
        rating   <int>
        comment  <str>
        game_id  <int -> game.id>
        user_id  <int -> users.id>
    """

    model = Review

    def find_by_game(self, game_id: int) -> List[Review]:
        return self.find_all_by('game_id', game_id)

    def find_by_user(self, user_id: int) -> List[Review]:
        return self.find_all_by('user_id', user_id)

    def delete_by_game(self, game_id: int) -> int:
        """Remove every review of *game_id*.  Returns the number removed."""
        return self.delete_where('game_id', game_id)

    def delete_by_user(self, user_id: int) -> int:
        """Remove every review written by *user_id*.  Returns the number removed."""
        return self.delete_where('user_id', user_id)
