"""Business logic for game reviews."""
from typing import List

from sqlalchemy.orm import Session

from ..database import Game, Review, User
from ..errors import InternalInconsistency, NotFound
from ..repositories import GameRepository, ReviewRepository, UserRepository
from .base import BaseService


class ReviewService(BaseService):
    """Validates and applies review operations, delegating persistence to
    :class:`~reviewhub.repositories.ReviewRepository`.

    Rules
    -----
    * A review can only be added for a game and a user that exist.  Both
      parents are locked for the rest of the transaction, so a concurrent
      cascade delete cannot strand the new row.
    * ``rating`` is stored as given; range rules belong to the caller.
    * A review whose user or game is missing is an internal inconsistency,
      not an ordinary lookup miss.
    """

    def __init__(self, db: Session) -> None:
        super().__init__(db)
        self._reviews = ReviewRepository(db)
        self._games = GameRepository(db)
        self._users = UserRepository(db)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_all(self) -> List[Review]:
        return self._reviews.find_all()

    def get(self, review_id: int) -> Review:
        """Return the review with *review_id*.

        Raises:
            NotFound: no such review.
        """
        review = self._reviews.find_by_id(review_id)
        if review is None:
            raise NotFound('Review', review_id)
        return review

    def user_for(self, review: Review) -> User:
        """Resolve the author of *review*.

        Raises:
            InternalInconsistency: the referenced user is gone.
        """
        user = self._users.find_by_id(review.user_id)
        if user is None:
            self._log.error("Review %s references missing user %s",
                            review.id, review.user_id)
            raise InternalInconsistency(
                'User', review.user_id,
                f"User not found for review {review.id}")
        return user

    def game_for(self, review: Review) -> Game:
        """Resolve the game *review* is about.

        Raises:
            InternalInconsistency: the referenced game is gone.
        """
        game = self._games.find_by_id(review.game_id)
        if game is None:
            self._log.error("Review %s references missing game %s",
                            review.id, review.game_id)
            raise InternalInconsistency(
                'Game', review.game_id,
                f"Game not found for review {review.id}")
        return game

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, rating: int, comment: str, game_id: int, user_id: int) -> Review:
        """Create a review of *game_id* by *user_id*.

        Raises:
            NotFound: the game or the user does not exist.
        """
        with self._atomic():
            if self._games.find_by_id(game_id, for_update=True) is None:
                raise NotFound('Game', game_id)
            if self._users.find_by_id(user_id, for_update=True) is None:
                raise NotFound('User', user_id)
            review = self._reviews.insert(rating=rating, comment=comment,
                                          game_id=game_id, user_id=user_id)
        self._log.info("Created review %s (game=%s user=%s)",
                       review.id, game_id, user_id)
        return review

    def delete(self, review_id: int) -> Review:
        """Delete a review.

        Returns:
            The review row as it was before deletion.

        Raises:
            NotFound: no such review.
        """
        with self._atomic():
            review = self._reviews.delete_by_id(review_id)
            if review is None:
                raise NotFound('Review', review_id)
        self._log.info("Deleted review %s", review_id)
        return review
