"""Business logic for user accounts."""
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import Review, User
from ..errors import Conflict, NotFound
from ..repositories import ReviewRepository, UserRepository
from .base import BaseService


class UserService(BaseService):
    """Validates and applies user operations, delegating persistence to
    :class:`~reviewhub.repositories.UserRepository`.

    Rules
    -----
    * ``email`` is unique across all users.
    * Deleting a user first deletes every review the user wrote.
    """

    def __init__(self, db: Session) -> None:
        super().__init__(db)
        self._users = UserRepository(db)
        self._reviews = ReviewRepository(db)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_all(self) -> List[User]:
        return self._users.find_all()

    def get(self, user_id: int) -> User:
        """Return the user with *user_id*.

        Raises:
            NotFound: no such user.
        """
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFound('User', user_id)
        return user

    def reviews_for(self, user_id: int) -> List[Review]:
        """Reviews written by *user_id* (empty when there are none)."""
        return self._reviews.find_by_user(user_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, name: str, email: str) -> User:
        """Create a user.

        Raises:
            Conflict: another user already has *email*.
        """
        with self._atomic():
            if self._users.find_by_email(email) is not None:
                self._log.warning("Rejected duplicate email %s", email)
                raise Conflict('User', 'email', email)
            try:
                user = self._users.insert(name=name, email=email)
            except IntegrityError as exc:
                self._log.warning("Unique constraint rejected email %s", email)
                raise Conflict('User', 'email', email) from exc
        self._log.info("Created user %s (%s)", user.id, email)
        return user

    def delete(self, user_id: int) -> User:
        """Delete a user and, before it, all of the user's reviews.

        Returns:
            The user row as it was before deletion.

        Raises:
            NotFound: no such user.
        """
        with self._atomic():
            user = self._users.find_by_id(user_id, for_update=True)
            if user is None:
                raise NotFound('User', user_id)
            removed = self._reviews.delete_by_user(user_id)
            self._users.delete_by_id(user_id)
        self._log.info("Deleted user %s and %d review(s)", user_id, removed)
        return user
