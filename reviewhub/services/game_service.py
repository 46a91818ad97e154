"""Business logic for the game catalogue."""
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import Game, Review
from ..errors import Conflict, NotFound
from ..repositories import GameRepository, ReviewRepository
from .base import BaseService


@dataclass(frozen=True)
class GameUpdate:
    """Partial update for a game.

    Each field is independently present (not ``None``) or absent.  Only
    present fields are written; ``price=0`` and ``platform=[]`` count as
    present.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[int] = None
    platform: Optional[List[str]] = None

    def changes(self) -> Dict[str, Any]:
        """Return ``{field: value}`` for the present fields only."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                result[f.name] = list(value) if f.name == 'platform' else value
        return result


class GameService(BaseService):
    """Validates and applies catalogue operations, delegating persistence to
    :class:`~reviewhub.repositories.GameRepository`.

    Rules
    -----
    * ``name`` is unique across all games, on insert and on rename.
    * Updates only touch the fields supplied in a :class:`GameUpdate`.
    * Deleting a game first deletes every review of it.
    """

    def __init__(self, db: Session) -> None:
        super().__init__(db)
        self._games = GameRepository(db)
        self._reviews = ReviewRepository(db)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_all(self) -> List[Game]:
        return self._games.find_all()

    def get(self, game_id: int) -> Game:
        """Return the game with *game_id*.

        Raises:
            NotFound: no such game.
        """
        game = self._games.find_by_id(game_id)
        if game is None:
            raise NotFound('Game', game_id)
        return game

    def reviews_for(self, game_id: int) -> List[Review]:
        """Reviews of *game_id* (empty when there are none)."""
        return self._reviews.find_by_game(game_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, name: str, description: str, price: int,
            platform: List[str]) -> Game:
        """Create a game.

        Raises:
            Conflict: another game already has *name*.
        """
        with self._atomic():
            if self._games.find_by_name(name) is not None:
                self._log.warning("Rejected duplicate game name %s", name)
                raise Conflict('Game', 'name', name)
            try:
                game = self._games.insert(name=name, description=description,
                                          price=price, platform=list(platform))
            except IntegrityError as exc:
                self._log.warning("Unique constraint rejected game name %s", name)
                raise Conflict('Game', 'name', name) from exc
        self._log.info("Created game %s (%s)", game.id, name)
        return game

    def update(self, game_id: int, update: GameUpdate) -> Game:
        """Apply the present fields of *update* to the game.

        Raises:
            NotFound: no such game.
            Conflict: *update* renames the game to a name already in use.
        """
        changes = update.changes()
        with self._atomic():
            game = self._games.find_by_id(game_id, for_update=True)
            if game is None:
                raise NotFound('Game', game_id)
            new_name = changes.get('name')
            if new_name is not None and new_name != game.name:
                if self._games.find_by_name(new_name) is not None:
                    self._log.warning("Rejected rename of game %s to %s", game_id, new_name)
                    raise Conflict('Game', 'name', new_name)
            if not changes:
                return game
            try:
                game = self._games.update(game_id, changes)
            except IntegrityError as exc:
                raise Conflict('Game', 'name', new_name) from exc
        self._log.info("Updated game %s fields=%s", game_id, sorted(changes))
        return game

    def delete(self, game_id: int) -> Game:
        """Delete a game and, before it, all of its reviews.

        Returns:
            The game row as it was before deletion.

        Raises:
            NotFound: no such game.
        """
        with self._atomic():
            game = self._games.find_by_id(game_id, for_update=True)
            if game is None:
                raise NotFound('Game', game_id)
            removed = self._reviews.delete_by_game(game_id)
            self._games.delete_by_id(game_id)
        self._log.info("Deleted game %s and %d review(s)", game_id, removed)
        return game
