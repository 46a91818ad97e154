"""Repository base class used by all concrete repositories."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session


class BaseRepository:
    """Provides row-level CRUD for a single mapped table.

    Sub-classes set :attr:`model` to an ORM class from
    :mod:`reviewhub.database`.  Every method works on the session passed to
    ``__init__`` and only ever *flushes*; committing or rolling back is left
    to the service that owns the transaction.

    Writes re-read the row after flushing, so callers always get what the
    store persisted (generated identity included), not an echo of the input.
    """

    model: Any = None

    def __init__(self, db: Session) -> None:
        self._db = db
        self._log = logging.getLogger(f'reviewhub.repository.{type(self).__name__}')

    def _column(self, field: str):
        column = getattr(self.model, field, None)
        if column is None or field not in self.model.__table__.columns:
            raise ValueError(f"{self.model.__name__} has no column {field!r}")
        return column

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_all(self) -> List[Any]:
        """Return every row, ordered by identity."""
        return self._db.query(self.model).order_by(self.model.id).all()

    def find_by_id(self, row_id: int, for_update: bool = False) -> Optional[Any]:
        """Return the row with *row_id*, or ``None``.

        With *for_update* the row is read with ``SELECT ... FOR UPDATE`` on
        engines that support it, locking it until the transaction ends.
        """
        query = self._db.query(self.model).filter(self.model.id == row_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def find_by(self, field: str, value: Any) -> Optional[Any]:
        """Return the first row whose *field* equals *value*, or ``None``."""
        return (self._db.query(self.model)
                .filter(self._column(field) == value)
                .order_by(self.model.id)
                .first())

    def find_all_by(self, field: str, value: Any) -> List[Any]:
        """Return all rows whose *field* equals *value*."""
        return (self._db.query(self.model)
                .filter(self._column(field) == value)
                .order_by(self.model.id)
                .all())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, **fields: Any) -> Any:
        """Insert a row built from *fields* and return it as persisted."""
        row = self.model(**fields)
        self._db.add(row)
        self._db.flush()
        self._db.refresh(row)
        self._log.debug("Inserted %r", row)
        return row

    def update(self, row_id: int, changes: Dict[str, Any]) -> Optional[Any]:
        """Apply *changes* to the row with *row_id*.

        Keys not in *changes* are left untouched.  Returns the re-read row,
        or ``None`` when no row has *row_id*.
        """
        row = self.find_by_id(row_id, for_update=True)
        if row is None:
            return None
        for field, value in changes.items():
            self._column(field)
            setattr(row, field, value)
        self._db.flush()
        self._db.refresh(row)
        self._log.debug("Updated %r fields=%s", row, sorted(changes))
        return row

    def delete_by_id(self, row_id: int) -> Optional[Any]:
        """Delete the row with *row_id*.  Returns the deleted row or ``None``."""
        row = self.find_by_id(row_id)
        if row is None:
            return None
        self._db.delete(row)
        self._db.flush()
        self._log.debug("Deleted %r", row)
        return row

    def delete_where(self, field: str, value: Any) -> int:
        """Delete every row whose *field* equals *value*.  Returns the count."""
        count = (self._db.query(self.model)
                 .filter(self._column(field) == value)
                 .delete(synchronize_session='fetch'))
        self._log.debug("Deleted %d %s row(s) where %s=%r",
                        count, self.model.__name__, field, value)
        return count
