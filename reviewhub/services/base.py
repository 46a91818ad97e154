"""Shared transaction handling for the service layer."""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from ..database import BEGIN_MODE_OPTION


class BaseService:
    """Owns the session that its repositories share.

    Each mutating operation wraps its reads and writes in :meth:`_atomic`,
    so a uniqueness check and the insert it guards, or a cascade and the
    parent delete, land in the same transaction.
    """

    def __init__(self, db: Session) -> None:
        self._db = db
        self._log = logging.getLogger(f'reviewhub.service.{type(self).__name__}')

    @contextmanager
    def _atomic(self) -> Iterator[None]:
        """Run the block in a fresh write transaction.

        Commit when the block finishes; roll back and re-raise otherwise.
        A transaction left open by earlier reads on the session is ended
        first, so the write lock is taken before the block's first read.
        """
        if self._db.in_transaction():
            self._db.commit()
        self._db.connection(execution_options={BEGIN_MODE_OPTION: 'IMMEDIATE'})
        try:
            yield
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise
