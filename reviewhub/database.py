"""
Database models and configuration for reviewhub.
Builds the SQLAlchemy engine and session factory, and declares the
``users``, ``game`` and ``review`` tables.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import JSON, Column, ForeignKey, Integer, String, Text, create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import Settings

logger = logging.getLogger('reviewhub.database')

Base = declarative_base()


class User(Base):
    """Account that writes reviews."""
    __tablename__ = "users"
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"


class Game(Base):
    """Catalogue entry; ``platform`` keeps the caller's ordering."""
    __tablename__ = "game"
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(500), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)  # not range-checked
    platform = Column(JSON, nullable=False)

    def __repr__(self) -> str:
        return f"<Game id={self.id} name={self.name!r}>"


class Review(Base):
    """A user's rating of a game.

    No ORM relationships are declared: removing dependents is the service
    layer's job, not the engine's.
    """
    __tablename__ = "review"
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    game_id = Column(Integer, ForeignKey("game.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Review id={self.id} game_id={self.game_id} user_id={self.user_id}>"


#: Connection execution option read by the SQLite ``begin`` hook.
BEGIN_MODE_OPTION = 'reviewhub_begin_mode'


def _install_sqlite_hooks(engine: Engine, foreign_keys: bool) -> None:
    """Let pysqlite's ``BEGIN`` be emitted by SQLAlchemy, with a lock mode.

    pysqlite on its own defers ``BEGIN`` until the first write.  Here every
    transaction begins explicitly: ``BEGIN DEFERRED`` for reads, or the mode
    named by the ``BEGIN_MODE_OPTION`` execution option.  Mutating services
    ask for ``IMMEDIATE`` so the read half of a check-then-write and both
    halves of a cascade run under the write lock.
    File databases are switched to WAL so open readers never hold up a writer.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        if foreign_keys:
            cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")  # no-op for :memory:
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        mode = conn.get_execution_options().get(BEGIN_MODE_OPTION, 'DEFERRED')
        conn.exec_driver_sql(f"BEGIN {mode}")


def make_engine(settings: Optional[Settings] = None) -> Engine:
    """Create an engine for *settings.database_url*.

    In-memory SQLite URLs share a single connection so every session sees
    the same database.

    On SQLite only one write transaction runs at a time.  A mutation waits
    up to ``settings.sqlite_timeout`` seconds for the write lock and then
    fails with ``OperationalError`` ("database is locked").  Reads do not
    take the write lock and are not blocked by a running mutation.
    """
    settings = settings or Settings()
    url = make_url(settings.database_url)
    kwargs = {'echo': settings.sql_echo}
    is_sqlite = url.get_backend_name() == 'sqlite'
    if is_sqlite:
        kwargs['connect_args'] = {'check_same_thread': False,
                                  'timeout': settings.sqlite_timeout}
        if url.database in (None, '', ':memory:'):
            kwargs['poolclass'] = StaticPool
    engine = create_engine(url, **kwargs)
    if is_sqlite:
        _install_sqlite_hooks(engine, settings.sqlite_foreign_keys)
    logger.debug("Engine created for %s", url.render_as_string(hide_password=True))
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    """Session factory used by the boundary, one session per request.

    ``expire_on_commit`` is off so rows returned from a committed operation
    (including deleted-row snapshots) stay readable.
    """
    return sessionmaker(bind=engine, autoflush=False,
                        expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create any missing tables."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized")


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """Yield a session and always close it; uncommitted work is discarded."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
