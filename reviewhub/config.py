"""Runtime configuration and logging setup for reviewhub."""
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class Settings:
    """Values read from the environment by :func:`load_settings`.

    Attributes:
        database_url:        SQLAlchemy URL of the backing store.
        log_level:           Level name for the ``reviewhub`` logger.
        sql_echo:            Echo emitted SQL through SQLAlchemy's logger.
        sqlite_foreign_keys: Turn on ``PRAGMA foreign_keys`` for SQLite
                             connections.  The services never rely on it.
        sqlite_timeout:      Seconds a SQLite write waits for the lock before
                             failing with "database is locked".
        host:                Bind address for ``reviewhub-server``.
        port:                Bind port for ``reviewhub-server``.
    """
    database_url: str = 'sqlite:///reviewhub.db'
    log_level: str = 'INFO'
    sql_echo: bool = False
    sqlite_foreign_keys: bool = True
    sqlite_timeout: float = 5.0
    host: str = '127.0.0.1'
    port: int = 5000


def load_settings() -> Settings:
    """Build :class:`Settings` from ``REVIEWHUB_*`` variables (and ``.env``).

    ``DATABASE_URL`` is honoured when ``REVIEWHUB_DATABASE_URL`` is unset.
    """
    load_dotenv()
    defaults = Settings()
    return Settings(
        database_url=os.getenv(
            'REVIEWHUB_DATABASE_URL',
            os.getenv('DATABASE_URL', defaults.database_url),
        ),
        log_level=os.getenv('REVIEWHUB_LOG_LEVEL', defaults.log_level),
        sql_echo=_env_bool('REVIEWHUB_SQL_ECHO', defaults.sql_echo),
        sqlite_foreign_keys=_env_bool('REVIEWHUB_SQLITE_FOREIGN_KEYS',
                                      defaults.sqlite_foreign_keys),
        sqlite_timeout=float(os.getenv('REVIEWHUB_SQLITE_TIMEOUT',
                                       defaults.sqlite_timeout)),
        host=os.getenv('REVIEWHUB_HOST', defaults.host),
        port=int(os.getenv('REVIEWHUB_PORT', defaults.port)),
    )


def setup_logging(level: str = 'INFO') -> logging.Logger:
    """Configure the root reviewhub logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Unknown names fall back to INFO.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger('reviewhub')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger
