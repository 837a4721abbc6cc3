"""
Database engine and session wiring for the karaoke admin service.

``DATABASE_URL`` selects the backend. SQLite (the default) is used for
local runs and tests; PostgreSQL is supported through the ``postgres``
extra.
"""
import logging
import os

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./karaoke.db")

# Milliseconds a SQLite writer waits for another writer's lock
SQLITE_BUSY_TIMEOUT_MS = 5000


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def make_engine(url: str = DATABASE_URL):
    """
    Build the SQLAlchemy engine for ``url``.

    SQLite connections are shared across FastAPI's worker threads and wait
    up to ``SQLITE_BUSY_TIMEOUT_MS`` for a locked database. Server databases
    get ``pool_pre_ping`` so dropped connections are replaced.
    """
    if not is_sqlite(url):
        return create_engine(url, pool_pre_ping=True)

    sqlite_engine = create_engine(url, connect_args={"check_same_thread": False})

    @event.listens_for(sqlite_engine, "connect")
    def _set_busy_timeout(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA busy_timeout = {SQLITE_BUSY_TIMEOUT_MS}")
        cursor.close()

    return sqlite_engine


engine = make_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def create_tables(bind=None) -> None:
    """Create the room, customer and booking tables if they are missing."""
    from . import models  # noqa: F401  registers the tables on Base.metadata

    bind = bind if bind is not None else engine
    Base.metadata.create_all(bind=bind)
    logger.debug("Ensured tables %s", sorted(Base.metadata.tables))


def get_db():
    """
    Yield a request-scoped session.

    Used as a FastAPI dependency by the store factories; the session is
    closed when the response has been sent.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
