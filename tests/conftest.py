import os
import sys
import tempfile

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Must be set before karaoke_service.database creates its engine
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite:///" + os.path.join(tempfile.gettempdir(), "karaoke_test.db"),
)
os.environ.setdefault("TESTING", "1")
os.environ.pop("REDIS_URL", None)

import pytest

from karaoke_service.database import Base, SessionLocal, create_tables, engine


@pytest.fixture
def db():
    """Fresh tables and a session for store-level tests."""
    Base.metadata.drop_all(bind=engine)
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
