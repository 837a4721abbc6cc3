from sqlalchemy import inspect

from karaoke_service.database import SQLITE_BUSY_TIMEOUT_MS, create_tables, is_sqlite, make_engine


def test_sqlite_engine_waits_for_busy_database(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'busy.db'}")
    try:
        with engine.connect() as conn:
            assert conn.exec_driver_sql("PRAGMA busy_timeout").scalar() == SQLITE_BUSY_TIMEOUT_MS
    finally:
        engine.dispose()


def test_create_tables_is_idempotent(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'tables.db'}")
    try:
        create_tables(bind=engine)
        create_tables(bind=engine)
        assert {"rooms", "customers", "bookings"} <= set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def test_is_sqlite():
    assert is_sqlite("sqlite:///./karaoke.db")
    assert not is_sqlite("postgresql://karaoke:secret@db:5432/karaoke")
