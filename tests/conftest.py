"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mentor.plans.types import PreviewDay, PreviewExercise


# Enable foreign key constraints for SQLite
@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints in SQLite connections."""
    try:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
    except Exception:
        pass


@pytest.fixture
def test_user_id() -> str:
    """Stable user ID for use in tests."""
    return "user-1"


@pytest.fixture
def three_day_plan() -> list[PreviewDay]:
    """Mon/Wed/Fri plan with one main lift per day."""
    return [
        PreviewDay(day="Mon", focus="Full", exercises=[PreviewExercise(name="Back Squat", sets=3, reps="8-10", rpe="7-8")]),
        PreviewDay(day="Wed", focus="Full", exercises=[PreviewExercise(name="Bench Press", sets=3, reps="6-8", rpe="7-8")]),
        PreviewDay(day="Fri", focus="Full", exercises=[PreviewExercise(name="Lat Pulldown", sets=3, reps="10-12", rpe="7-8")]),
    ]


@pytest.fixture(scope="function")
def db_session(monkeypatch):
    """
    Provides an isolated in-memory SQLite DB session for tests.

    This fixture:
    - Creates an in-memory SQLite database per test (StaticPool, so every
      session sees the same database)
    - Patches mentor.db.session so get_session()/get_db() use it
    - Creates all tables

    Usage:
        def test_something(db_session):
            db_session.add(User(id="u1"))
            db_session.commit()
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    import mentor.db.session as session_module
    from mentor.db.models import Base

    session_module.enable_sqlite_savepoints(engine)
    monkeypatch.setattr(session_module, "_engine", engine)
    monkeypatch.setattr(session_module, "_SessionLocal", None)

    Base.metadata.create_all(engine)

    test_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = test_session_local()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
