# Shared fixtures: every test gets a fresh in-memory SQLite schema.
from __future__ import annotations

import logging
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.db.base import Base  # noqa: E402
from app.db import models  # noqa: E402,F401  side-effect: register all models

logger = logging.getLogger(__name__)


@pytest.fixture()
def engine():
    # StaticPool keeps the single in-memory database alive across threads
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=eng)
    logger.info("test-bootstrap: schema ensured")
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def db(engine):
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(engine):
    from app.api.deps import get_db
    from app.main import create_app

    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    def _get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app = create_app()
    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def complete_factors():
    """A valid current-shape selection (camelCase, as stored on votes)."""
    return {
        "effort": 5,
        "sprints": 1,
        "designerCount": 2,
        "designerLevels": [1.5, 2],
        "breakpoints": 3,
        "fidelity": 3,
        "meetingBuffer": 0,
        "iterationMultiplier": 1,
        "discoveryActivities": [],
        "designActivities": [],
    }
