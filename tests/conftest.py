"""
Pytest configuration for AutoTrack tests.

Every test gets a fresh in-memory SQLite database; the API client routes
get_db to the same database.
"""
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from autotrack.core.database import Base
import autotrack.models  # register tables on Base.metadata
from autotrack.services.subscription import Actor
from autotrack.services.users import create_user

TEST_PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(db):
    """One account per portal: Engineering employee/HOD, a Marketing HOD, finance APA/AM and an admin."""
    return {
        "employee": create_user(db, "emp@example.com", TEST_PASSWORD, "employee", "Engineering", "Eve Employee"),
        "colleague": create_user(db, "colleague@example.com", TEST_PASSWORD, "employee", "Engineering"),
        "hod": create_user(db, "hod@example.com", TEST_PASSWORD, "hod", "Engineering", "Hal Head"),
        "other_hod": create_user(db, "mkt-hod@example.com", TEST_PASSWORD, "hod", "Marketing"),
        "outsider": create_user(db, "mkt@example.com", TEST_PASSWORD, "employee", "Marketing"),
        "apa": create_user(db, "apa@example.com", TEST_PASSWORD, "finance", "Finance", subrole="apa"),
        "am": create_user(db, "am@example.com", TEST_PASSWORD, "finance", "Finance", subrole="am"),
        "admin": create_user(db, "admin@example.com", TEST_PASSWORD, "admin", "Administration"),
    }


@pytest.fixture
def actors(users):
    return {name: Actor.from_user(user) for name, user in users.items()}


@pytest.fixture
def client(session_factory, users):
    from fastapi.testclient import TestClient
    from autotrack.core.database import get_db
    from autotrack.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
