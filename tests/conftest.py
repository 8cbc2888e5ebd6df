"""
Pytest configuration and fixtures.
"""

import os

# Settings are read at import time
os.environ["STAFF_PASSWORD"] = "staff-secret"
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from complaint_intake.config import settings
from complaint_intake.database import Base, get_db, init_db
from complaint_intake.dependencies import get_blob_store
from complaint_intake.main import app
from complaint_intake.services.blob_store import LocalBlobStore

# Use in-memory SQLite for testing
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def staff_headers():
    return {"X-Staff-Password": settings.staff_password}


@pytest.fixture
def db_session():
    init_db(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(str(tmp_path / "uploads"))


@pytest.fixture
def client(db_session, blob_store):
    """Test client with the database and photo storage overridden"""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    yield TestClient(app)
    app.dependency_overrides.clear()
