import os

# Configure before importing jobtrack.* (settings and the engine are built at import time).
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobtrack.core.base import Base

# Import models so they register with SQLAlchemy metadata.
from jobtrack.models.job_application import JobApplication  # noqa: F401

from jobtrack.core.database import get_db


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # Important: because we use an in-memory SQLite DB with StaticPool, the DB
    # persists across tests. Reset schema per test to avoid cross-test coupling.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def app(db_session):
    from jobtrack.main import app as fastapi_app

    def override_get_db():
        yield db_session
    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def create_app_record(client):
    """
    POST a job application through the API and return the JSON body.

    Usage:
        rec = create_app_record(company="Google", status="Offer")
    """

    def _create(**overrides):
        payload = {
            "company": "Acme",
            "jobTitle": "Engineer",
            "dateApplied": "2026-06-01",
            "status": "Applied",
        }
        payload.update(overrides)
        res = client.post("/api/applications", json=payload)
        assert res.status_code == 201, res.text
        return res.json()

    return _create
