"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- In-memory storage, queue and document store backends
"""

import os

# Must be set before the application settings are loaded
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite:///:memory:")
os.environ.setdefault("NOTIFICATION_WORKER_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobmanager.core.database import Base, get_db
from jobmanager.core.documents import InMemoryDocumentStore, get_document_store
from jobmanager.core.queue import InMemoryQueue, get_notification_queue
from jobmanager.core.storage import LocalStorage, get_storage
from jobmanager.models import Job, JobApplication  # noqa: F401
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "uploads"))


@pytest.fixture
def queue():
    return InMemoryQueue()


@pytest.fixture
def document_store():
    return InMemoryDocumentStore()


@pytest.fixture
def client(db_session, storage, queue, document_store):
    """
    FastAPI test client with every backend dependency overridden.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_notification_queue] = lambda: queue
    app.dependency_overrides[get_document_store] = lambda: document_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_job_data():
    """Sample job data for testing"""
    return {
        "title": "Senior Python Developer",
        "description": "Build and run our application intake services on AWS.",
        "location": "São Paulo (Remote)"
    }


@pytest.fixture
def sample_application_data():
    return {"candidate_name": "Ana", "candidate_email": "ana@x.com"}


@pytest.fixture
def pdf_file():
    """(filename, content, content type) of a small fake PDF"""
    return ("resume.pdf", b"%PDF-1.4\nFake PDF content for testing", "application/pdf")
