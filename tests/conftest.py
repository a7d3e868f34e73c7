"""Shared fixtures: mongomock-backed stores injected into services and the app."""

import os
import tempfile

# Must be set before jobboard modules read their settings
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="jobboard-uploads-"))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import mongomock
import pytest
from fastapi.testclient import TestClient

from jobboard.core.auth import create_access_token
from jobboard.db.mongodb import init_mongo_indexes
from jobboard.services.document_store import DocumentStore, get_job_store, get_user_store
from jobboard.services.embedded_service import EmbeddedCollectionService
from jobboard.services.kinds import USER_SECTION_FIELDS


@pytest.fixture
def mongo_db():
    db = mongomock.MongoClient().job_board_test
    init_mongo_indexes(db)
    return db


@pytest.fixture
def user_store(mongo_db):
    return DocumentStore(mongo_db.users, label="User")


@pytest.fixture
def job_store(mongo_db):
    return DocumentStore(mongo_db.jobs, label="Job")


@pytest.fixture
def service(user_store, job_store):
    return EmbeddedCollectionService(user_store, job_store)


@pytest.fixture
def make_user(user_store):
    """Insert a user directly (no bcrypt round) and return the stored document."""
    counter = {"n": 0}

    def _make(name="Alice", role="jobseeker", company=""):
        counter["n"] += 1
        doc = {
            "name": name,
            "email": f"{name.lower()}{counter['n']}@acme.com",
            "password": "not-a-real-hash",
            "role": role,
            "profile": {"company": company},
            "resume": None,
            "profile_pic": None,
        }
        for field in USER_SECTION_FIELDS:
            doc[field] = []
        return user_store.insert(doc)

    return _make


@pytest.fixture
def make_job(job_store):
    """Insert a job owned by `employer` with optional pre-seeded applications."""

    def _make(employer, applications=None, is_active=True, title="Backend Engineer"):
        return job_store.insert({
            "title": title,
            "description": "Build APIs",
            "location": "Remote",
            "salary": {"min": 100, "max": 200, "currency": "USD"},
            "job_type": "Full-time",
            "experience": "Mid Level",
            "skills": ["python"],
            "employer": employer["_id"],
            "company": "Acme",
            "is_active": is_active,
            "applications": applications or [],
        })

    return _make


def auth_header(user: dict) -> dict:
    token = create_access_token({"sub": str(user["_id"]), "role": user["role"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(user_store, job_store):
    from jobboard.main import app

    app.dependency_overrides[get_user_store] = lambda: user_store
    app.dependency_overrides[get_job_store] = lambda: job_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    """Build an Authorization header for a stored user."""
    return auth_header
