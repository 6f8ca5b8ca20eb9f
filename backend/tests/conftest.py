"""
Shared fixtures: in-memory database, seeded roles, users and auth headers
"""
import os

# Settings are read at import time, so configure the environment first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_ENABLED"] = "false"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["DEBUG"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("SMTP_HOST", None)

import pytest
from fastapi.testclient import TestClient

from talentrack.core.database import Base, SessionLocal, engine
from talentrack.main import app
from talentrack.auth.service import create_access_token, create_user, ensure_default_roles


@pytest.fixture(autouse=True)
def setup_database():
    """Fresh schema for every test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def roles(db):
    return ensure_default_roles(db)


def auth_headers(user):
    token = create_access_token({"sub": user.email, "user_id": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(db, roles):
    return create_user(db, "admin@example.com", "admin-password", "Admin", role_names=["admin"])


@pytest.fixture
def recruiter(db, roles):
    return create_user(db, "recruiter@example.com", "recruiter-password", "Rita Recruiter", role_names=["recruiter"])


@pytest.fixture
def manager(db, roles):
    return create_user(db, "manager@example.com", "manager-password", "Max Manager", role_names=["hiring_manager"])


@pytest.fixture
def interviewer(db, roles):
    return create_user(db, "interviewer@example.com", "interviewer-password", "Ivy Interviewer", role_names=["interviewer"])


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def recruiter_headers(recruiter):
    return auth_headers(recruiter)


@pytest.fixture
def manager_headers(manager):
    return auth_headers(manager)


@pytest.fixture
def interviewer_headers(interviewer):
    return auth_headers(interviewer)


@pytest.fixture
def make_job(client, recruiter_headers):
    """Create a job and optionally open it"""
    def _make_job(open_job=True, **overrides):
        payload = {"title": "Backend Engineer", "department": "Engineering"}
        payload.update(overrides)
        response = client.post("/api/v1/jobs/", json=payload, headers=recruiter_headers)
        assert response.status_code == 201, response.text
        job = response.json()
        if open_job:
            response = client.post(
                f"/api/v1/jobs/{job['id']}/status", json={"status": "open"}, headers=recruiter_headers
            )
            assert response.status_code == 200, response.text
            job = response.json()
        return job
    
    return _make_job


@pytest.fixture
def make_candidate(client, recruiter_headers):
    counter = {"n": 0}
    
    def _make_candidate(**overrides):
        counter["n"] += 1
        payload = {
            "first_name": "Casey",
            "last_name": f"Candidate{counter['n']}",
            "email": f"casey{counter['n']}@example.com",
        }
        payload.update(overrides)
        response = client.post("/api/v1/candidates/", json=payload, headers=recruiter_headers)
        assert response.status_code == 201, response.text
        return response.json()
    
    return _make_candidate


@pytest.fixture
def make_application(client, recruiter_headers, make_job, make_candidate):
    """Apply a new candidate to a job (a new open job unless one is given)"""
    def _make_application(job=None, candidate=None):
        job = job or make_job()
        candidate = candidate or make_candidate()
        response = client.post(
            "/api/v1/applications/",
            json={"candidate_id": candidate["id"], "job_id": job["id"]},
            headers=recruiter_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()
    
    return _make_application
