"""
Shared fixtures for the test scripts.

Every test gets a fresh in-memory MongoDB (mongomock) with the real
indexes, so the unique constraints behave like production.
Run: pytest scripts/
"""
import mongomock
import pytest
from fastapi.testclient import TestClient

from jobportal.db import mongodb
from jobportal.schemas.schemas import StudentRegistration, RecruiterRegistration
from jobportal.services.auth_service import AuthService
from jobportal.services.job_service import JobCatalogService

PASSWORD = "password123"


@pytest.fixture(autouse=True)
def mongo_db(monkeypatch):
    client = mongomock.MongoClient()
    db = client["job_portal_test"]
    monkeypatch.setattr(mongodb, "_client", client)
    monkeypatch.setattr(mongodb, "_db", db)
    mongodb.init_mongo_indexes()
    yield db


def register_user(name: str, email: str, role: str) -> dict:
    """Register through the auth service; returns the current-user dict routes receive."""
    if role == "student":
        registration = StudentRegistration(name=name, email=email, password=PASSWORD, role="student")
    else:
        registration = RecruiterRegistration(name=name, email=email, password=PASSWORD, role="recruiter")
    result = AuthService().register(registration)
    return {
        "user_id": result["id"],
        "name": result["name"],
        "email": result["email"],
        "role": result["role"],
        "token": result["token"]
    }


@pytest.fixture
def student():
    return register_user("Sam Student", "sam@campus.edu", "student")


@pytest.fixture
def other_student():
    return register_user("Sara Student", "sara@campus.edu", "student")


@pytest.fixture
def recruiter():
    return register_user("Rita Recruiter", "rita@acme.io", "recruiter")


@pytest.fixture
def other_recruiter():
    return register_user("Raj Recruiter", "raj@globex.io", "recruiter")


@pytest.fixture
def job(recruiter):
    return JobCatalogService().create_job(recruiter, {
        "title": "Backend Engineer",
        "company": "Acme",
        "description": "Build APIs",
        "salary": "12 LPA",
        "location": "Bangalore",
        "skills_required": ["Python", "MongoDB"]
    })


@pytest.fixture
def client():
    from jobportal.main import app
    return TestClient(app)


def auth_header(user: dict) -> dict:
    return {"Authorization": f"Bearer {user['token']}"}
