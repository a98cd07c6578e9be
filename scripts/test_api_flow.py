"""
End-to-end API tests through FastAPI's TestClient.

Covers the full student/recruiter journey plus how errors come out on the
wire (status codes, camelCase bodies).
Run: pytest scripts/test_api_flow.py
"""
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import OperationFailure

from jobportal.db.mongodb import COLLECTIONS

from conftest import PASSWORD, auth_header


def register(client, name, email, role, **extra):
    body = {"name": name, "email": email, "password": PASSWORD, "role": role}
    body.update(extra)
    response = client.post("/api/auth/register", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def bearer(user: dict) -> dict:
    return {"Authorization": f"Bearer {user['token']}"}


def test_student_and_recruiter_journey(client):
    student = register(client, "Sam Student", "sam@campus.edu", "student", skills=["Python"])
    recruiter = register(client, "Rita Recruiter", "rita@acme.io", "recruiter", company="Acme")
    assert student["role"] == "student" and student["token"]

    # Recruiter posts a job
    response = client.post("/api/jobs", headers=bearer(recruiter), json={
        "title": "Backend Engineer",
        "company": "Acme",
        "description": "Build APIs",
        "salary": 1200000,
        "skillsRequired": ["Python"]
    })
    assert response.status_code == 201, response.text
    job = response.json()
    assert job["recruiterId"] == recruiter["id"]
    assert job["skillsRequired"] == ["Python"]
    assert job["salary"] == "1200000"

    # Student applies, then tries again
    response = client.post(f"/api/applications/apply/{job['id']}", headers=bearer(student))
    assert response.status_code == 201, response.text
    application = response.json()
    assert application["status"] == "Applied"
    assert application["jobId"] == job["id"]

    response = client.post(f"/api/applications/apply/{job['id']}", headers=bearer(student))
    assert response.status_code == 400
    assert response.json()["detail"] == "You have already applied for this job"

    # Recruiter sees exactly one applicant
    response = client.get(f"/api/applications/job/{job['id']}", headers=bearer(recruiter))
    assert response.status_code == 200
    applicants = response.json()
    assert len(applicants) == 1
    assert applicants[0]["student"]["name"] == "Sam Student"
    assert applicants[0]["studentProfile"] == {}

    # Recruiter shortlists
    response = client.patch(
        f"/api/applications/status/{application['id']}",
        headers=bearer(recruiter),
        json={"status": "Shortlisted"}
    )
    assert response.status_code == 200, response.text
    assert response.json()["status"] == "Shortlisted"

    # Student sees the new status next to the job
    response = client.get("/api/applications/student", headers=bearer(student))
    [mine] = response.json()
    assert mine["status"] == "Shortlisted"
    assert mine["job"]["title"] == "Backend Engineer"


def test_cross_tenant_status_update_forbidden(client, student, recruiter, other_recruiter, job):
    application = client.post(f"/api/applications/apply/{job['id']}", headers=auth_header(student)).json()

    response = client.patch(
        f"/api/applications/status/{application['id']}",
        headers=auth_header(other_recruiter),
        json={"status": "Rejected"}
    )
    assert response.status_code == 403

    response = client.get(f"/api/applications/job/{job['id']}", headers=auth_header(other_recruiter))
    assert response.status_code == 403


def test_unknown_status_is_400(client, student, recruiter, job):
    application = client.post(f"/api/applications/apply/{job['id']}", headers=auth_header(student)).json()
    response = client.patch(
        f"/api/applications/status/{application['id']}",
        headers=auth_header(recruiter),
        json={"status": "Hired"}
    )
    assert response.status_code == 400
    assert response.json()["errors"]


def test_missing_resources_are_404(client, recruiter):
    response = client.get("/api/applications/job/64b7f0c2a1b2c3d4e5f60718", headers=auth_header(recruiter))
    assert response.status_code == 404
    response = client.patch(
        "/api/applications/status/64b7f0c2a1b2c3d4e5f60718",
        headers=auth_header(recruiter),
        json={"status": "Rejected"}
    )
    assert response.status_code == 404


def test_auth_required(client):
    response = client.get("/api/jobs")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"

    response = client.get("/api/jobs", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == 401


def test_role_mismatch_is_403(client, student, recruiter):
    response = client.post("/api/jobs", headers=auth_header(student), json={
        "title": "T", "company": "C", "description": "D"
    })
    assert response.status_code == 403
    assert client.get("/api/jobs/mine", headers=auth_header(student)).status_code == 403
    assert client.get("/api/profile", headers=auth_header(recruiter)).status_code == 403
    assert client.get("/api/recruiter/profile", headers=auth_header(student)).status_code == 403


def test_job_validation_errors(client, recruiter):
    response = client.post("/api/jobs", headers=auth_header(recruiter), json={"title": "Only a title"})
    assert response.status_code == 400
    assert response.json()["errors"] == ["company is required", "description is required"]


def test_registration_errors(client, student):
    response = client.post("/api/auth/register", json={
        "name": "X", "email": "x@campus.edu", "password": PASSWORD, "role": "admin"
    })
    assert response.status_code == 400

    response = client.post("/api/auth/register", json={"email": "y@campus.edu", "role": "student"})
    assert response.status_code == 400
    assert response.json()["errors"]

    response = client.post("/api/auth/register", json={
        "name": "Sam Again", "email": "sam@campus.edu", "password": PASSWORD, "role": "student"
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"


def test_login(client, student):
    response = client.post("/api/auth/login", json={"email": "sam@campus.edu", "password": PASSWORD})
    assert response.status_code == 200
    assert response.json()["id"] == student["user_id"]

    response = client.post("/api/auth/login", json={"email": "sam@campus.edu", "password": "nope"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid credentials"


def test_me(client, recruiter):
    response = client.get("/api/auth/me", headers=auth_header(recruiter))
    assert response.status_code == 200
    assert response.json()["email"] == "rita@acme.io"
    assert "passwordHash" not in response.json()


def test_student_profile_endpoints(client, student):
    response = client.get("/api/profile", headers=auth_header(student))
    assert response.status_code == 200
    assert response.json()["title"] == "Aspiring Professional"
    assert response.json()["socialLinks"] == {"linkedin": "", "github": "", "portfolio": ""}

    response = client.put("/api/profile", headers=auth_header(student), json={
        "bio": "CS undergrad",
        "skills": [{"name": "Python", "level": "Expert"}],
        "socialLinks": {"github": "https://github.com/sam"},
        "resumeFilename": "sam.pdf",
        "resumeBlob": "JVBERi0xLjQK"
    })
    assert response.status_code == 200, response.text
    profile = response.json()
    assert profile["userId"] == student["user_id"]
    assert profile["socialLinks"]["github"] == "https://github.com/sam"
    assert profile["resumeFilename"] == "sam.pdf"

    response = client.put("/api/profile", headers=auth_header(student), json={
        "skills": [{"name": "Python", "level": "Guru"}]
    })
    assert response.status_code == 400


def test_recruiter_profile_endpoints(client, recruiter):
    assert client.get("/api/recruiter/profile", headers=auth_header(recruiter)).status_code == 404

    body = {
        "fullName": "Rita Rao", "email": "rita.rao@acme.io", "phone": "123",
        "designation": "Lead", "companyName": "Acme", "companyWebsite": "https://acme.io",
        "industry": "Software", "companySize": "11-50", "companyLocation": "Pune",
        "companyDescription": "Tools", "companyEmailDomain": "acme.io",
        "linkedInUrl": "https://linkedin.com/in/rita"
    }
    response = client.post("/api/recruiter/profile", headers=auth_header(recruiter), json=body)
    assert response.status_code == 201, response.text
    assert response.json()["profileCompletion"] == 100
    assert response.json()["verificationStatus"] == "pending"

    assert client.post("/api/recruiter/profile", headers=auth_header(recruiter), json=body).status_code == 400

    response = client.put("/api/recruiter/profile", headers=auth_header(recruiter), json={"linkedInUrl": ""})
    assert response.status_code == 200
    assert response.json()["profileCompletion"] == 92

    response = client.delete("/api/recruiter/profile", headers=auth_header(recruiter))
    assert response.status_code == 200
    assert response.json()["message"] == "Recruiter profile deactivated"
    assert client.delete("/api/recruiter/profile", headers=auth_header(recruiter)).status_code == 200

    response = client.put("/api/recruiter/profile", headers=auth_header(recruiter), json={"phone": "456"})
    assert response.status_code == 403


def test_recruiter_profile_validation_errors(client, recruiter):
    response = client.post("/api/recruiter/profile", headers=auth_header(recruiter), json={"fullName": "Rita"})
    assert response.status_code == 400
    assert "Official Email is required" in response.json()["errors"]


def test_startup_builds_indexes(mongo_db):
    from jobportal.main import app
    mongo_db[COLLECTIONS["applications"]].drop_indexes()

    with TestClient(app):
        indexes = mongo_db[COLLECTIONS["applications"]].index_information()
    assert any(index.get("unique") for index in indexes.values())


def test_startup_fails_when_indexes_cannot_be_built(monkeypatch):
    from jobportal import main

    def duplicate_data():
        raise OperationFailure("E11000 duplicate key error collection: applications")
    monkeypatch.setattr(main, "init_mongo_indexes", duplicate_data)

    with pytest.raises(OperationFailure):
        with TestClient(main.app):
            pass
