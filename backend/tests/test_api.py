"""
End-to-end API tests
Full request flow through FastAPI, the dispatcher and SQLite
"""
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from main import app


PASSWORD = "Str0ng!Pass"


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as test_client:
        yield test_client


def register_and_login(client: TestClient, role: str) -> dict:
    email = f"{role.lower()}-{uuid4().hex[:8]}@example.com"
    response = client.post("/api/v1/auth/register", json={
        "email": email,
        "password": PASSWORD,
        "confirmPassword": PASSWORD,
        "firstName": "Test",
        "lastName": role,
        "roles": [role],
    })
    assert response.status_code == 201, response.text
    login = client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    assert login.status_code == 200, login.text
    tokens = login.json()
    return {"Authorization": f"Bearer {tokens['accessToken']}"}


def create_job(client: TestClient, headers: dict, publish: bool = True) -> dict:
    response = client.post("/api/v1/jobs", headers=headers, json={
        "title": "ServiceNow HRSD Consultant",
        "description": "Implement HR Service Delivery for a global client.",
        "jobType": "Contract",
        "workMode": "Remote",
        "experienceLevel": "Senior",
        "skillsRequired": ["HRSD", "Flow Designer"],
        "publish": publish,
    })
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] is True


class TestAuthApi:

    def test_me_requires_token(self, client):
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_me_with_token(self, client):
        headers = register_and_login(client, "Candidate")
        response = client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["roles"] == ["Candidate"]

    def test_garbage_token_is_rejected(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json() == {"code": "unauthenticated", "message": "Invalid or expired token"}

    def test_malformed_authorization_header_uses_error_envelope(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Token abc"})
        assert response.status_code == 401
        assert response.json()["code"] == "unauthenticated"
        assert "detail" not in response.json()

    def test_unknown_route_and_wrong_method_use_error_envelope(self, client):
        missing = client.get("/api/v1/does-not-exist")
        assert missing.status_code == 404
        assert missing.json()["code"] == "not_found"

        wrong_method = client.put("/health")
        assert wrong_method.status_code == 405
        assert wrong_method.json()["code"] == "method_not_allowed"

    def test_weak_password_lists_field_errors(self, client):
        response = client.post("/api/v1/auth/register", json={
            "email": "weak@example.com",
            "password": "weak",
            "confirmPassword": "weak",
            "firstName": "Weak",
            "lastName": "Password",
        })
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "validation_failed"
        assert any(e["field"] == "password" for e in body["errors"])

    def test_wrong_password(self, client):
        headers = register_and_login(client, "Candidate")
        me = client.get("/api/v1/auth/me", headers=headers).json()
        response = client.post("/api/v1/auth/login", json={"email": me["email"], "password": "Wrong!Pass1"})
        assert response.status_code == 401


class TestUserModerationApi:

    def test_non_admin_cannot_change_roles_or_suspend(self, client):
        employer = register_and_login(client, "Employer")
        candidate = register_and_login(client, "Candidate")
        candidate_id = client.get("/api/v1/auth/me", headers=candidate).json()["id"]

        roles = client.put(f"/api/v1/users/{candidate_id}/roles", json={"roles": ["Employer"]}, headers=employer)
        assert roles.status_code == 403
        assert roles.json()["code"] == "access_denied"

        suspend = client.post(f"/api/v1/users/{candidate_id}/suspend", json={"reason": "Spam"}, headers=employer)
        assert suspend.status_code == 403

    def test_roles_change_requires_token(self, client):
        response = client.put(f"/api/v1/users/{uuid4()}/roles", json={"roles": ["Employer"]})
        assert response.status_code == 401
        assert response.json()["code"] == "unauthenticated"


class TestJobsApi:

    def test_candidate_cannot_post_jobs(self, client):
        headers = register_and_login(client, "Candidate")
        response = client.post("/api/v1/jobs", headers=headers, json={
            "title": "Nope",
            "description": "Nope",
            "jobType": "FullTime",
            "workMode": "Remote",
            "experienceLevel": "Junior",
        })
        assert response.status_code == 403

    def test_draft_is_invisible_until_published(self, client):
        employer = register_and_login(client, "Employer")
        job = create_job(client, employer, publish=False)
        assert job["status"] == "Draft"

        assert client.get(f"/api/v1/jobs/{job['id']}").status_code == 404

        published = client.post(f"/api/v1/jobs/{job['id']}/publish", headers=employer)
        assert published.status_code == 200
        assert client.get(f"/api/v1/jobs/{job['id']}").status_code == 200

    def test_closed_job_cannot_be_republished(self, client):
        employer = register_and_login(client, "Employer")
        job = create_job(client, employer)

        assert client.delete(f"/api/v1/jobs/{job['id']}", headers=employer).status_code == 204

        response = client.post(f"/api/v1/jobs/{job['id']}/publish", headers=employer)
        assert response.status_code == 400
        assert response.json()["from"] == "Closed"

    def test_search_returns_page_envelope(self, client):
        employer = register_and_login(client, "Employer")
        create_job(client, employer)
        response = client.get("/api/v1/jobs", params={"keyword": "HRSD", "pageSize": 5})
        assert response.status_code == 200
        body = response.json()
        assert body["pageSize"] == 5
        assert body["total"] >= 1
        assert {"items", "page", "totalPages", "hasNextPage", "hasPreviousPage"} <= set(body)


class TestApplicationFlow:
    """Candidate applies, employer moves the application, candidate withdraws"""

    def test_full_flow(self, client):
        employer = register_and_login(client, "Employer")
        candidate = register_and_login(client, "Candidate")
        other_candidate = register_and_login(client, "Candidate")
        job = create_job(client, employer)

        applied = client.post("/api/v1/applications", headers=candidate, json={
            "jobId": job["id"],
            "coverLetter": "Five years of HRSD delivery.",
        })
        assert applied.status_code == 201, applied.text
        application = applied.json()
        assert application["status"] == "Applied"

        duplicate = client.post("/api/v1/applications", headers=candidate, json={"jobId": job["id"]})
        assert duplicate.status_code == 409

        moved = client.patch(
            f"/api/v1/applications/{application['id']}/status",
            headers=employer,
            json={"status": "Screening", "notes": "Good fit"},
        )
        assert moved.status_code == 200
        assert moved.json()["status"] == "Screening"

        unread = client.get("/api/v1/notifications/unread-count", headers=candidate)
        assert unread.status_code == 200

        denied = client.post(f"/api/v1/applications/{application['id']}/withdraw", headers=other_candidate)
        assert denied.status_code == 403

        withdrawn = client.post(f"/api/v1/applications/{application['id']}/withdraw", headers=candidate)
        assert withdrawn.status_code == 204

        fetched = client.get(f"/api/v1/applications/{application['id']}", headers=candidate)
        assert fetched.json()["status"] == "Withdrawn"
        assert fetched.json()["employerNotes"] is None

        posting = client.get(f"/api/v1/jobs/{job['id']}", headers=employer).json()
        assert posting["applicationCount"] == 1
