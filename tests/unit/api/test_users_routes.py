"""
Name: Users Router Tests

Responsibilities:
  - POST /api/users/sync (create vs existing, token failures)
  - Admin CRUD status codes, envelopes and RFC7807 errors
  - Admin gate (401 without token, 403 for non-admins)

Notes:
  - Store: in-memory, seeded with an Admin (user_admin) and a Student
    (user_student). Tokens are resolved by a fake verifier (see conftest).
"""

import pytest

from tests.conftest import (
    ADMIN_TOKEN,
    NEWCOMER_TOKEN,
    NO_SUB_TOKEN,
    STUDENT_TOKEN,
    bearer,
)

pytestmark = pytest.mark.unit

ADMIN = bearer(ADMIN_TOKEN)


class TestSync:
    def test_first_sync_creates_user(self, client):
        """R: Unknown identity => 201 with a fresh Student record."""
        response = client.post("/api/users/sync", headers=bearer(NEWCOMER_TOKEN))

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"
        assert body["message"] == "User created successfully."
        data = body["data"]
        assert data["identityKey"] == "user_new"
        assert data["email"] == "newcomer@example.com"
        assert data["username"] == "newcomer"
        assert data["role"] == "Student"
        assert data["xpTotal"] == 0
        assert data["isActive"] is True

    def test_second_sync_returns_existing(self, client):
        """R: Known identity => 200 with the stored record, nothing inserted."""
        first = client.post("/api/users/sync", headers=bearer(NEWCOMER_TOKEN))
        second = client.post("/api/users/sync", headers=bearer(NEWCOMER_TOKEN))

        assert second.status_code == 200
        assert second.json()["message"] == "User already exists."
        assert second.json()["data"]["id"] == first.json()["data"]["id"]

    def test_seeded_user_sync_is_not_created(self, client):
        response = client.post("/api/users/sync", headers=bearer(STUDENT_TOKEN))

        assert response.status_code == 200
        assert response.json()["data"]["username"] == "Sam"

    def test_missing_sub_rejected(self, client):
        response = client.post("/api/users/sync", headers=bearer(NO_SUB_TOKEN))

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token: missing user identifier."

    def test_missing_token_rejected(self, client):
        response = client.post("/api/users/sync")

        assert response.status_code == 401
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.headers["WWW-Authenticate"] == "Bearer"
        body = response.json()
        assert body["code"] == "UNAUTHORIZED"
        assert body["detail"] == "Missing Bearer token."

    def test_invalid_token_rejected(self, client):
        response = client.post("/api/users/sync", headers=bearer("forged"))

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token."

    def test_non_bearer_scheme_rejected(self, client):
        response = client.post(
            "/api/users/sync", headers={"Authorization": "Basic dXNlcjpwYXNz"}
        )
        assert response.status_code == 401


class TestAdminGate:
    def test_no_token_is_401(self, client):
        assert client.get("/api/users").status_code == 401

    def test_student_is_403(self, client):
        response = client.get("/api/users", headers=bearer(STUDENT_TOKEN))

        assert response.status_code == 403
        body = response.json()
        assert body["code"] == "FORBIDDEN"
        assert body["detail"] == "Admin role required."

    def test_unsynced_caller_is_403(self, client):
        """R: A valid token without a stored record has no role."""
        response = client.get("/api/users", headers=bearer(NEWCOMER_TOKEN))
        assert response.status_code == 403

    def test_role_read_from_store_on_each_request(self, client, seeded_store):
        """R: Promoting a user takes effect on their next request."""
        from bigo_api.domain.entities import UserRole

        student = seeded_store.find_by_identity_key("user_student")
        seeded_store.update_role_and_active(student.id, UserRole.ADMIN, True)

        response = client.get("/api/users", headers=bearer(STUDENT_TOKEN))
        assert response.status_code == 200


class TestCreate:
    def test_create_returns_201(self, client):
        response = client.post(
            "/api/users",
            headers=ADMIN,
            json={"email": "new@x.com", "username": "newbie", "role": "Instructor"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User created successfully."
        assert body["data"]["identityKey"] == ""
        assert body["data"]["role"] == "Instructor"
        assert body["data"]["xpTotal"] == 0
        assert body["data"]["isActive"] is True

    def test_role_defaults_to_student(self, client):
        response = client.post(
            "/api/users", headers=ADMIN, json={"email": "new@x.com", "username": "nb"}
        )
        assert response.json()["data"]["role"] == "Student"

    def test_duplicate_email_is_409(self, client):
        response = client.post(
            "/api/users",
            headers=ADMIN,
            json={"email": "student@example.com", "username": "dupe"},
        )

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "CONFLICT"
        assert body["detail"] == "A user with email 'student@example.com' already exists."

    def test_missing_fields_are_422(self, client):
        response = client.post("/api/users", headers=ADMIN, json={})

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["detail"] == "Validation Failed"
        assert body["field_errors"] == {
            "email": ["Email is required."],
            "username": ["Username is required."],
        }

    @pytest.mark.parametrize(
        "payload, field, message",
        [
            (
                {"email": "no-at-sign", "username": "ok"},
                "email",
                "A valid email address is required.",
            ),
            (
                {"email": ("a" * 250) + "@x.com", "username": "ok"},
                "email",
                "Email must not exceed 255 characters.",
            ),
            (
                {"email": "a@x.com", "username": "a"},
                "username",
                "Username must be between 2 and 100 characters.",
            ),
            (
                {"email": "a@x.com", "username": "ok", "role": "SuperUser"},
                "role",
                "Role must be 'Student', 'Admin', or 'Instructor'.",
            ),
            (
                {"email": "a@x.com", "username": "ok", "role": "admin"},
                "role",
                "Role must be 'Student', 'Admin', or 'Instructor'.",
            ),
        ],
    )
    def test_field_validation_messages(self, client, payload, field, message):
        response = client.post("/api/users", headers=ADMIN, json=payload)

        assert response.status_code == 422
        assert response.json()["field_errors"][field] == [message]

    def test_invalid_body_does_not_insert(self, client, seeded_store):
        client.post("/api/users", headers=ADMIN, json={"email": "bad"})
        assert len(seeded_store.list_all()) == 2


class TestRead:
    def test_list_newest_first(self, client):
        client.post(
            "/api/users", headers=ADMIN, json={"email": "z@x.com", "username": "zed"}
        )

        response = client.get("/api/users", headers=ADMIN)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert [u["email"] for u in body["data"]] == [
            "z@x.com",
            "student@example.com",
            "admin@example.com",
        ]

    def test_get_by_id(self, client, seeded_store):
        student = seeded_store.find_by_identity_key("user_student")

        response = client.get(f"/api/users/{student.id}", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "student@example.com"

    def test_get_missing_is_404(self, client):
        response = client.get("/api/users/999", headers=ADMIN)

        assert response.status_code == 404
        assert response.json()["detail"] == "User with ID 999 not found."

    def test_non_integer_id_is_422(self, client):
        response = client.get("/api/users/abc", headers=ADMIN)
        assert response.status_code == 422


class TestUpdate:
    def test_update_role_and_active(self, client, seeded_store):
        student = seeded_store.find_by_identity_key("user_student")

        response = client.put(
            f"/api/users/{student.id}",
            headers=ADMIN,
            json={"role": "Instructor", "isActive": False},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "User updated successfully."
        assert body["data"]["role"] == "Instructor"
        assert body["data"]["isActive"] is False
        assert body["data"]["email"] == "student@example.com"

    def test_snake_case_field_accepted(self, client, seeded_store):
        student = seeded_store.find_by_identity_key("user_student")

        response = client.put(
            f"/api/users/{student.id}",
            headers=ADMIN,
            json={"role": "Student", "is_active": False},
        )
        assert response.status_code == 200

    def test_update_missing_is_404(self, client):
        response = client.put(
            "/api/users/999", headers=ADMIN, json={"role": "Admin", "isActive": True}
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "User with ID 999 not found."

    def test_update_requires_both_fields(self, client):
        response = client.put("/api/users/1", headers=ADMIN, json={})

        assert response.status_code == 422
        assert response.json()["field_errors"] == {
            "role": ["Role is required."],
            "isActive": ["IsActive is required."],
        }


class TestDelete:
    def test_delete_is_soft(self, client, seeded_store):
        student = seeded_store.find_by_identity_key("user_student")

        response = client.delete(f"/api/users/{student.id}", headers=ADMIN)

        assert response.status_code == 204
        assert response.content == b""

        after = client.get(f"/api/users/{student.id}", headers=ADMIN)
        assert after.status_code == 200
        assert after.json()["data"]["isActive"] is False

    def test_delete_missing_is_404(self, client):
        response = client.delete("/api/users/999", headers=ADMIN)

        assert response.status_code == 404
        assert response.json()["detail"] == "User with ID 999 not found."

    def test_inactive_admin_keeps_access(self, client, seeded_store):
        """R: Deactivation does not revoke admin access."""
        admin = seeded_store.find_by_identity_key("user_admin")
        seeded_store.soft_delete(admin.id)

        assert client.get("/api/users", headers=ADMIN).status_code == 200
