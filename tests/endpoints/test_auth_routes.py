import uuid

from app.core.constants import RoleEnum
from tests.helpers.asserts import api_call, assert_error


def _username():
    return f"user-{uuid.uuid4().hex[:10]}"


class TestAuthEndpoints:
    def test_register_and_login(self, client):
        username = _username()
        register = api_call(client, "POST", "/auth/register", json={
            "username": username,
            "password": "testpass123",
            "full_name": "New Student",
        })
        assert register.status_code == 201
        data = register.json()["data"]
        assert data["username"] == username
        assert data["role"] == "student"
        assert "hashed_password" not in data

        login = api_call(client, "POST", "/auth/login", json={"username": username, "password": "testpass123"})
        login_data = login.json()["data"]
        assert login_data["token"]["token_type"] == "bearer"
        assert login_data["token"]["access_token"]
        assert login_data["user"]["username"] == username

    def test_register_duplicate_username(self, client, user_factory):
        existing = user_factory()
        response = client.post("/auth/register", json={
            "username": existing.username,
            "password": "testpass123",
        })
        assert_error(response, 409, "CONFLICT")

    def test_register_short_password(self, client):
        response = client.post("/auth/register", json={"username": _username(), "password": "short"})
        assert_error(response, 422, "VALIDATION_ERROR")

    def test_anonymous_cannot_register_teacher(self, client):
        response = client.post("/auth/register", json={
            "username": _username(),
            "password": "testpass123",
            "role": "teacher",
        })
        assert_error(response, 403, "FORBIDDEN")

    def test_student_cannot_register_admin(self, client, token_for_role, auth_headers):
        token, _ = token_for_role("student")
        response = client.post("/auth/register", headers=auth_headers(token), json={
            "username": _username(),
            "password": "testpass123",
            "role": "admin",
        })
        assert_error(response, 403, "FORBIDDEN")

    def test_admin_can_register_teacher(self, client, token_for_role, auth_headers):
        token, _ = token_for_role("admin")
        response = api_call(client, "POST", "/auth/register", headers=auth_headers(token), json={
            "username": _username(),
            "password": "testpass123",
            "role": RoleEnum.TEACHER.value,
        })
        assert response.json()["data"]["role"] == "teacher"

    def test_login_wrong_password(self, client, user_factory):
        user = user_factory()
        response = client.post("/auth/login", json={"username": user.username, "password": "wrongpass123"})
        assert_error(response, 401, "UNAUTHORIZED")

    def test_login_unknown_user(self, client):
        response = client.post("/auth/login", json={"username": _username(), "password": "testpass123"})
        assert_error(response, 401, "UNAUTHORIZED")
