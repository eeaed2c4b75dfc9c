import uuid

from fastapi.testclient import TestClient

from app.core.roles import Role
from app.main import create_app
from tests.conftest import auth_headers, create_test_token, seed_user

REGISTER_URL = "/api/v1/auth/register"
LOGIN_URL = "/api/v1/auth/login"
ME_URL = "/api/v1/auth/me"


def _register(client, email="alice@gmail.com", password="password123", name="Alice"):
    return client.post(REGISTER_URL, json={"name": name, "email": email, "password": password})


def test_register_then_login_then_me(client):
    registered = _register(client)
    assert registered.status_code == 200
    user_id = registered.json()["payload"]["id"]
    assert uuid.UUID(user_id)

    login = client.post(LOGIN_URL, json={"email": "alice@gmail.com", "password": "password123"})
    assert login.status_code == 200
    payload = login.json()["payload"]
    assert set(payload) == {"accessToken"}

    me = client.get(ME_URL, headers=auth_headers(payload["accessToken"]))
    assert me.status_code == 200
    body = me.json()["payload"]
    assert body["id"] == user_id
    assert body["email"] == "alice@gmail.com"
    assert body["role_name"] == "user"
    assert "password" not in body


def test_register_duplicate_email_returns_null_id(client):
    _register(client)

    response = _register(client, name="Someone Else")

    assert response.status_code == 200
    assert response.json() == {"payload": {"id": None}}


def test_register_duplicate_email_conflict_when_enabled(settings):
    settings = settings.model_copy(update={"register_conflict_on_duplicate": True})
    with TestClient(create_app(settings)) as client:
        _register(client)
        response = _register(client)

    assert response.status_code == 409
    assert response.json()["payload"]["error"]["code"] == "USER_EMAIL_ALREADY_EXISTS"


def test_register_validation_lists_fields(client):
    response = client.post(REGISTER_URL, json={"name": "", "email": "nope", "password": "short"})

    assert response.status_code == 422
    error = response.json()["payload"]["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert {item["field"] for item in error["fields"]} == {"name", "email", "password"}


def test_register_rejects_missing_body(client):
    response = client.post(REGISTER_URL)
    assert response.status_code == 422


def test_login_unknown_email(client):
    response = client.post(LOGIN_URL, json={"email": "nobody@gmail.com", "password": "password123"})

    assert response.status_code == 404
    assert response.json()["payload"]["error"]["code"] == "EMAIL_NOT_FOUND"


def test_login_wrong_password(client, settings):
    seed_user(settings, "Alice", "alice@gmail.com", password="password123")

    response = client.post(LOGIN_URL, json={"email": "alice@gmail.com", "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["payload"]["error"]["code"] == "CREDENTIALS_NOT_MATCH"


def test_login_token_carries_role(client, settings):
    seed_user(settings, "Root", "root@gmail.com", password="password123", role=Role.SUPER_ADMIN)

    login = client.post(LOGIN_URL, json={"email": "root@gmail.com", "password": "password123"})
    token = login.json()["payload"]["accessToken"]

    stats = client.get("/api/v1/users/stats", headers=auth_headers(token))
    assert stats.status_code == 200


def test_me_requires_token(client):
    response = client.get(ME_URL)

    assert response.status_code == 401
    assert response.json()["payload"]["error"]["code"] == "NO_BEARER_TOKEN"


def test_me_for_unknown_user(client):
    response = client.get(ME_URL, headers=auth_headers(create_test_token(uuid.uuid4())))

    assert response.status_code == 404
    assert response.json()["payload"]["error"]["code"] == "USER_NOT_FOUND"


def test_login_with_password_padded_by_spaces(client):
    body = {"name": "Alice", "email": "alice@gmail.com", "password": "  password1  "}
    assert client.post(REGISTER_URL, json=body).json()["payload"]["id"] is not None

    response = client.post(LOGIN_URL, json={"email": body["email"], "password": body["password"]})

    assert response.status_code == 200
    assert response.json()["payload"]["accessToken"]


def test_register_multibyte_password_over_byte_limit(client):
    response = _register(client, password="é" * 100)

    assert response.status_code == 422
    error = response.json()["payload"]["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert [item["field"] for item in error["fields"]] == ["password"]


def test_register_multibyte_password_within_byte_limit(client):
    password = "é" * 64
    assert _register(client, password=password).status_code == 200

    response = client.post(LOGIN_URL, json={"email": "alice@gmail.com", "password": password})
    assert response.status_code == 200
