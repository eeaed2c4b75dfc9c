import uuid

import pytest

from app.core.roles import Role
from tests.conftest import auth_headers, create_test_token, seed_user

USERS_URL = "/api/v1/users"


@pytest.fixture
def admin_headers():
    return auth_headers(create_test_token(role=Role.ADMIN))


@pytest.fixture
def super_admin_headers():
    return auth_headers(create_test_token(role=Role.SUPER_ADMIN))


def _create(client, headers, name, role="user"):
    email = f"{name.lower()}@gmail.com"
    response = client.post(
        USERS_URL,
        json={"name": name, "email": email, "password": "password123", "role": role},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["payload"]["id"]


@pytest.mark.parametrize("role", [Role.USER, Role.PREMIUM])
def test_non_admins_are_forbidden(client, role):
    response = client.get(USERS_URL, headers=auth_headers(create_test_token(role=role)))

    assert response.status_code == 403
    assert response.json()["payload"]["error"]["code"] == "ROLE_CANT_ACCESS_RESOURCE"


def test_anonymous_is_unauthorized(client):
    assert client.get(USERS_URL).status_code == 401


def test_create_get_and_list(client, admin_headers):
    user_id = _create(client, admin_headers, "Alice", role="premium")
    _create(client, admin_headers, "Bob")

    fetched = client.get(f"{USERS_URL}/{user_id}", headers=admin_headers).json()["payload"]
    assert fetched["name"] == "Alice"
    assert fetched["role_name"] == "premium"

    listing = client.get(
        USERS_URL, params={"sort_by": "name", "order": "asc", "limit": 1}, headers=admin_headers
    ).json()["payload"]
    assert [user["name"] for user in listing["users"]] == ["Alice"]
    assert listing["meta"] == {"page": 1, "limit": 1, "total_data": 2, "total_page": 2}


def test_create_with_numeric_role(client, admin_headers):
    user_id = _create(client, admin_headers, "Alice", role=2)

    fetched = client.get(f"{USERS_URL}/{user_id}", headers=admin_headers).json()["payload"]
    assert fetched["role_name"] == "admin"


def test_create_duplicate_email(client, admin_headers, settings):
    seed_user(settings, "Alice", "alice@gmail.com")

    response = client.post(
        USERS_URL,
        json={"name": "Alice", "email": "alice@gmail.com", "password": "password123"},
        headers=admin_headers,
    )

    assert response.status_code == 409


@pytest.mark.parametrize(
    "params",
    [{"limit": 0}, {"limit": 101}, {"page": 0}, {"sort_by": "password"}, {"order": "sideways"}],
)
def test_list_rejects_bad_query(client, admin_headers, params):
    response = client.get(USERS_URL, params=params, headers=admin_headers)

    assert response.status_code == 422
    assert response.json()["payload"]["error"]["code"] == "VALIDATION_ERROR"


def test_get_unknown_user(client, admin_headers):
    response = client.get(f"{USERS_URL}/{uuid.uuid4()}", headers=admin_headers)
    assert response.status_code == 404


def test_update(client, admin_headers):
    user_id = _create(client, admin_headers, "Alice")

    response = client.patch(f"{USERS_URL}/{user_id}", json={"name": "Alicia"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"payload": {"id": user_id}}
    fetched = client.get(f"{USERS_URL}/{user_id}", headers=admin_headers).json()["payload"]
    assert fetched["name"] == "Alicia"


def test_soft_delete_restore_and_stats(client, admin_headers):
    alice = _create(client, admin_headers, "Alice")
    _create(client, admin_headers, "Bob")

    assert client.delete(f"{USERS_URL}/{alice}", headers=admin_headers).status_code == 200
    assert client.get(f"{USERS_URL}/{alice}", headers=admin_headers).status_code == 404

    stats = client.get(f"{USERS_URL}/stats", headers=admin_headers).json()["payload"]
    assert stats == {"total_users": 2, "total_non_deleted_users": 1, "total_deleted_users": 1}

    everyone = client.get(USERS_URL, params={"include_deleted": True}, headers=admin_headers)
    assert everyone.json()["payload"]["meta"]["total_data"] == 2

    assert client.post(f"{USERS_URL}/{alice}/restore", headers=admin_headers).status_code == 200
    assert client.get(f"{USERS_URL}/{alice}", headers=admin_headers).status_code == 200


def test_permanent_delete_requires_super_admin(client, admin_headers, super_admin_headers):
    user_id = _create(client, admin_headers, "Alice")

    forbidden = client.delete(f"{USERS_URL}/{user_id}/permanent", headers=admin_headers)
    assert forbidden.status_code == 403

    deleted = client.delete(f"{USERS_URL}/{user_id}/permanent", headers=super_admin_headers)
    assert deleted.status_code == 200

    again = client.delete(f"{USERS_URL}/{user_id}/permanent", headers=super_admin_headers)
    assert again.status_code == 404


def test_restore_conflicts_with_new_owner_of_email(client, admin_headers):
    first = _create(client, admin_headers, "Alice")
    assert client.delete(f"{USERS_URL}/{first}", headers=admin_headers).status_code == 200
    _create(client, admin_headers, "Alice")

    response = client.post(f"{USERS_URL}/{first}/restore", headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["payload"]["error"]["code"] == "USER_EMAIL_ALREADY_EXISTS"
