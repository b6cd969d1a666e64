"""Tests for user domain router."""

import uuid
from datetime import datetime
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from userbase.user.models import User


@pytest.fixture(name="registered")
def registered_fixture(client: TestClient, registration: dict) -> dict:
    response = client.post("/users/register", json=registration)
    assert response.status_code == 201
    return response.json()


# --- POST /users/register ---


def test_register(client: TestClient, registration: dict, session: Session):
    with patch("userbase.user.router.send_welcome_email") as mock_send:
        response = client.post("/users/register", json=registration)

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "jane.doe@example.com"
    assert data["is_active"] is True
    assert data["created_at"].endswith("Z")
    assert "password_hash" not in data
    assert "is_deleted" not in data
    mock_send.assert_called_once_with("jane.doe@example.com", "Jane")

    user = session.get(User, uuid.UUID(data["id"]))
    assert user is not None
    assert user.password_hash.startswith("$argon2")


def test_register_succeeds_when_welcome_email_fails(client, registration):
    with patch(
        "userbase.user.router.send_welcome_email",
        side_effect=RuntimeError("mail provider down"),
    ):
        response = client.post("/users/register", json=registration)

    assert response.status_code == 201


def test_register_duplicate_email(client, registration, registered):
    response = client.post(
        "/users/register",
        json={**registration, "phone_number": None, "email": "JANE.DOE@example.com"},
    )

    assert response.status_code == 409
    assert response.json() == {
        "type": "conflict",
        "code": "EMAIL_TAKEN",
        "message": "Email already registered",
    }


def test_register_weak_password(client, registration):
    response = client.post(
        "/users/register", json={**registration, "password": "abcdefghij"}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "PASSWORD_POLICY"
    assert len(body["details"]) == 3


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("email", "not-an-email"),
        ("first_name", "J"),
        ("last_name", "D0e"),
        ("phone_number", "+15551234567"),
    ],
)
def test_register_rejects_malformed_fields(client, registration, field, value):
    response = client.post("/users/register", json={**registration, field: value})

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "REQUEST_VALIDATION_ERROR"
    assert body["details"][0]["field"] == field


def test_register_underage(client, registration):
    response = client.post(
        "/users/register", json={**registration, "date_of_birth": "2020-01-01"}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "UNDERAGE"


# --- GET /users, GET /users/search ---


def test_list_users(client, registered):
    response = client.get("/users")

    assert response.status_code == 200
    body = response.json()
    assert [user["id"] for user in body["data"]] == [registered["id"]]
    assert body["pagination"] == {
        "page": 1,
        "limit": 10,
        "total_items": 1,
        "total_pages": 1,
        "has_next_page": False,
        "has_prev_page": False,
    }


def test_list_users_limit_capped(client):
    response = client.get("/users", params={"limit": 101})

    assert response.status_code == 422


def test_list_users_invalid_sort_field(client):
    response = client.get("/users", params={"sort_by": "password_hash"})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_SORT_FIELD"


def test_search_users(client, registered):
    hit = client.get("/users/search", params={"q": "DOE"})
    miss = client.get("/users/search", params={"q": "nobody"})

    assert hit.status_code == 200
    assert hit.json()["pagination"]["total_items"] == 1
    assert miss.json()["data"] == []


def test_search_users_by_status(client, registered):
    response = client.get("/users/search", params={"is_active": "false"})

    assert response.status_code == 200
    assert response.json()["pagination"]["total_items"] == 0


# --- GET/PUT /users/{id} ---


def test_get_user(client, registered):
    response = client.get(f"/users/{registered['id']}")

    assert response.status_code == 200
    assert response.json() == registered


def test_get_user_not_found(client):
    response = client.get(f"/users/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["code"] == "USER_NOT_FOUND"


def test_get_user_invalid_id(client):
    response = client.get("/users/not-a-uuid")

    assert response.status_code == 422


def test_update_user(client, registered):
    response = client.put(
        f"/users/{registered['id']}", json={"first_name": "Janet", "display_name": "JJ"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["first_name"] == "Janet"
    assert data["display_name"] == "JJ"
    assert data["last_name"] == registered["last_name"]
    assert datetime.fromisoformat(data["updated_at"]) > datetime.fromisoformat(
        registered["updated_at"]
    )


def test_update_user_ignores_unknown_fields(client, registered):
    response = client.put(
        f"/users/{registered['id']}",
        json={"email": "hacker@example.com", "password_hash": "x"},
    )

    assert response.status_code == 200
    assert response.json()["email"] == registered["email"]


# --- PUT /users/{id}/password ---


def test_change_password(client, registered, registration):
    response = client.put(
        f"/users/{registered['id']}/password",
        json={
            "current_password": registration["password"],
            "new_password": "Zyxwvu987?",
            "confirm_password": "Zyxwvu987?",
        },
    )

    assert response.status_code == 204


def test_change_password_wrong_current(client, registered):
    response = client.put(
        f"/users/{registered['id']}/password",
        json={
            "current_password": "Wrong-pass1",
            "new_password": "Zyxwvu987?",
            "confirm_password": "Zyxwvu987?",
        },
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INCORRECT_PASSWORD"


# --- DELETE /users/{id}, POST /users/{id}/restore ---


def test_delete_and_restore(client, registered):
    user_path = f"/users/{registered['id']}"

    assert client.delete(user_path).status_code == 204
    assert client.get(user_path).status_code == 404
    assert client.delete(user_path).status_code == 404

    response = client.post(f"{user_path}/restore")

    assert response.status_code == 200
    assert response.json()["id"] == registered["id"]
    assert client.get(user_path).status_code == 200


def test_register_over_deleted_account(client, registration, registered):
    client.delete(f"/users/{registered['id']}")

    response = client.post("/users/register", json=registration)

    assert response.status_code == 409
    assert response.json()["code"] == "DELETED_EMAIL_EXISTS"


def test_restore_active_user(client, registered):
    response = client.post(f"/users/{registered['id']}/restore")

    assert response.status_code == 400
    assert response.json()["code"] == "USER_NOT_DELETED"


def test_restore_missing_user(client):
    response = client.post(f"/users/{uuid.uuid4()}/restore")

    assert response.status_code == 404


# --- /users/{id}/roles ---


def test_assign_and_get_roles(client, registered):
    role = client.post(
        "/roles", json={"name": "editor", "permissions": ["write:all"]}
    ).json()

    response = client.put(
        f"/users/{registered['id']}/roles", json={"role_ids": [role["id"]]}
    )

    assert response.status_code == 200
    assert [r["name"] for r in response.json()] == ["editor"]
    assert client.get(f"/users/{registered['id']}/roles").json() == response.json()


def test_assign_unknown_role(client, registered):
    missing = str(uuid.uuid4())

    response = client.put(
        f"/users/{registered['id']}/roles", json={"role_ids": [missing]}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_ROLE_IDS"
    assert body["details"] == [missing]
