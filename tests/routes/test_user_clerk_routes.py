from unittest.mock import MagicMock

from fastapi import HTTPException
import httpx
import pytest

from conftest import TEST_USER_ID
from controllers.user_clerk_controller import get_clerk_client
from main import app
from middleware.auth_middleware import get_current_user


def clerk_response(status_code, payload, method="PATCH"):
    request = httpx.Request(method, f"https://api.clerk.com/v1/users/{TEST_USER_ID}/metadata")
    return httpx.Response(status_code, json=payload, request=request)


@pytest.fixture
def clerk_client():
    clerk = MagicMock()
    app.dependency_overrides[get_clerk_client] = lambda: clerk
    return clerk


def test_update_user_sets_public_metadata(client, clerk_client):
    clerk_client.patch.return_value = clerk_response(200, {
        "id": TEST_USER_ID,
        "public_metadata": {"userType": "teacher"},
    })

    response = client.put(f"/users/clerk/{TEST_USER_ID}", json={"publicMetadata": {"userType": "teacher"}})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "User updated successfully"
    assert body["data"]["public_metadata"] == {"userType": "teacher"}
    clerk_client.patch.assert_called_once_with(
        f"/users/{TEST_USER_ID}/metadata",
        json={"public_metadata": {"userType": "teacher"}},
    )


def test_update_user_sends_settings(client, clerk_client):
    clerk_client.patch.return_value = clerk_response(200, {"id": TEST_USER_ID})

    response = client.put(
        f"/users/clerk/{TEST_USER_ID}",
        json={"publicMetadata": {"settings": {"theme": "dark", "courseNotifications": True}}},
    )

    assert response.status_code == 200
    sent = clerk_client.patch.call_args.kwargs["json"]["public_metadata"]
    assert sent == {"settings": {"theme": "dark", "courseNotifications": True}}


def test_update_another_user_is_forbidden(client, clerk_client):
    response = client.put("/users/clerk/someone_else", json={"publicMetadata": {"userType": "teacher"}})

    assert response.status_code == 403
    clerk_client.patch.assert_not_called()


def test_update_user_requires_session_token(client, clerk_client):
    app.dependency_overrides.pop(get_current_user)

    response = client.put(f"/users/clerk/{TEST_USER_ID}", json={"publicMetadata": {"userType": "teacher"}})

    assert response.status_code == 401
    clerk_client.patch.assert_not_called()


def test_update_user_clerk_rejection(client, clerk_client):
    clerk_client.patch.return_value = clerk_response(422, {"errors": [{"message": "invalid"}]})

    response = client.put(f"/users/clerk/{TEST_USER_ID}", json={"publicMetadata": {"userType": "teacher"}})

    assert response.status_code == 502


def test_update_user_clerk_unreachable(client, clerk_client):
    clerk_client.patch.side_effect = httpx.ConnectTimeout("timed out")

    response = client.put(f"/users/clerk/{TEST_USER_ID}", json={"publicMetadata": {"userType": "teacher"}})

    assert response.status_code == 502


def test_clerk_client_requires_secret_key(monkeypatch):
    monkeypatch.setattr("config.settings.CLERK_SECRET_KEY", None)

    with pytest.raises(HTTPException) as excinfo:
        next(get_clerk_client())

    assert excinfo.value.status_code == 500
