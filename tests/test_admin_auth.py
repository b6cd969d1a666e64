"""Tests for userbase/admin/auth.py - SQLAdmin authentication."""

from unittest.mock import MagicMock

import pytest

from userbase.admin.auth import AdminAuth
from userbase.core.settings import Settings


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        session_secret_key="test-secret-key",
        admin_username="root",
        admin_password="s3cret",
    )


@pytest.fixture
def admin_auth(settings):
    """Create AdminAuth instance."""
    return AdminAuth(settings)


@pytest.fixture
def mock_request():
    """Create a mock Starlette request with session."""
    request = MagicMock()
    request.session = {}
    return request


def _form(**fields):
    async def form():
        return fields

    return form


@pytest.mark.asyncio
async def test_admin_login_success(admin_auth, mock_request):
    mock_request.form = _form(username=" root ", password="s3cret")

    assert await admin_auth.login(mock_request) is True
    assert mock_request.session["admin_user"] == "root"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("username", "password"),
    [("root", "wrong"), ("intruder", "s3cret"), ("", "")],
)
async def test_admin_login_rejected(admin_auth, mock_request, username, password):
    mock_request.form = _form(username=username, password=password)

    assert await admin_auth.login(mock_request) is False
    assert "admin_user" not in mock_request.session


@pytest.mark.asyncio
async def test_admin_logout(admin_auth, mock_request):
    """Test AdminAuth.logout() clears session and returns True."""
    mock_request.session["admin_user"] = "root"
    mock_request.session["other_data"] = "test"

    assert await admin_auth.logout(mock_request) is True
    assert mock_request.session == {}


@pytest.mark.asyncio
async def test_admin_authenticate(admin_auth, mock_request):
    assert await admin_auth.authenticate(mock_request) is False

    mock_request.session["admin_user"] = "root"

    assert await admin_auth.authenticate(mock_request) is True
