"""Tests for the SQLAdmin model views."""

import pytest

from userbase.admin.views import RoleAdmin, UserAdmin


def _excluded(view) -> set[str]:
    return {column.key for column in view.form_excluded_columns}


@pytest.mark.parametrize(
    "column", ["email", "password_hash", "is_deleted", "deleted_at"]
)
def test_user_form_hides_service_managed_columns(column):
    assert column in _excluded(UserAdmin)


def test_user_form_keeps_profile_columns_editable():
    excluded = _excluded(UserAdmin)

    assert "first_name" not in excluded
    assert "is_active" not in excluded


def test_admin_cannot_remove_records():
    assert UserAdmin.can_delete is False
    assert UserAdmin.can_create is False
    assert RoleAdmin.can_delete is False
