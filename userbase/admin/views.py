"""SQLAdmin views for users and roles."""

from sqladmin import ModelView

from userbase.role.models import Role
from userbase.user.models import User


class UserAdmin(ModelView, model=User):
    name = "User"
    name_plural = "Users"
    icon = "fa-solid fa-user"

    column_list = [
        User.email,
        User.first_name,
        User.last_name,
        User.phone_number,
        User.is_active,
        User.is_deleted,
        User.created_at,
        User.updated_at,
    ]
    column_details_exclude_list = [User.password_hash]
    # Email and lifecycle changes go through the service, which enforces
    # normalization and uniqueness.
    form_excluded_columns = [
        User.email,
        User.password_hash,
        User.is_deleted,
        User.deleted_at,
        User.created_at,
        User.updated_at,
    ]

    column_searchable_list = [
        User.email,
        User.first_name,
        User.last_name,
        User.phone_number,
    ]
    column_sortable_list = [
        User.email,
        User.first_name,
        User.last_name,
        User.created_at,
        User.updated_at,
    ]

    # Removal goes through the soft-delete endpoint.
    can_delete = False
    can_create = False


class RoleAdmin(ModelView, model=Role):
    name = "Role"
    name_plural = "Roles"
    icon = "fa-solid fa-shield"

    column_list = [Role.name, Role.description, Role.permissions, Role.created_at]
    column_searchable_list = [Role.name]
    column_sortable_list = [Role.name, Role.created_at]
    form_excluded_columns = [Role.created_at, Role.updated_at]
    can_delete = False
