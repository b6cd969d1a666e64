"""User domain models.

SQLModel table definitions for User and the user/role association.
"""

import uuid
from datetime import date

from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel

from userbase.core.mixins import SoftDeleteMixin, TimestampMixin


class UserRoleLink(SQLModel, table=True):
    """Association between users and the roles assigned to them."""

    __tablename__: str = "user_roles"

    user_id: uuid.UUID = Field(
        foreign_key="users.id", primary_key=True, ondelete="CASCADE"
    )
    role_id: uuid.UUID = Field(
        foreign_key="roles.id", primary_key=True, ondelete="CASCADE"
    )


class User(TimestampMixin, SoftDeleteMixin, SQLModel, table=True):
    """User database model.

    Note: password_hash is internal-only and must never be exposed in
    API responses.

    Email and phone number are unique among non-deleted users only. The
    partial unique indexes below are the backstop for the validator layer:
    a write that slips past the validators still fails with IntegrityError.
    """

    __tablename__: str = "users"
    __table_args__ = (
        Index(
            "uq_users_email_active",
            "email",
            unique=True,
            sqlite_where=text("NOT is_deleted"),
            postgresql_where=text("NOT is_deleted"),
        ),
        Index(
            "uq_users_phone_number_active",
            "phone_number",
            unique=True,
            sqlite_where=text("NOT is_deleted AND phone_number IS NOT NULL"),
            postgresql_where=text("NOT is_deleted AND phone_number IS NOT NULL"),
        ),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(index=True, max_length=255)
    password_hash: str = Field(max_length=255)
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    display_name: str | None = Field(default=None, max_length=100)
    phone_number: str | None = Field(default=None, index=True, max_length=20)
    date_of_birth: date | None = Field(default=None)
    is_active: bool = Field(default=True)
