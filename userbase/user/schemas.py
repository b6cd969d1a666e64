"""User domain schemas.

Request and response schemas for user operations.

Security notes:
- password_hash is internal-only, never exposed in responses
- UserRead is the only projection returned to callers; it omits the
  soft-delete bookkeeping (is_deleted, deleted_at)
"""

import re
import uuid
from datetime import UTC, date, datetime

from pydantic import BaseModel, EmailStr, Field, field_serializer, field_validator

NAME_PATTERN = re.compile(r"^[a-zA-Z\s\-']{2,50}$")

# Bangladesh mobile numbers in E.164 form: +8801[3-9]XXXXXXXX
PHONE_PATTERN = re.compile(r"^\+880(1[3-9])\d{8}$")


def _check_name(value: str | None) -> str | None:
    if value is None:
        return None
    if not NAME_PATTERN.match(value.strip()):
        raise ValueError(
            "must be 2-50 characters of letters, spaces, hyphens, and apostrophes"
        )
    return value


def _check_phone(value: str | None) -> str | None:
    if value is None or not value.strip():
        return value
    if not PHONE_PATTERN.match(value.strip()):
        raise ValueError("must be in Bangladesh E.164 format (+8801XXXXXXXXX)")
    return value


class UserRegister(BaseModel):
    """Request schema for user registration."""

    email: EmailStr
    password: str
    first_name: str
    last_name: str
    display_name: str | None = Field(default=None, max_length=100)
    phone_number: str | None = None
    date_of_birth: str | None = None

    validate_names = field_validator("first_name", "last_name")(_check_name)
    validate_phone = field_validator("phone_number")(_check_phone)


class UserUpdate(BaseModel):
    """Schema for a partial profile update.

    Only fields present in the request body are applied. An empty string for
    display_name or phone_number clears the value.
    """

    first_name: str | None = None
    last_name: str | None = None
    display_name: str | None = Field(default=None, max_length=100)
    phone_number: str | None = None
    date_of_birth: str | None = None
    is_active: bool | None = None

    validate_names = field_validator("first_name", "last_name")(_check_name)
    validate_phone = field_validator("phone_number")(_check_phone)


class ChangePasswordRequest(BaseModel):
    """Request schema for changing a user's password."""

    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1)
    confirm_password: str = Field(min_length=1)


class UserRead(BaseModel):
    """Public projection of a user record."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    display_name: str | None = None
    phone_number: str | None = None
    date_of_birth: date | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, value: datetime) -> str:
        """Format datetime as ISO 8601 string in UTC.

        Converts datetime to UTC timezone and formats with Z suffix
        (e.g. 2026-01-19T12:34:56.123456Z).
        """
        # Convert to UTC if timezone-aware, otherwise assume UTC
        if value.tzinfo is not None:
            utc_value = value.astimezone(UTC)
        else:
            # Naive datetime - SQLite drops tzinfo, values are stored in UTC
            utc_value = value.replace(tzinfo=UTC)

        return utc_value.isoformat().replace("+00:00", "Z")


class UserSearchCriteria(BaseModel):
    """Filters for user search. All filters are optional and AND-combined."""

    q: str | None = Field(default=None, description="Name, email or display name")
    email: str | None = Field(default=None, description="Partial email match")
    phone: str | None = Field(default=None, description="Partial phone match")
    is_active: bool | None = None


class AssignRolesRequest(BaseModel):
    """Request schema for replacing a user's roles."""

    role_ids: list[uuid.UUID]
