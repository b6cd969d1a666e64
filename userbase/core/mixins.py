"""Reusable model mixins.

Provides common field patterns for SQLModel table definitions.
"""

from datetime import UTC, datetime

from sqlalchemy import text
from sqlmodel import Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps.

    updated_at is refreshed on every ORM flush and on Core UPDATE statements
    that do not set it explicitly.

    Usage:
        class MyModel(TimestampMixin, SQLModel, table=True):
            id: int = Field(primary_key=True)
            name: str
    """

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={
            "server_default": text("CURRENT_TIMESTAMP"),
            "onupdate": utc_now,
        },
    )


class SoftDeleteMixin:
    """Mixin for records that are flagged as deleted instead of removed.

    Queries over live records must filter on ``is_deleted``; unique indexes
    that should ignore deleted rows need a partial ``WHERE NOT is_deleted``.
    """

    is_deleted: bool = Field(default=False, index=True)
    deleted_at: datetime | None = Field(default=None)
