"""Role domain models."""

import uuid

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from userbase.core.mixins import TimestampMixin


class Role(TimestampMixin, SQLModel, table=True):
    """A named permission bundle."""

    __tablename__: str = "roles"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True, unique=True, max_length=50)
    description: str = Field(default="", max_length=255)
    permissions: list[str] = Field(default_factory=list, sa_column=Column(JSON))
