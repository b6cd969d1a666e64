"""Role domain schemas."""

import uuid

from pydantic import BaseModel, Field


class RoleCreate(BaseModel):
    """Request schema for creating a role."""

    name: str = Field(min_length=1, max_length=50)
    description: str = Field(default="", max_length=255)
    permissions: list[str] = Field(default_factory=list)


class RoleUpdate(BaseModel):
    """Schema for a partial role update."""

    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=255)
    permissions: list[str] | None = None


class RoleRead(BaseModel):
    """Public projection of a role."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    name: str
    description: str
    permissions: list[str]
