"""Role service.

Role lookup, creation and the assignment of roles to users.
"""

import logging
import uuid
from collections.abc import Sequence

from userbase.role.exceptions import (
    InvalidRoleIdsError,
    RoleExistsError,
    RoleNotFoundError,
)
from userbase.role.models import Role
from userbase.role.repository import RoleRepository
from userbase.role.schemas import RoleCreate, RoleRead, RoleUpdate
from userbase.user.exceptions import UserNotFoundError
from userbase.user.repository import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_ROLES: tuple[RoleCreate, ...] = (
    RoleCreate(
        name="admin",
        description="Administrator with full access",
        permissions=["*"],
    ),
    RoleCreate(
        name="user",
        description="Regular user",
        permissions=["read:own", "write:own"],
    ),
    RoleCreate(
        name="moderator",
        description="Content moderator",
        permissions=["read:all", "moderate"],
    ),
)


class RoleService:
    def __init__(self, repository: RoleRepository, users: UserRepository):
        self.repository = repository
        self.users = users

    async def get_all_roles(self) -> list[RoleRead]:
        return [RoleRead.model_validate(role) for role in self.repository.get_all()]

    async def find_by_id(self, role_id: uuid.UUID) -> RoleRead:
        role = self.repository.get_by_id(role_id)
        if role is None:
            raise RoleNotFoundError()
        return RoleRead.model_validate(role)

    async def create_role(self, data: RoleCreate) -> RoleRead:
        """Create a role.

        Raises:
            RoleExistsError: A role with the same name exists
        """
        name = data.name.strip()
        if self.repository.get_by_name(name) is not None:
            raise RoleExistsError(name)
        role = self.repository.create(
            Role(
                name=name,
                description=data.description,
                permissions=list(data.permissions),
            )
        )
        logger.info("Created role %s", role.name, extra={"role_id": role.id})
        return RoleRead.model_validate(role)

    async def update_role(self, role_id: uuid.UUID, data: RoleUpdate) -> RoleRead:
        role = self.repository.get_by_id(role_id)
        if role is None:
            raise RoleNotFoundError()

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in changes:
            changes["name"] = changes["name"].strip()
            existing = self.repository.get_by_name(changes["name"])
            if existing is not None and existing.id != role_id:
                raise RoleExistsError(changes["name"])
        if not changes:
            return RoleRead.model_validate(role)

        return RoleRead.model_validate(self.repository.update(role, changes))

    async def validate_role_ids(self, role_ids: Sequence[uuid.UUID]) -> None:
        """Raise InvalidRoleIdsError listing any ids with no matching role."""
        found = {role.id for role in self.repository.get_by_ids(role_ids)}
        invalid = [
            role_id for role_id in dict.fromkeys(role_ids) if role_id not in found
        ]
        if invalid:
            raise InvalidRoleIdsError(invalid)

    async def seed_default_roles(self) -> int:
        """Create the built-in roles that are missing. Returns how many were added."""
        created = 0
        for default in DEFAULT_ROLES:
            if self.repository.get_by_name(default.name) is None:
                await self.create_role(default)
                created += 1
        if created:
            logger.info("Seeded %d default roles", created)
        return created

    async def assign_roles(
        self, user_id: uuid.UUID, role_ids: Sequence[uuid.UUID]
    ) -> list[RoleRead]:
        """Replace the role set of an active user."""
        user = self.users.get_by_id(user_id)
        if user is None or user.is_deleted:
            raise UserNotFoundError()
        await self.validate_role_ids(role_ids)
        self.repository.set_user_roles(user_id, role_ids)
        logger.info(
            "Assigned %d roles to user %s",
            len(role_ids),
            user_id,
            extra={"user_id": user_id},
        )
        return await self.get_user_roles(user_id)

    async def get_user_roles(self, user_id: uuid.UUID) -> list[RoleRead]:
        user = self.users.get_by_id(user_id)
        if user is None or user.is_deleted:
            raise UserNotFoundError()
        return [
            RoleRead.model_validate(role)
            for role in self.repository.get_user_roles(user_id)
        ]
