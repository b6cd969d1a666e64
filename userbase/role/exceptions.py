"""Role domain exceptions."""

import uuid
from collections.abc import Iterable

from userbase.core.exceptions import NotFoundError, ValidationError


class RoleNotFoundError(NotFoundError):
    """Raised when a role cannot be found."""

    error_type = "role_not_found"
    code = "ROLE_NOT_FOUND"

    def __init__(self, message: str = "Role not found"):
        super().__init__(message)


class RoleExistsError(ValidationError):
    """Raised when a role name is already taken."""

    code = "ROLE_EXISTS"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Role "{name}" already exists')


class InvalidRoleIdsError(ValidationError):
    """Raised when one or more role ids do not exist."""

    code = "INVALID_ROLE_IDS"

    def __init__(self, invalid_ids: Iterable[uuid.UUID]):
        self.invalid_ids = [str(role_id) for role_id in invalid_ids]
        super().__init__(
            f"Invalid role IDs: {', '.join(self.invalid_ids)}",
            details=self.invalid_ids,
        )
