"""Role domain router."""

import uuid

from fastapi import APIRouter, status

from userbase.core.constants import CommonResponses, Routes
from userbase.core.deps import RoleServiceDep
from userbase.role.schemas import RoleCreate, RoleRead, RoleUpdate

router = APIRouter(prefix=Routes.ROLE.prefix, tags=[Routes.ROLE.tag])


@router.get("", response_model=list[RoleRead])
async def list_roles(roles: RoleServiceDep):
    return await roles.get_all_roles()


@router.post(
    "",
    response_model=RoleRead,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.BAD_REQUEST},
)
async def create_role(data: RoleCreate, roles: RoleServiceDep):
    """Create a role. Names are unique."""
    return await roles.create_role(data)


@router.get(
    "/{role_id}",
    response_model=RoleRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def get_role(role_id: uuid.UUID, roles: RoleServiceDep):
    return await roles.find_by_id(role_id)


@router.patch(
    "/{role_id}",
    response_model=RoleRead,
    responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
)
async def update_role(role_id: uuid.UUID, data: RoleUpdate, roles: RoleServiceDep):
    return await roles.update_role(role_id, data)
