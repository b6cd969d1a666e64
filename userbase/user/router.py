"""User domain router.

Registration, profile management, soft-delete lifecycle and role assignment.
"""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from userbase.core.constants import CommonResponses, Routes
from userbase.core.deps import RoleServiceDep, UserServiceDep
from userbase.core.email import send_welcome_email
from userbase.core.pagination import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_PAGE_LIMIT,
    Page,
    PaginationOptions,
    SortOrder,
)
from userbase.role.schemas import RoleRead
from userbase.user.exceptions import UserNotFoundError
from userbase.user.schemas import (
    AssignRolesRequest,
    ChangePasswordRequest,
    UserRead,
    UserRegister,
    UserSearchCriteria,
    UserUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=Routes.USER.prefix, tags=[Routes.USER.tag])


def pagination_params(
    page: Annotated[int, Query(ge=1)] = DEFAULT_PAGE,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_LIMIT)] = DEFAULT_LIMIT,
    sort_by: str = "created_at",
    sort_order: SortOrder = SortOrder.desc,
) -> PaginationOptions:
    return PaginationOptions(
        page=page, limit=limit, sort_by=sort_by, sort_order=sort_order
    )


PaginationDep = Annotated[PaginationOptions, Depends(pagination_params)]


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.BAD_REQUEST, **CommonResponses.CONFLICT},
)
async def register(data: UserRegister, users: UserServiceDep):
    """Register a new user."""
    user = await users.register(data)

    # Best-effort: log failures but don't fail registration
    try:
        send_welcome_email(user.email, user.display_name or user.first_name)
    except Exception as e:
        logger.warning(
            "Welcome email failed for user %s: %s",
            user.id,
            str(e),
            extra={"user_id": user.id},
        )

    return user


@router.get(
    "/search",
    response_model=Page[UserRead],
    responses={**CommonResponses.BAD_REQUEST},
)
async def search_users(
    criteria: Annotated[UserSearchCriteria, Query()],
    pagination: PaginationDep,
    users: UserServiceDep,
):
    """Search non-deleted users by name, email, phone or status."""
    return await users.search(criteria, pagination)


@router.get(
    "",
    response_model=Page[UserRead],
    responses={**CommonResponses.BAD_REQUEST},
)
async def list_users(
    pagination: PaginationDep,
    users: UserServiceDep,
    is_active: bool | None = None,
):
    """List non-deleted users."""
    return await users.list_users(pagination, is_active=is_active)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def get_user(user_id: uuid.UUID, users: UserServiceDep):
    return await users.find_by_id(user_id)


@router.put(
    "/{user_id}",
    response_model=UserRead,
    responses={
        **CommonResponses.NOT_FOUND,
        **CommonResponses.CONFLICT,
        **CommonResponses.BAD_REQUEST,
    },
)
async def update_user(user_id: uuid.UUID, data: UserUpdate, users: UserServiceDep):
    """Update a user's profile. Only fields present in the body change."""
    return await users.update(user_id, data)


@router.put(
    "/{user_id}/password",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
)
async def change_password(
    user_id: uuid.UUID, data: ChangePasswordRequest, users: UserServiceDep
):
    await users.change_password(user_id, data)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**CommonResponses.NOT_FOUND},
)
async def delete_user(user_id: uuid.UUID, users: UserServiceDep):
    """Soft-delete a user. The record is kept and can be restored."""
    if not await users.soft_delete(user_id):
        raise UserNotFoundError()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{user_id}/restore",
    response_model=UserRead,
    responses={
        **CommonResponses.NOT_FOUND,
        **CommonResponses.CONFLICT,
        **CommonResponses.BAD_REQUEST,
    },
)
async def restore_user(user_id: uuid.UUID, users: UserServiceDep):
    """Restore a soft-deleted user."""
    return await users.restore(user_id)


@router.get(
    "/{user_id}/roles",
    response_model=list[RoleRead],
    responses={**CommonResponses.NOT_FOUND},
)
async def get_user_roles(user_id: uuid.UUID, roles: RoleServiceDep):
    return await roles.get_user_roles(user_id)


@router.put(
    "/{user_id}/roles",
    response_model=list[RoleRead],
    responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
)
async def assign_user_roles(
    user_id: uuid.UUID, data: AssignRolesRequest, roles: RoleServiceDep
):
    """Replace the user's roles."""
    return await roles.assign_roles(user_id, data.role_ids)
