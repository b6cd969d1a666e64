"""Centralized dependency type aliases for FastAPI routes.

Import all dependencies from this single module:
    from userbase.core.deps import SessionDep, SettingsDep, UserServiceDep
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from userbase.core.security import PasswordHasher, get_password_hasher
from userbase.core.settings import Settings, get_settings
from userbase.db.engine import get_session
from userbase.role.repository import SqlRoleRepository
from userbase.role.service import RoleService
from userbase.user.repository import SqlUserRepository
from userbase.user.service import UserService

# Database session
SessionDep = Annotated[Session, Depends(get_session)]

# Application settings
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Password hasher (argon2)
PasswordHasherDep = Annotated[PasswordHasher, Depends(get_password_hasher)]


def get_user_service(
    session: SessionDep, settings: SettingsDep, hasher: PasswordHasherDep
) -> UserService:
    """Build a UserService bound to the request's session."""
    return UserService(
        SqlUserRepository(session),
        hasher,
        minimum_age=settings.min_registration_age,
    )


def get_role_service(session: SessionDep) -> RoleService:
    return RoleService(SqlRoleRepository(session), SqlUserRepository(session))


UserServiceDep = Annotated[UserService, Depends(get_user_service)]

RoleServiceDep = Annotated[RoleService, Depends(get_role_service)]
