"""Role persistence."""

import logging
import uuid
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any, Protocol

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from userbase.core.mixins import utc_now
from userbase.role.exceptions import RoleExistsError
from userbase.role.models import Role
from userbase.user.models import UserRoleLink

logger = logging.getLogger(__name__)


class RoleRepository(Protocol):
    """Storage operations required by the role service."""

    def get_all(self) -> list[Role]: ...

    def get_by_id(self, role_id: uuid.UUID) -> Role | None: ...

    def get_by_name(self, name: str) -> Role | None: ...

    def get_by_ids(self, role_ids: Sequence[uuid.UUID]) -> list[Role]: ...

    def create(self, role: Role) -> Role: ...

    def update(self, role: Role, changes: dict[str, Any]) -> Role: ...

    def get_user_roles(self, user_id: uuid.UUID) -> list[Role]: ...

    def set_user_roles(
        self, user_id: uuid.UUID, role_ids: Sequence[uuid.UUID]
    ) -> None: ...


class SqlRoleRepository:
    """RoleRepository backed by a SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def get_all(self) -> list[Role]:
        return list(self.session.exec(select(Role).order_by(col(Role.name))).all())

    def get_by_id(self, role_id: uuid.UUID) -> Role | None:
        return self.session.get(Role, role_id)

    def get_by_name(self, name: str) -> Role | None:
        return self.session.exec(select(Role).where(Role.name == name)).first()

    def get_by_ids(self, role_ids: Sequence[uuid.UUID]) -> list[Role]:
        if not role_ids:
            return []
        return list(
            self.session.exec(select(Role).where(col(Role.id).in_(role_ids))).all()
        )

    @contextmanager
    def _name_conflicts_as_errors(self, name: str) -> Iterator[None]:
        """Raise RoleExistsError when the unique name index rejects a write."""
        try:
            yield
        except IntegrityError as e:
            self.session.rollback()
            logger.info("Unique index rejected role name %r", name)
            raise RoleExistsError(name) from e

    def create(self, role: Role) -> Role:
        with self._name_conflicts_as_errors(role.name):
            self.session.add(role)
            self.session.commit()
        self.session.refresh(role)
        return role

    def update(self, role: Role, changes: dict[str, Any]) -> Role:
        for key, value in changes.items():
            setattr(role, key, value)
        role.updated_at = utc_now()
        with self._name_conflicts_as_errors(role.name):
            self.session.add(role)
            self.session.commit()
        self.session.refresh(role)
        return role

    def get_user_roles(self, user_id: uuid.UUID) -> list[Role]:
        statement = (
            select(Role)
            .join(UserRoleLink, col(UserRoleLink.role_id) == col(Role.id))
            .where(UserRoleLink.user_id == user_id)
            .order_by(col(Role.name))
        )
        return list(self.session.exec(statement).all())

    def set_user_roles(
        self, user_id: uuid.UUID, role_ids: Sequence[uuid.UUID]
    ) -> None:
        """Replace the user's role set in one transaction."""
        self.session.exec(  # type: ignore[call-overload]
            delete(UserRoleLink).where(col(UserRoleLink.user_id) == user_id)
        )
        for role_id in dict.fromkeys(role_ids):
            self.session.add(UserRoleLink(user_id=user_id, role_id=role_id))
        self.session.commit()
