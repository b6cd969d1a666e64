"""User persistence.

``UserRepository`` is the capability set the user service depends on;
``SqlUserRepository`` implements it on a SQLModel session.

Writes that change lifecycle state are conditional UPDATE statements that
re-check ``is_deleted`` at write time, so a request racing a concurrent
soft-delete or restore sees "no row matched" instead of overwriting it.
"""

import logging
import uuid
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Protocol

from sqlalchemy import ColumnElement, func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from userbase.core.exceptions import ValidationError
from userbase.core.mixins import utc_now
from userbase.core.pagination import (
    PaginationMeta,
    PaginationOptions,
    SortOrder,
    build_pagination_meta,
)
from userbase.user.exceptions import EmailExistsError, PhoneExistsError
from userbase.user.models import User

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = frozenset(
    {"created_at", "updated_at", "email", "first_name", "last_name", "display_name"}
)


@dataclass(frozen=True)
class UserPage:
    """A page of user records."""

    items: list[User]
    pagination: PaginationMeta


class UserRepository(Protocol):
    """Storage operations required by the user service."""

    def get_by_id(self, user_id: uuid.UUID) -> User | None: ...

    def find_by_email(self, email: str) -> User | None: ...

    def find_by_phone(self, phone_number: str) -> User | None: ...

    def exists_by_email(self, email: str) -> bool: ...

    def exists_by_phone(self, phone_number: str) -> bool: ...

    def exists_deleted_by_email(self, email: str) -> bool: ...

    def exists_deleted_by_phone(self, phone_number: str) -> bool: ...

    def create(self, user: User) -> User: ...

    def update(self, user_id: uuid.UUID, changes: dict[str, Any]) -> User | None: ...

    def update_password(self, user_id: uuid.UUID, password_hash: str) -> bool: ...

    def soft_delete(self, user_id: uuid.UUID) -> bool: ...

    def restore(self, user_id: uuid.UUID) -> User | None: ...

    def find_all_paginated(
        self,
        conditions: Sequence[ColumnElement[bool]],
        options: PaginationOptions,
    ) -> UserPage: ...


def _translate_integrity_error(
    error: IntegrityError,
) -> EmailExistsError | PhoneExistsError | IntegrityError:
    """Map a unique-index violation to the matching conflict error."""
    detail = str(error.orig).lower()
    if "phone_number" in detail:
        return PhoneExistsError()
    if "email" in detail:
        return EmailExistsError()
    return error


class SqlUserRepository:
    """UserRepository backed by a SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, user_id: uuid.UUID) -> User | None:
        return self.session.get(User, user_id, populate_existing=True)

    def find_by_email(self, email: str) -> User | None:
        return self.session.exec(
            select(User).where(
                User.email == email.lower(), col(User.is_deleted).is_(False)
            )
        ).first()

    def find_by_phone(self, phone_number: str) -> User | None:
        return self.session.exec(
            select(User).where(
                User.phone_number == phone_number, col(User.is_deleted).is_(False)
            )
        ).first()

    def _exists(self, *conditions: ColumnElement[bool]) -> bool:
        statement = select(User.id).where(*conditions).limit(1)
        return self.session.exec(statement).first() is not None

    def exists_by_email(self, email: str) -> bool:
        return self._exists(
            User.email == email.lower(), col(User.is_deleted).is_(False)
        )

    def exists_by_phone(self, phone_number: str) -> bool:
        return self._exists(
            User.phone_number == phone_number, col(User.is_deleted).is_(False)
        )

    def exists_deleted_by_email(self, email: str) -> bool:
        return self._exists(
            User.email == email.lower(), col(User.is_deleted).is_(True)
        )

    def exists_deleted_by_phone(self, phone_number: str) -> bool:
        return self._exists(
            User.phone_number == phone_number, col(User.is_deleted).is_(True)
        )

    @contextmanager
    def _unique_violations_as_conflicts(self) -> Iterator[None]:
        try:
            yield
        except IntegrityError as e:
            self.session.rollback()
            translated = _translate_integrity_error(e)
            if translated is e:
                raise
            logger.info("Unique index rejected user write: %s", translated.code)
            raise translated from e

    def create(self, user: User) -> User:
        with self._unique_violations_as_conflicts():
            self.session.add(user)
            self.session.commit()
        self.session.refresh(user)
        return user

    def _conditional_update(
        self, user_id: uuid.UUID, deleted: bool, values: dict[str, Any]
    ) -> bool:
        """Apply values if the row exists and is_deleted equals ``deleted``."""
        statement = (
            update(User)
            .where(col(User.id) == user_id, col(User.is_deleted).is_(deleted))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with self._unique_violations_as_conflicts():
            result = self.session.exec(statement)  # type: ignore[call-overload]
            matched = result.rowcount == 1
            self.session.commit()
        return matched

    def update(self, user_id: uuid.UUID, changes: dict[str, Any]) -> User | None:
        """Apply a partial update to an active user; None if no active row matched."""
        unknown = set(changes) - set(User.model_fields)
        if unknown:
            raise ValidationError(f"Unknown user fields: {', '.join(sorted(unknown))}")
        values = {**changes, "updated_at": utc_now()}
        if not self._conditional_update(user_id, False, values):
            return None
        return self.get_by_id(user_id)

    def update_password(self, user_id: uuid.UUID, password_hash: str) -> bool:
        return self._conditional_update(
            user_id, False, {"password_hash": password_hash, "updated_at": utc_now()}
        )

    def soft_delete(self, user_id: uuid.UUID) -> bool:
        """Mark an active user deleted. False if absent or already deleted."""
        now = utc_now()
        return self._conditional_update(
            user_id, False, {"is_deleted": True, "deleted_at": now, "updated_at": now}
        )

    def restore(self, user_id: uuid.UUID) -> User | None:
        """Clear the deleted flag. None if absent or not deleted."""
        values = {"is_deleted": False, "deleted_at": None, "updated_at": utc_now()}
        if not self._conditional_update(user_id, True, values):
            return None
        return self.get_by_id(user_id)

    def find_all_paginated(
        self,
        conditions: Sequence[ColumnElement[bool]],
        options: PaginationOptions,
    ) -> UserPage:
        if options.sort_by not in SORTABLE_FIELDS:
            raise ValidationError(
                f"Cannot sort by '{options.sort_by}'",
                code="INVALID_SORT_FIELD",
            )
        sort_column = col(getattr(User, options.sort_by))
        if options.sort_order == SortOrder.asc:
            order = sort_column.asc()
        else:
            order = sort_column.desc()

        total_items = self.session.exec(
            select(func.count()).select_from(User).where(*conditions)
        ).one()
        items = self.session.exec(
            select(User)
            .where(*conditions)
            .order_by(order, col(User.id))
            .offset(options.offset)
            .limit(options.limit)
        ).all()

        return UserPage(
            items=list(items),
            pagination=build_pagination_meta(options.page, options.limit, total_items),
        )
