"""User service.

Registration, profile update, password change and the soft-delete lifecycle.

Lifecycle states are Active (is_deleted=False) and Deleted (is_deleted=True).
Uniqueness of email and phone is checked on every edge that can produce an
active record: registration, phone change on update, and restore.
"""

import logging
import uuid
from collections.abc import Callable, Sequence
from datetime import date
from typing import Any

import anyio.to_thread
from sqlalchemy import ColumnElement

from userbase.core.exceptions import ValidationError
from userbase.core.mixins import utc_now
from userbase.core.pagination import Page, PaginationOptions
from userbase.core.security import PasswordHasherProtocol
from userbase.user.birthdate import check_minimum_age, parse_date_of_birth
from userbase.user.exceptions import (
    IncorrectPasswordError,
    PasswordPolicyError,
    UserConflictError,
    UserNotDeletedError,
    UserNotFoundError,
)
from userbase.user.models import User
from userbase.user.password_policy import validate_password
from userbase.user.repository import UserPage, UserRepository
from userbase.user.schemas import (
    ChangePasswordRequest,
    UserRead,
    UserRegister,
    UserSearchCriteria,
    UserUpdate,
)
from userbase.user.search import build_search_conditions
from userbase.user.validators import (
    EmailUniquenessValidator,
    PhoneUniquenessValidator,
    SoftDeleteBlockValidator,
    SoftDeleteCheckInput,
    ValidationResult,
    Validator,
    normalize_email,
)

logger = logging.getLogger(__name__)

DEFAULT_MINIMUM_AGE = 13


def _utc_today() -> date:
    return utc_now().date()


def _optional(value: str | None) -> str | None:
    """Trim a string; blank becomes None."""
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def _raise_on_failure(result: ValidationResult) -> None:
    error = result.first_error
    if not result.is_valid and error is not None:
        raise UserConflictError.from_field_error(error)


class UserService:
    """Orchestrates validators, password policy and persistence for users."""

    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasherProtocol,
        *,
        email_validator: Validator[str] | None = None,
        phone_validator: Validator[str | None] | None = None,
        soft_delete_validator: Validator[SoftDeleteCheckInput] | None = None,
        minimum_age: int = DEFAULT_MINIMUM_AGE,
        today: Callable[[], date] = _utc_today,
    ):
        self.repository = repository
        self.hasher = hasher
        self.email_validator = email_validator or EmailUniquenessValidator(repository)
        self.phone_validator = phone_validator or PhoneUniquenessValidator(repository)
        self.soft_delete_validator = soft_delete_validator or SoftDeleteBlockValidator(
            repository
        )
        self.minimum_age = minimum_age
        self.today = today

    def _parse_date_of_birth(self, value: str | None) -> date | None:
        if value is None or not value.strip():
            return None
        date_of_birth = parse_date_of_birth(value)
        check_minimum_age(date_of_birth, self.minimum_age, self.today())
        return date_of_birth

    # Argon2 is CPU-bound; run it on a worker thread to keep the loop free.
    async def _hash(self, plain: str) -> str:
        return await anyio.to_thread.run_sync(self.hasher.hash, plain)

    async def _verify(self, plain: str, digest: str) -> bool:
        return await anyio.to_thread.run_sync(self.hasher.verify, plain, digest)

    def _get_active(self, user_id: uuid.UUID) -> User:
        user = self.repository.get_by_id(user_id)
        if user is None or user.is_deleted:
            raise UserNotFoundError()
        return user

    async def register(self, data: UserRegister) -> UserRead:
        """Register a new user.

        Uniqueness validators run in order and the first failure aborts with a
        conflict. The password policy then reports every violation at once.

        Raises:
            UserConflictError: Email/phone taken, or held by a deleted account
            PasswordPolicyError: Password violates one or more rules
            ValidationError: Date of birth unparsable or under minimum age
        """
        email = normalize_email(data.email)
        phone_number = _optional(data.phone_number)

        _raise_on_failure(await self.email_validator.validate(email))
        _raise_on_failure(await self.phone_validator.validate(phone_number))
        _raise_on_failure(
            await self.soft_delete_validator.validate(
                SoftDeleteCheckInput(email=email, phone_number=phone_number)
            )
        )

        violations = validate_password(data.password, email, phone_number)
        if violations:
            raise PasswordPolicyError(requirements=violations)

        password_hash = await self._hash(data.password)
        date_of_birth = self._parse_date_of_birth(data.date_of_birth)

        user = self.repository.create(
            User(
                email=email,
                password_hash=password_hash,
                first_name=data.first_name.strip(),
                last_name=data.last_name.strip(),
                display_name=_optional(data.display_name),
                phone_number=phone_number,
                date_of_birth=date_of_birth,
                is_active=True,
                is_deleted=False,
            )
        )
        logger.info("Registered user %s", user.id, extra={"user_id": user.id})
        return UserRead.model_validate(user)

    async def find_by_id(self, user_id: uuid.UUID) -> UserRead:
        return UserRead.model_validate(self._get_active(user_id))

    async def find_by_email(self, email: str) -> UserRead:
        user = self.repository.find_by_email(normalize_email(email))
        if user is None:
            raise UserNotFoundError()
        return UserRead.model_validate(user)

    async def update(self, user_id: uuid.UUID, data: UserUpdate) -> UserRead:
        """Apply a partial profile update.

        Fields absent from the request keep their value. A changed phone
        number is checked for uniqueness among active users.

        Raises:
            UserNotFoundError: User absent, deleted, or deleted mid-update
            UserConflictError: New phone number already taken
        """
        user = self._get_active(user_id)
        supplied = data.model_dump(exclude_unset=True)
        changes: dict[str, Any] = {}

        for name in ("first_name", "last_name"):
            if supplied.get(name) is not None:
                changes[name] = supplied[name].strip()

        if "display_name" in supplied:
            changes["display_name"] = _optional(supplied["display_name"])

        if "phone_number" in supplied:
            phone_number = _optional(supplied["phone_number"])
            if phone_number != user.phone_number:
                _raise_on_failure(await self.phone_validator.validate(phone_number))
            changes["phone_number"] = phone_number

        if "date_of_birth" in supplied:
            changes["date_of_birth"] = self._parse_date_of_birth(
                supplied["date_of_birth"]
            )

        if supplied.get("is_active") is not None:
            changes["is_active"] = supplied["is_active"]

        if not changes:
            return UserRead.model_validate(user)

        updated = self.repository.update(user_id, changes)
        if updated is None:
            raise UserNotFoundError()
        logger.info(
            "Updated user %s fields=%s",
            user_id,
            sorted(changes),
            extra={"user_id": user_id},
        )
        return UserRead.model_validate(updated)

    async def change_password(
        self, user_id: uuid.UUID, data: ChangePasswordRequest
    ) -> None:
        """Replace a user's password after verifying the current one.

        Raises:
            ValidationError: Confirmation mismatch, unchanged password, wrong
                current password, or new password violating the policy
            UserNotFoundError: User absent or deleted
        """
        if data.new_password != data.confirm_password:
            raise ValidationError(
                "New password and confirmation do not match", code="PASSWORD_MISMATCH"
            )
        if data.new_password == data.current_password:
            raise ValidationError(
                "New password must be different from the current password",
                code="PASSWORD_REUSED",
            )

        user = self._get_active(user_id)
        if not await self._verify(data.current_password, user.password_hash):
            raise IncorrectPasswordError()

        violations = validate_password(data.new_password, user.email, user.phone_number)
        if violations:
            raise PasswordPolicyError(requirements=violations)

        password_hash = await self._hash(data.new_password)
        if not self.repository.update_password(user_id, password_hash):
            raise UserNotFoundError()
        logger.info("Changed password for user %s", user_id, extra={"user_id": user_id})

    async def soft_delete(self, user_id: uuid.UUID) -> bool:
        """Move an active user to Deleted.

        Returns False, without raising, when the user is absent or already
        deleted.
        """
        deleted = self.repository.soft_delete(user_id)
        if deleted:
            logger.info("Soft-deleted user %s", user_id, extra={"user_id": user_id})
        return deleted

    async def restore(self, user_id: uuid.UUID) -> UserRead:
        """Move a deleted user back to Active.

        The stored email and phone are re-checked against active users, so a
        restore cannot produce a duplicate of an identity claimed while the
        account was deleted.

        Raises:
            UserNotFoundError: User absent
            UserNotDeletedError: User is not deleted
            UserConflictError: Email or phone now held by another active user
        """
        user = self.repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        if not user.is_deleted:
            raise UserNotDeletedError()

        _raise_on_failure(await self.email_validator.validate(user.email))
        if user.phone_number:
            _raise_on_failure(await self.phone_validator.validate(user.phone_number))

        restored = self.repository.restore(user_id)
        if restored is None:
            # State changed between the read and the conditional write.
            if self.repository.get_by_id(user_id) is None:
                raise UserNotFoundError()
            raise UserNotDeletedError()

        logger.info("Restored user %s", user_id, extra={"user_id": user_id})
        return UserRead.model_validate(restored)

    @staticmethod
    def _to_page(page: UserPage) -> Page[UserRead]:
        return Page[UserRead](
            data=[UserRead.model_validate(user) for user in page.items],
            pagination=page.pagination,
        )

    async def find_all_paginated(
        self,
        conditions: Sequence[ColumnElement[bool]],
        options: PaginationOptions,
    ) -> Page[UserRead]:
        return self._to_page(self.repository.find_all_paginated(conditions, options))

    async def list_users(
        self, options: PaginationOptions, is_active: bool | None = None
    ) -> Page[UserRead]:
        """Page through non-deleted users."""
        return await self.search(UserSearchCriteria(is_active=is_active), options)

    async def search(
        self, criteria: UserSearchCriteria, options: PaginationOptions
    ) -> Page[UserRead]:
        return await self.find_all_paginated(build_search_conditions(criteria), options)


