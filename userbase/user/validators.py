"""Uniqueness validators for registration, update and restore.

Each validator answers a single question against the repository and reports
the outcome as a ValidationResult instead of raising. Callers decide how to
combine results; the registration pipeline stops at the first failure.

Validators never mutate state and hold no locks. Two requests can both pass
the same check; the partial unique indexes on the users table are what
finally reject the second write.
"""

from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from userbase.user.repository import UserRepository

T_contra = TypeVar("T_contra", contravariant=True)


@dataclass(frozen=True)
class FieldError:
    """A single failed check."""

    field: str
    message: str
    code: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validator run."""

    is_valid: bool
    errors: tuple[FieldError, ...] = field(default_factory=tuple)

    @property
    def first_error(self) -> FieldError | None:
        return self.errors[0] if self.errors else None


def valid_result() -> ValidationResult:
    return ValidationResult(is_valid=True)


def invalid_result(field: str, message: str, code: str) -> ValidationResult:
    return ValidationResult(is_valid=False, errors=(FieldError(field, message, code),))


def normalize_email(email: str) -> str:
    """Lowercase and trim an email address."""
    return email.strip().lower()


class Validator(Protocol[T_contra]):
    """Anything that can validate a value against current repository state."""

    async def validate(self, data: T_contra) -> ValidationResult: ...


class EmailUniquenessValidator:
    """Rejects an email already held by an active user."""

    def __init__(self, repository: UserRepository):
        self._repository = repository

    async def validate(self, data: str) -> ValidationResult:
        if self._repository.exists_by_email(normalize_email(data)):
            return invalid_result("email", "Email already registered", "EMAIL_TAKEN")
        return valid_result()


class PhoneUniquenessValidator:
    """Rejects a phone number already held by an active user.

    An absent phone number is always valid.
    """

    def __init__(self, repository: UserRepository):
        self._repository = repository

    async def validate(self, data: str | None) -> ValidationResult:
        if not data:
            return valid_result()
        if self._repository.exists_by_phone(data):
            return invalid_result(
                "phone_number", "Phone number already registered", "PHONE_TAKEN"
            )
        return valid_result()


@dataclass(frozen=True)
class SoftDeleteCheckInput:
    email: str
    phone_number: str | None = None


class SoftDeleteBlockValidator:
    """Rejects registration over an identity held by a soft-deleted user.

    Deleted accounts have to be restored by an admin; re-registering with the
    same email or phone is refused. The phone check only runs when the email
    check passed.
    """

    def __init__(self, repository: UserRepository):
        self._repository = repository

    async def validate(self, data: SoftDeleteCheckInput) -> ValidationResult:
        if self._repository.exists_deleted_by_email(normalize_email(data.email)):
            return invalid_result(
                "email",
                "An account with this email was previously deleted. "
                "Please contact an admin to restore it.",
                "DELETED_EMAIL_EXISTS",
            )

        if data.phone_number and self._repository.exists_deleted_by_phone(
            data.phone_number
        ):
            return invalid_result(
                "phone_number",
                "An account with this phone number was previously deleted. "
                "Please contact an admin to restore it.",
                "DELETED_PHONE_EXISTS",
            )

        return valid_result()
