"""User domain exceptions.

User-related exceptions for not found, conflict and validation scenarios.
"""

from typing import TYPE_CHECKING

from userbase.core.exceptions import ConflictError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from userbase.user.validators import FieldError


class UserNotFoundError(NotFoundError):
    """Raised when user cannot be found or has been deleted."""

    error_type = "user_not_found"
    code = "USER_NOT_FOUND"

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class UserConflictError(ConflictError):
    """Raised when a uniqueness validator rejects an email or phone number.

    The code is the failing validator's code (EMAIL_TAKEN, PHONE_TAKEN,
    DELETED_EMAIL_EXISTS, DELETED_PHONE_EXISTS).
    """

    def __init__(self, message: str, *, code: str, field: str | None = None):
        self.field = field
        super().__init__(message, code=code)

    @classmethod
    def from_field_error(cls, error: "FieldError") -> "UserConflictError":
        return cls(error.message, code=error.code, field=error.field)


class EmailExistsError(UserConflictError):
    """Raised when an active user already holds the email."""

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message, code="EMAIL_TAKEN", field="email")


class PhoneExistsError(UserConflictError):
    """Raised when an active user already holds the phone number."""

    def __init__(self, message: str = "Phone number already registered"):
        super().__init__(message, code="PHONE_TAKEN", field="phone_number")


class PasswordPolicyError(ValidationError):
    """Raised when password does not meet policy requirements."""

    error_type = "password_policy_error"
    code = "PASSWORD_POLICY"

    def __init__(
        self,
        message: str = "Password does not meet requirements",
        requirements: list[str] | None = None,
    ):
        self.requirements = requirements or []
        if requirements:
            message = f"{message}: {', '.join(requirements)}"
        super().__init__(message, details=self.requirements or None)


class IncorrectPasswordError(ValidationError):
    """Raised when the supplied current password does not match."""

    code = "INCORRECT_PASSWORD"

    def __init__(self, message: str = "Current password is incorrect"):
        super().__init__(message)


class UserNotDeletedError(ValidationError):
    """Raised when restoring a user that is not deleted."""

    code = "USER_NOT_DELETED"

    def __init__(self, message: str = "User is not deleted"):
        super().__init__(message)
