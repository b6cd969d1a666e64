"""Password policy.

``validate_password`` runs every rule and returns all violations, so a user
sees the complete list of problems in one response.
"""

import re

MIN_PASSWORD_LENGTH = 10

SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"

# Compared case-insensitively against the whole password.
COMMON_PASSWORDS = frozenset(
    {
        "password123",
        "password1234",
        "qwerty12345",
        "123456789a",
        "letmein123",
        "welcome123",
        "admin12345",
        "iloveyou123",
        "sunshine123",
        "princess123",
        "football123",
        "monkey12345",
        "shadow12345",
        "master12345",
        "dragon12345",
        "michael123",
        "jennifer123",
        "trustno123",
        "hunter12345",
        "password!23",
        "password@123",
        "abcd1234567",
        "qwertyuiop1",
        "1234567890!",
    }
)

_UPPERCASE = re.compile(r"[A-Z]")
_LOWERCASE = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile(f"[{re.escape(SPECIAL_CHARACTERS)}]")
_NON_DIGIT = re.compile(r"\D")


def _utf16_length(value: str) -> int:
    return len(value.encode("utf-16-le", "surrogatepass")) // 2


def validate_password(
    password: str,
    email: str | None = None,
    phone_number: str | None = None,
) -> list[str]:
    """Return the list of policy violations for a password (empty if valid).

    Length counts UTF-16 code units, so an emoji outside the Basic
    Multilingual Plane counts as two characters. Letter classes are ASCII
    only, so accented or non-Latin letters do not satisfy the
    uppercase/lowercase rules.
    """
    errors: list[str] = []

    if _utf16_length(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if not _UPPERCASE.search(password):
        errors.append("Password must contain at least one uppercase letter")

    if not _LOWERCASE.search(password):
        errors.append("Password must contain at least one lowercase letter")

    if not _DIGIT.search(password):
        errors.append("Password must contain at least one number")

    if not _SPECIAL.search(password):
        errors.append("Password must contain at least one special character")

    if email:
        local_part = email.split("@")[0].lower()
        if len(local_part) >= 3 and local_part in password.lower():
            errors.append("Password must not contain your email username")

    if phone_number:
        digits = _NON_DIGIT.sub("", phone_number)
        if len(digits) >= 6 and digits[-6:] in password:
            errors.append("Password must not contain digits from your phone number")

    if password.lower() in COMMON_PASSWORDS:
        errors.append("Password is too common, please choose a stronger password")

    return errors
