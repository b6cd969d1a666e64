"""Date-of-birth parsing and age checks."""

from datetime import date, datetime

from userbase.core.exceptions import ValidationError


def parse_date_of_birth(value: str) -> date:
    """Parse an ISO date (or datetime) string into a date.

    Raises:
        ValidationError: If the value is not a valid ISO date
    """
    raw = value.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError as e:
        raise ValidationError(
            "Invalid date format", code="INVALID_DATE_OF_BIRTH"
        ) from e


def calculate_age(date_of_birth: date, today: date) -> int:
    """Age in whole years by calendar fields.

    The birthday counts once month and day are both reached, so a Feb 29
    birthday is reached on Mar 1 in non-leap years.
    """
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def check_minimum_age(date_of_birth: date, minimum_age: int, today: date) -> None:
    if calculate_age(date_of_birth, today) < minimum_age:
        raise ValidationError(
            f"You must be at least {minimum_age} years old to register",
            code="UNDERAGE",
        )
