"""Translate user search criteria into query conditions."""

from sqlalchemy import ColumnElement, or_
from sqlmodel import col

from userbase.user.models import User
from userbase.user.schemas import UserSearchCriteria


def active_users() -> ColumnElement[bool]:
    return col(User.is_deleted).is_(False)


def build_search_conditions(criteria: UserSearchCriteria) -> list[ColumnElement[bool]]:
    """Build AND-combined conditions for a search; deleted users never match.

    Text filters are case-insensitive substring matches. LIKE wildcards in the
    input are escaped and match literally.
    """
    conditions = [active_users()]

    q = (criteria.q or "").strip()
    if q:
        conditions.append(
            or_(
                col(User.first_name).icontains(q, autoescape=True),
                col(User.last_name).icontains(q, autoescape=True),
                col(User.email).icontains(q, autoescape=True),
                col(User.display_name).icontains(q, autoescape=True),
            )
        )

    email = (criteria.email or "").strip()
    if email:
        conditions.append(col(User.email).icontains(email, autoescape=True))

    phone = (criteria.phone or "").strip()
    if phone:
        conditions.append(col(User.phone_number).icontains(phone, autoescape=True))

    if criteria.is_active is not None:
        conditions.append(col(User.is_active).is_(criteria.is_active))

    return conditions
