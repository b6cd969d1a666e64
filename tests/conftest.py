import inspect
import os
import uuid
from collections.abc import Sequence
from datetime import date
from typing import Any

# Settings are read at import time by userbase.main; these must be set first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SESSION_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "admin")
os.environ.setdefault("PASSWORD_HASH_TIME_COST", "1")
os.environ.setdefault("PASSWORD_HASH_MEMORY_COST", "1024")
os.environ.setdefault("LOG_REQUESTS", "false")

import anyio  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import ColumnElement  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

import userbase.models  # noqa: E402, F401
from userbase.core.pagination import PaginationOptions  # noqa: E402
from userbase.core.security import PasswordHasher  # noqa: E402
from userbase.db.engine import get_session  # noqa: E402
from userbase.main import app  # noqa: E402
from userbase.user.models import User  # noqa: E402
from userbase.user.repository import SqlUserRepository, UserPage  # noqa: E402
from userbase.user.service import UserService  # noqa: E402

# Registration fixtures are evaluated against this date.
TODAY = date(2026, 10, 19)

VALID_PASSWORD = "Abcdef123!"


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio.

    This avoids adding an external pytest-asyncio dependency.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


class InMemoryUserRepository:
    """Dict-backed stand-in for the lookups the validators perform."""

    def __init__(self, users: Sequence[User] = ()):
        self.users: dict[uuid.UUID, User] = {user.id: user for user in users}

    def add(self, **fields: Any) -> User:
        fields.setdefault("password_hash", "not-a-real-hash")
        fields.setdefault("first_name", "Test")
        fields.setdefault("last_name", "User")
        user = User(**fields)
        self.users[user.id] = user
        return user

    def _match(self, deleted: bool, **fields: Any) -> User | None:
        for user in self.users.values():
            if user.is_deleted != deleted:
                continue
            if all(getattr(user, key) == value for key, value in fields.items()):
                return user
        return None

    def get_by_id(self, user_id: uuid.UUID) -> User | None:
        return self.users.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        return self._match(False, email=email.lower())

    def find_by_phone(self, phone_number: str) -> User | None:
        return self._match(False, phone_number=phone_number)

    def exists_by_email(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def exists_by_phone(self, phone_number: str) -> bool:
        return self.find_by_phone(phone_number) is not None

    def exists_deleted_by_email(self, email: str) -> bool:
        return self._match(True, email=email.lower()) is not None

    def exists_deleted_by_phone(self, phone_number: str) -> bool:
        return self._match(True, phone_number=phone_number) is not None

    def create(self, user: User) -> User:
        self.users[user.id] = user
        return user

    def update(self, user_id: uuid.UUID, changes: dict[str, Any]) -> User | None:
        raise NotImplementedError

    def update_password(self, user_id: uuid.UUID, password_hash: str) -> bool:
        raise NotImplementedError

    def soft_delete(self, user_id: uuid.UUID) -> bool:
        raise NotImplementedError

    def restore(self, user_id: uuid.UUID) -> User | None:
        raise NotImplementedError

    def find_all_paginated(
        self,
        conditions: Sequence[ColumnElement[bool]],
        options: PaginationOptions,
    ) -> UserPage:
        raise NotImplementedError


@pytest.fixture(name="memory_repository")
def memory_repository_fixture():
    return InMemoryUserRepository()


@pytest.fixture(name="session")
def session_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture(name="hasher")
def hasher_fixture():
    """Argon2 hasher at minimum cost."""
    return PasswordHasher(time_cost=1, memory_cost=1024)


@pytest.fixture(name="user_repository")
def user_repository_fixture(session: Session):
    return SqlUserRepository(session)


@pytest.fixture(name="user_service")
def user_service_fixture(user_repository: SqlUserRepository, hasher: PasswordHasher):
    return UserService(user_repository, hasher, today=lambda: TODAY)


@pytest.fixture(name="registration")
def registration_fixture():
    """Valid registration payload."""
    return {
        "email": "Jane.Doe@Example.com",
        "password": VALID_PASSWORD,
        "first_name": "Jane",
        "last_name": "Doe",
        "phone_number": "+8801712345678",
        "date_of_birth": "1990-05-17",
    }


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client bound to the in-memory session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()
