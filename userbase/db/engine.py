"""Database handle.

The engine (and its connection pool) is owned by a ``Database`` instance that
the application opens at startup and disposes at shutdown. Request handlers
get a session bound to that engine through ``get_session``.
"""

import logging
from collections.abc import Generator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from userbase.core.settings import Settings

logger = logging.getLogger(__name__)


class Database:
    """Owns the SQLAlchemy engine for the lifetime of the application."""

    def __init__(self, url: str, *, echo: bool = False):
        connect_args: dict[str, object] = {}
        kwargs: dict[str, object] = {}
        if url.startswith("sqlite"):
            # Required for SQLite when used with FastAPI across threads.
            connect_args = {"check_same_thread": False}
            if url in {"sqlite://", "sqlite:///:memory:"}:
                # Single shared connection so the in-memory database survives.
                kwargs["poolclass"] = StaticPool
        self.url = url
        self.engine: Engine = create_engine(
            url, echo=echo, connect_args=connect_args, **kwargs
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.database_url, echo=settings.database_echo)

    def create_all(self) -> None:
        """Create missing tables (development and tests; production uses Alembic)."""
        # Table models must be imported so SQLModel registers them.
        import userbase.models  # noqa: F401

        SQLModel.metadata.create_all(self.engine)

    def session(self) -> Session:
        return Session(self.engine)

    def dispose(self) -> None:
        logger.info("Disposing database engine")
        self.engine.dispose()


def get_database(request: Request) -> Database:
    """Return the Database opened by the application lifespan."""
    return request.app.state.database


def get_session(request: Request) -> Generator[Session, None, None]:
    with get_database(request).session() as session:
        yield session
