import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqladmin import Admin

from userbase.admin.auth import AdminAuth
from userbase.admin.views import RoleAdmin, UserAdmin
from userbase.core.cors import add_cors_middleware
from userbase.core.email import init_resend
from userbase.core.exception_handlers import register_exception_handlers
from userbase.core.logging import configure_logging
from userbase.core.request_logging import add_request_logging_middleware
from userbase.core.settings import Settings, get_settings
from userbase.db.engine import Database
from userbase.role.repository import SqlRoleRepository
from userbase.role.service import RoleService
from userbase.router import api_router
from userbase.user.repository import SqlUserRepository

configure_logging()

logger = logging.getLogger(__name__)


async def seed_roles(database: Database) -> None:
    with database.session() as session:
        roles = RoleService(SqlRoleRepository(session), SqlUserRepository(session))
        await roles.seed_default_roles()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around one Database handle.

    The engine is created here so the admin panel can bind to it; the
    lifespan prepares the schema at startup and disposes the pool on shutdown.
    """
    settings = settings or get_settings()
    database = Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.is_sqlite:
            # Local/dev databases; other backends are migrated with Alembic.
            database.create_all()
        if settings.seed_default_roles:
            await seed_roles(database)
        init_resend()
        logger.info("%s started (%s)", settings.app_name, settings.env_name)
        yield
        database.dispose()

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    app.state.database = database

    app.include_router(api_router)

    add_request_logging_middleware(app)
    add_cors_middleware(app, settings)
    register_exception_handlers(app)

    # Mount SQLAdmin UI at /admin (SQLAdmin enables sessions via auth backend secret)
    admin = Admin(
        app=app,
        engine=database.engine,
        authentication_backend=AdminAuth(settings),
        title=f"{settings.app_name} Admin",
    )
    admin.add_view(UserAdmin)
    admin.add_view(RoleAdmin)

    return app


app = create_app()
