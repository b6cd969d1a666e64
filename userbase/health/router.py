"""Health domain router.

Liveness and database readiness for monitoring and load balancers.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from userbase.core.constants import Routes
from userbase.core.deps import SessionDep, SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix=Routes.HEALTH.prefix, tags=[Routes.HEALTH.tag])


@router.get("")
async def health(session: SessionDep, settings: SettingsDep):
    """Report service status; 503 when the database is unreachable."""
    try:
        session.exec(text("SELECT 1"))  # type: ignore[call-overload]
    except SQLAlchemyError as e:
        logger.error("Health check database probe failed: %s", e)
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "database": "error",
                "environment": settings.env_name,
            },
        )
    return {"status": "ok", "database": "ok", "environment": settings.env_name}
