"""Central API router aggregating all domain routers."""

from fastapi import APIRouter

from userbase.health.router import router as health_router
from userbase.role.router import router as role_router
from userbase.user.router import router as user_router

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(user_router)
api_router.include_router(role_router)
