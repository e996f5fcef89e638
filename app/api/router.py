"""Aggregate all API routers."""

from fastapi import APIRouter
from app.api.health import router as health_router
from app.api.videos import router as videos_router
from app.api.analyses import router as analyses_router
from app.api.users import router as users_router

api_router = APIRouter(prefix="/api")
api_router.include_router(videos_router, tags=["videos"])
api_router.include_router(analyses_router, tags=["analyses"])
api_router.include_router(users_router, tags=["users"])

# GET /health at root
health_root_router = APIRouter()
health_root_router.include_router(health_router, tags=["health"])
