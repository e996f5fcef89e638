"""Health check endpoint."""

from fastapi import APIRouter
import platform
import sys

from app.api.dependencies import Dispatcher, Registry

router = APIRouter()


@router.get("/health")
async def health_check(registry: Registry, dispatcher: Dispatcher):
    """Service health, job counts, and system info."""
    return {
        "status": "healthy",
        "jobs_tracked": len(registry),
        "jobs_processing": registry.active_count(),
        "tasks_in_flight": dispatcher.in_flight(),
        "python_version": sys.version,
        "platform": platform.platform(),
    }
