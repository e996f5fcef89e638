"""Sports Analysis Demo Backend - FastAPI application."""

import os
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config import Settings, settings as default_settings
from app.api.router import api_router, health_root_router
from app.api.videos import upload_validation_handler
from app.jobs.registry import JobRegistry
from app.jobs.simulator import PipelineSimulator
from app.storage.analysis_store import AnalysisStore
from app.storage.upload_store import UploadStore

logger = structlog.get_logger()

VERSION = "0.1.0"

ENDPOINTS = [
    "POST   /api/videos/upload          - Upload video for analysis",
    "GET    /api/videos/{videoId}/status - Check processing status",
    "GET    /api/analyses/{videoId}      - Get analysis results",
    "GET    /api/users/{userId}/videos   - List user's videos",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the registry, stores and simulator; tear the simulator down on exit."""
    cfg: Settings = app.state.settings

    registry = JobRegistry()
    analysis_store = AnalysisStore(os.path.abspath(cfg.analyses_dir))
    upload_store = UploadStore(os.path.abspath(cfg.uploads_dir), max_bytes=cfg.max_upload_bytes)
    dispatcher = PipelineSimulator(registry, analysis_store, time_scale=cfg.stage_time_scale)
    await dispatcher.start()

    app.state.registry = registry
    app.state.analysis_store = analysis_store
    app.state.upload_store = upload_store
    app.state.dispatcher = dispatcher

    logger.info(
        "server_started",
        port=cfg.app_port,
        uploads_dir=upload_store.base_dir,
        analyses_dir=analysis_store.base_dir,
    )

    yield

    logger.info("server_stopping", jobs_in_flight=dispatcher.in_flight())
    await dispatcher.stop()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    cfg = settings or default_settings

    app = FastAPI(
        title="Sports Analysis Demo Backend",
        description="Mock video analysis service: uploads, simulated processing, fabricated feedback",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = cfg

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, upload_validation_handler)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    app.include_router(health_root_router)
    app.include_router(api_router)

    @app.get("/")
    async def root(request: Request):
        return {
            "service": "sports-analysis-backend",
            "version": VERSION,
            "endpoints": ENDPOINTS,
            "uploads_dir": request.app.state.upload_store.base_dir,
            "analyses_dir": request.app.state.analysis_store.base_dir,
            "note": "Mock backend for demo purposes; no real pose estimation is performed.",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=default_settings.app_port)
