"""Request-scoped access to the services built during lifespan."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from app.jobs.registry import JobRegistry
from app.jobs.simulator import PipelineSimulator
from app.storage.analysis_store import AnalysisStore
from app.storage.upload_store import UploadStore


def _from_state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return service


def get_registry(request: Request) -> JobRegistry:
    return _from_state(request, "registry")


def get_analysis_store(request: Request) -> AnalysisStore:
    return _from_state(request, "analysis_store")


def get_upload_store(request: Request) -> UploadStore:
    return _from_state(request, "upload_store")


def get_dispatcher(request: Request) -> PipelineSimulator:
    return _from_state(request, "dispatcher")


Registry = Annotated[JobRegistry, Depends(get_registry)]
Analyses = Annotated[AnalysisStore, Depends(get_analysis_store)]
Uploads = Annotated[UploadStore, Depends(get_upload_store)]
Dispatcher = Annotated[PipelineSimulator, Depends(get_dispatcher)]
