"""Video upload and processing-status endpoints.

  POST /api/videos/upload            - store a video and start a simulated analysis
  GET  /api/videos/{video_id}/status - poll the job's live progress
"""

import os
import uuid
from typing import Optional

import structlog
from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.dependencies import Analyses, Dispatcher, Uploads
from app.errors import UploadTooLargeError
from app.jobs.models import CamelModel, JobStatusRecord, VideoMetadata

logger = structlog.get_logger()

router = APIRouter()

UPLOAD_PATH = "/api/videos/upload"
NO_FILE_DETAIL = "No video file provided"


class UploadResponse(CamelModel):
    video_id: str
    message: str
    filename: str
    size: int


@router.post("/videos/upload", response_model=UploadResponse)
async def upload_video(
    uploads: Uploads,
    analyses: Analyses,
    dispatcher: Dispatcher,
    video: Optional[UploadFile] = File(None),
    sport: Optional[str] = Form(None),
    collection: Optional[str] = Form(None),
    user_id: Optional[str] = Form(None, alias="userId"),
):
    """Accept a video upload, persist it, and start a processing job.

    Returns as soon as the job is started; poll the status endpoint for progress.
    """
    if video is None:
        raise HTTPException(status_code=400, detail=NO_FILE_DETAIL)

    if not video.content_type or not video.content_type.startswith("video/"):
        raise HTTPException(status_code=400, detail="Only video files are allowed")

    try:
        filename, path, size = await uploads.save(video)
    except UploadTooLargeError:
        max_mb = uploads.max_bytes // (1024 * 1024)
        raise HTTPException(status_code=400, detail=f"File too large. Maximum size is {max_mb}MB.")
    except Exception as exc:
        logger.error("upload_failed", error=str(exc), exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to upload video")

    original_name = video.filename or filename
    metadata = VideoMetadata(
        video_id=str(uuid.uuid4()),
        filename=filename,
        original_name=original_name,
        path=path,
        size=size,
        sport=sport or "auto-detect",
        collection=collection or "none",
        user_id=user_id or "anonymous",
    )

    try:
        analyses.save_metadata(metadata)
        await dispatcher.submit(metadata)
    except Exception as exc:
        logger.error("upload_failed", video_id=metadata.video_id, error=str(exc), exc_info=True)
        if os.path.exists(path):
            os.remove(path)
        raise HTTPException(status_code=500, detail="Failed to upload video")

    logger.info(
        "video_uploaded",
        video_id=metadata.video_id,
        original_name=original_name,
        size=size,
        user_id=metadata.user_id,
    )

    return UploadResponse(
        video_id=metadata.video_id,
        message="Video uploaded successfully",
        filename=original_name,
        size=size,
    )


@router.get(
    "/videos/{video_id}/status",
    response_model=JobStatusRecord,
    response_model_exclude_none=True,
)
async def get_video_status(video_id: str, dispatcher: Dispatcher):
    """Return the live job status; currentStage is only present while processing."""
    record = await dispatcher.get_status(video_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Video not found")
    return record


async def upload_validation_handler(request: Request, exc: RequestValidationError):
    """Report a non-file ``video`` field on the upload route as a missing file (400)."""
    if request.url.path == UPLOAD_PATH and any(
        tuple(err.get("loc", ())) == ("body", "video") for err in exc.errors()
    ):
        return JSONResponse(status_code=400, content={"detail": NO_FILE_DETAIL})
    return await request_validation_exception_handler(request, exc)
