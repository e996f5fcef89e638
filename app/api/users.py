"""Per-user video listing."""

from typing import List

import structlog
from fastapi import APIRouter, HTTPException

from app.api.dependencies import Analyses
from app.jobs.models import VideoMetadata

logger = structlog.get_logger()

router = APIRouter()


@router.get("/users/{user_id}/videos", response_model=List[VideoMetadata])
async def list_user_videos(user_id: str, analyses: Analyses):
    """List upload metadata for one user, oldest first.

    The status/progress fields are the upload-time snapshot; use the status
    endpoint for live progress.
    """
    try:
        return analyses.list_metadata(user_id)
    except (OSError, ValueError) as exc:
        logger.error("list_videos_failed", user_id=user_id, error=str(exc), exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch videos")
