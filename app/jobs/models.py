"""Job status and upload metadata records."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, matching the frontend's JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JobState(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class JobStatusRecord(CamelModel):
    """Live progress of one simulated analysis job. Held in memory only."""
    progress: int = Field(default=0, ge=0, le=100)
    state: JobState = JobState.PROCESSING
    current_stage: Optional[str] = None
    start_time: datetime = Field(default_factory=utcnow)
    completed_time: Optional[datetime] = None
    error: Optional[str] = None


class VideoMetadata(CamelModel):
    """Upload-time description of a video, persisted once as {videoId}-metadata.json.

    The status/progress pair is a snapshot taken at upload and is never
    updated; the job registry is the only source of live status.
    """
    video_id: str
    filename: str
    original_name: str
    path: str
    size: int
    sport: str = "auto-detect"
    collection: str = "none"
    user_id: str = "anonymous"
    upload_time: datetime = Field(default_factory=utcnow)
    status: JobState = JobState.PROCESSING
    progress: int = 0
