"""Analysis result record returned to clients and persisted as {videoId}-analysis.json."""

from datetime import datetime
from typing import List

from pydantic import Field

from app.jobs.models import CamelModel, utcnow


class FeedbackItem(CamelModel):
    icon: str
    title: str
    description: str
    type: str


class Joint(CamelModel):
    x: float
    y: float
    confidence: float


class Joints(CamelModel):
    head: Joint
    left_shoulder: Joint
    right_shoulder: Joint
    left_hip: Joint
    right_hip: Joint


class Keyframe(CamelModel):
    frame: int
    timestamp: float
    joints: Joints


class PoseData(CamelModel):
    frame_count: int
    keypoints: List[Keyframe]
    phases: List[str]


class ComparisonData(CamelModel):
    pro_average: int
    user_score: int
    improvement: str


class AnalysisResult(CamelModel):
    video_id: str
    sport_type: str
    form_score: int = Field(ge=70, le=90)
    analysis_date: datetime = Field(default_factory=utcnow)
    duration: float
    feedback: List[FeedbackItem]
    pose_data: PoseData
    recommendations: List[str]
    comparison_data: ComparisonData
