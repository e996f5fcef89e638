"""Analysis result endpoint."""

from fastapi import APIRouter, HTTPException

from app.analysis.models import AnalysisResult
from app.api.dependencies import Analyses

router = APIRouter()


@router.get("/analyses/{video_id}", response_model=AnalysisResult)
async def get_analysis(video_id: str, analyses: Analyses):
    """Return a finished analysis from the in-memory cache, falling back to its file."""
    result = analyses.get_analysis(video_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return result
