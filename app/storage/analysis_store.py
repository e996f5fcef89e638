"""Flat-directory JSON storage for video metadata and analysis results."""

import os
from typing import Dict, List, Optional

import structlog

from app.analysis.models import AnalysisResult
from app.jobs.models import VideoMetadata

logger = structlog.get_logger()

METADATA_SUFFIX = "-metadata.json"
ANALYSIS_SUFFIX = "-analysis.json"


class AnalysisStore:
    """Writes {videoId}-metadata.json and {videoId}-analysis.json into one directory.

    Analysis results are also cached in memory once written; reads hit the
    cache first and fall back to disk (e.g. results from a previous process).
    """

    def __init__(self, base_dir: str):
        self._base_dir = base_dir
        os.makedirs(self._base_dir, exist_ok=True)
        self._results: Dict[str, AnalysisResult] = {}

    @property
    def base_dir(self) -> str:
        return self._base_dir

    def metadata_path(self, video_id: str) -> str:
        return os.path.join(self._base_dir, f"{video_id}{METADATA_SUFFIX}")

    def analysis_path(self, video_id: str) -> str:
        return os.path.join(self._base_dir, f"{video_id}{ANALYSIS_SUFFIX}")

    def save_metadata(self, metadata: VideoMetadata) -> str:
        path = self.metadata_path(metadata.video_id)
        _write_json(path, metadata.model_dump_json(by_alias=True, indent=2))
        return path

    def save_analysis(self, result: AnalysisResult) -> str:
        """Persist a result, then cache it. Called once per job."""
        path = self.analysis_path(result.video_id)
        _write_json(path, result.model_dump_json(by_alias=True, indent=2))
        self._results[result.video_id] = result
        return path

    def get_analysis(self, video_id: str) -> Optional[AnalysisResult]:
        cached = self._results.get(video_id)
        if cached is not None:
            return cached
        try:
            with open(self.analysis_path(video_id), "r", encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError:
            return None
        return AnalysisResult.model_validate_json(raw)

    def list_metadata(self, user_id: str) -> List[VideoMetadata]:
        """Scan every metadata file and return those uploaded by ``user_id``, oldest first.

        Raises OSError if the directory cannot be read.
        """
        videos = []
        for entry in os.listdir(self._base_dir):
            if not entry.endswith(METADATA_SUFFIX):
                continue
            with open(os.path.join(self._base_dir, entry), "r", encoding="utf-8") as f:
                metadata = VideoMetadata.model_validate_json(f.read())
            if metadata.user_id == user_id:
                videos.append(metadata)
        videos.sort(key=lambda m: m.upload_time)
        return videos


def _write_json(path: str, payload: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(payload)
    logger.debug("json_written", path=path)
