"""
Shared fixtures for the sports analysis backend tests.
"""

import io
import os
import time
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.jobs.models import VideoMetadata
from app.jobs.registry import JobRegistry
from app.main import create_app
from app.storage.analysis_store import AnalysisStore


# ============================================================================
# Settings / Service Fixtures
# ============================================================================


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at temp directories, with stage delays disabled."""
    return Settings(
        uploads_dir=str(tmp_path / "uploads"),
        analyses_dir=str(tmp_path / "analyses"),
        stage_time_scale=0.0,
        max_upload_mb=1,
    )


@pytest.fixture
def registry() -> JobRegistry:
    return JobRegistry()


@pytest.fixture
def analysis_store(tmp_path) -> AnalysisStore:
    return AnalysisStore(str(tmp_path / "analyses"))


@pytest.fixture
def metadata() -> VideoMetadata:
    return VideoMetadata(
        video_id="video-123",
        filename="1700000000000-abc.mp4",
        original_name="swing.mp4",
        path="/tmp/uploads/1700000000000-abc.mp4",
        size=2048,
        sport="golf",
        user_id="alice",
    )


# ============================================================================
# HTTP Fixtures
# ============================================================================


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    """Test client with lifespan running, so background jobs share its event loop."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


# ============================================================================
# Helpers
# ============================================================================


def generate_video_bytes(size_kb: int = 10) -> bytes:
    """Generate fake video bytes with MP4 magic header."""
    magic = b"\x00\x00\x00\x1c\x66\x74\x79\x70\x69\x73\x6f\x6d"
    return magic + os.urandom(size_kb * 1024 - len(magic))


@pytest.fixture
def upload_video(client: TestClient):
    """POST a fake video; extra keyword args become form fields."""

    def _upload(filename="swing.mp4", content_type="video/mp4", content=None, **fields):
        if content is None:
            content = generate_video_bytes()
        files = {"video": (filename, io.BytesIO(content), content_type)}
        return client.post("/api/videos/upload", files=files, data=fields)

    return _upload


@pytest.fixture
def wait_for_state(client: TestClient):
    """Poll the status endpoint until a job reaches the given state."""

    def _wait(video_id: str, state: str, timeout: float = 5.0) -> dict:
        deadline = time.monotonic() + timeout
        while True:
            body = client.get(f"/api/videos/{video_id}/status").json()
            if body.get("state") == state:
                return body
            if time.monotonic() > deadline:
                raise AssertionError(f"Job {video_id} never reached {state}; last status {body}")
            time.sleep(0.02)

    return _wait
