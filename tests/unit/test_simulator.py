"""
Unit tests for app/jobs/simulator.py

Stage delays are replaced with a recording sleep so the pipeline runs instantly.
"""

import asyncio
import random
from unittest.mock import MagicMock

import pytest

from app.jobs.models import JobState, VideoMetadata
from app.jobs.registry import JobRegistry
from app.jobs.simulator import STAGES, PipelineSimulator
from app.storage.analysis_store import AnalysisStore


class TestStageTable:
    @pytest.mark.unit
    def test_stage_table_matches_pipeline(self):
        assert [(s.name, s.duration_ms, s.progress) for s in STAGES] == [
            ("Extracting frames", 2000, 20),
            ("Running pose estimation", 3000, 50),
            ("Analyzing movement", 2000, 70),
            ("Generating feedback", 1000, 90),
            ("Finalizing", 500, 100),
        ]


class TestPipelineRun:
    @pytest.mark.unit
    def test_progress_follows_stage_sequence(self, registry: JobRegistry,
                                            analysis_store: AnalysisStore,
                                            metadata: VideoMetadata):
        observed = []

        async def recording_sleep(seconds: float) -> None:
            record = registry.get(metadata.video_id)
            observed.append((record.progress, record.current_stage, seconds))

        async def scenario():
            simulator = PipelineSimulator(registry, analysis_store, sleep=recording_sleep)
            await simulator.submit(metadata)
            # Task has not run yet: the freshly created record is still at 0%
            assert registry.get(metadata.video_id).progress == 0
            assert registry.get(metadata.video_id).state == JobState.PROCESSING
            await simulator.join()
            return simulator

        simulator = asyncio.run(scenario())

        assert observed == [
            (20, "Extracting frames", 2.0),
            (50, "Running pose estimation", 3.0),
            (70, "Analyzing movement", 2.0),
            (90, "Generating feedback", 1.0),
            (100, "Finalizing", 0.5),
        ]
        final = registry.get(metadata.video_id)
        assert final.state == JobState.COMPLETED
        assert final.progress == 100
        assert final.current_stage is None
        assert simulator.in_flight() == 0

    @pytest.mark.unit
    def test_completion_persists_result(self, registry: JobRegistry,
                                        analysis_store: AnalysisStore,
                                        metadata: VideoMetadata):
        async def scenario():
            simulator = PipelineSimulator(registry, analysis_store, time_scale=0.0,
                                          rng=random.Random(3))
            await simulator.submit(metadata)
            await simulator.join()

        asyncio.run(scenario())

        result = analysis_store.get_analysis(metadata.video_id)
        assert result is not None
        assert 70 <= result.form_score <= 90
        assert AnalysisStore(analysis_store.base_dir).get_analysis(metadata.video_id) == result

    @pytest.mark.unit
    def test_time_scale_shrinks_delays(self, registry: JobRegistry,
                                       analysis_store: AnalysisStore,
                                       metadata: VideoMetadata):
        delays = []

        async def recording_sleep(seconds: float) -> None:
            delays.append(seconds)

        async def scenario():
            simulator = PipelineSimulator(registry, analysis_store, time_scale=0.5,
                                          sleep=recording_sleep)
            await simulator.submit(metadata)
            await simulator.join()

        asyncio.run(scenario())

        assert delays == [1.0, 1.5, 1.0, 0.5, 0.25]

    @pytest.mark.unit
    def test_jobs_interleave(self, registry: JobRegistry, analysis_store: AnalysisStore,
                             metadata: VideoMetadata):
        order = []

        async def yielding_sleep(seconds: float) -> None:
            await asyncio.sleep(0)

        other = metadata.model_copy(update={"video_id": "video-456"})
        original_advance = registry.advance

        def tracking_advance(job_id, progress, stage):
            order.append((job_id, progress))
            return original_advance(job_id, progress, stage)

        registry.advance = tracking_advance

        async def scenario():
            simulator = PipelineSimulator(registry, analysis_store, sleep=yielding_sleep)
            await simulator.submit(metadata)
            await simulator.submit(other)
            await simulator.join()

        asyncio.run(scenario())

        first_done = order.index(("video-123", 100))
        assert ("video-456", 20) in order[:first_done]
        for job_id in ("video-123", "video-456"):
            assert [p for j, p in order if j == job_id] == [20, 50, 70, 90, 100]
            assert registry.get(job_id).state == JobState.COMPLETED


class TestFailureAndShutdown:
    @pytest.mark.unit
    def test_persist_failure_marks_job_failed(self, registry: JobRegistry,
                                              metadata: VideoMetadata):
        store = MagicMock(spec=AnalysisStore)
        store.save_analysis.side_effect = OSError("disk full")

        async def scenario():
            simulator = PipelineSimulator(registry, store, time_scale=0.0)
            await simulator.submit(metadata)
            await simulator.join()

        asyncio.run(scenario())

        record = registry.get(metadata.video_id)
        assert record.state == JobState.FAILED
        assert record.progress == 100
        assert "disk full" in record.error
        assert record.completed_time is not None

    @pytest.mark.unit
    def test_stop_cancels_in_flight_jobs(self, registry: JobRegistry,
                                         analysis_store: AnalysisStore,
                                         metadata: VideoMetadata):
        async def scenario():
            never = asyncio.Event()

            async def blocking_sleep(seconds: float) -> None:
                await never.wait()

            simulator = PipelineSimulator(registry, analysis_store, sleep=blocking_sleep)
            await simulator.submit(metadata)
            await asyncio.sleep(0)
            assert simulator.in_flight() == 1
            await simulator.stop()
            return simulator

        simulator = asyncio.run(scenario())

        assert simulator.in_flight() == 0
        record = registry.get(metadata.video_id)
        assert record.state == JobState.PROCESSING
        assert record.progress == 20
        assert analysis_store.get_analysis(metadata.video_id) is None

    @pytest.mark.unit
    def test_get_status_reads_registry(self, registry: JobRegistry,
                                       analysis_store: AnalysisStore):
        simulator = PipelineSimulator(registry, analysis_store)
        registry.create("job-1")

        assert asyncio.run(simulator.get_status("job-1")) is registry.get("job-1")
        assert asyncio.run(simulator.get_status("missing")) is None
