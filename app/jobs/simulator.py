"""Simulated analysis pipeline run as one asyncio task per uploaded video.

There is no real processing. Each job walks a fixed stage table, sleeping at
every stage without blocking the event loop, then fabricates a result,
writes it to disk and marks the job completed. Request handlers never wait on
these tasks; clients observe them by polling the registry.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Sequence

import structlog

from app.analysis.synthesizer import synthesize_analysis
from app.jobs.models import JobStatusRecord, VideoMetadata
from app.jobs.registry import JobRegistry
from app.storage.analysis_store import AnalysisStore

logger = structlog.get_logger()


@dataclass(frozen=True)
class Stage:
    name: str
    duration_ms: int
    progress: int  # cumulative, reported when the stage begins


STAGES = (
    Stage("Extracting frames", 2000, 20),
    Stage("Running pose estimation", 3000, 50),
    Stage("Analyzing movement", 2000, 70),
    Stage("Generating feedback", 1000, 90),
    Stage("Finalizing", 500, 100),
)

SleepFn = Callable[[float], Awaitable[None]]


class PipelineSimulator:
    """Owns one task handle per in-flight job.

    Finished tasks drop out of the task table on their own; ``stop()``
    cancels whatever is left. A job never reorders its own stages, but jobs
    interleave freely with each other.
    """

    def __init__(
        self,
        registry: JobRegistry,
        store: AnalysisStore,
        stages: Sequence[Stage] = STAGES,
        time_scale: float = 1.0,
        sleep: SleepFn = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        self._registry = registry
        self._store = store
        self._stages = tuple(stages)
        self._time_scale = time_scale
        self._sleep = sleep
        self._rng = rng
        self._tasks: Dict[str, asyncio.Task] = {}

    def in_flight(self) -> int:
        return len(self._tasks)

    async def submit(self, metadata: VideoMetadata) -> str:
        """Register a job for an uploaded video and start it. Returns the job id."""
        job_id = metadata.video_id
        self._registry.create(job_id)
        task = asyncio.create_task(self._run(job_id, metadata), name=f"analysis-{job_id}")
        self._tasks[job_id] = task
        task.add_done_callback(lambda t, jid=job_id: self._forget(jid, t))
        return job_id

    async def get_status(self, job_id: str) -> Optional[JobStatusRecord]:
        return self._registry.get(job_id)

    async def start(self) -> None:
        logger.info("simulator_started", stages=len(self._stages), time_scale=self._time_scale)

    async def stop(self) -> None:
        """Cancel every job still in flight."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("simulator_stopped", cancelled=len(tasks))

    async def join(self) -> None:
        """Wait for every job currently in flight to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)

    async def _run(self, job_id: str, metadata: VideoMetadata) -> None:
        log = logger.bind(video_id=job_id)
        log.info("processing_started", sport=metadata.sport)
        try:
            for stage in self._stages:
                self._registry.advance(job_id, stage.progress, stage.name)
                log.info("stage_started", stage=stage.name, progress=stage.progress)
                await self._sleep(stage.duration_ms / 1000 * self._time_scale)

            result = synthesize_analysis(metadata, rng=self._rng)
            # File write runs in a thread so the event loop keeps serving requests
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._store.save_analysis, result)

            self._registry.complete(job_id)
            log.info("processing_completed", form_score=result.form_score)
        except asyncio.CancelledError:
            log.warning("processing_cancelled")
            raise
        except Exception as e:
            log.error("processing_failed", error=str(e), exc_info=True)
            self._registry.fail(job_id, f"{type(e).__name__}: {e}")

    def _forget(self, job_id: str, task: asyncio.Task) -> None:
        if self._tasks.get(job_id) is task:
            del self._tasks[job_id]
