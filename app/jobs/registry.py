"""In-memory job status registry."""

from typing import Dict, Optional

from app.errors import InvalidProgressError, JobNotFoundError
from app.jobs.models import JobState, JobStatusRecord, utcnow


class JobRegistry:
    """Maps job id -> JobStatusRecord.

    Only touched from the event loop thread, and each job's simulator task
    is the sole writer of its own entry, so no locking is needed. Records are
    never evicted; they live as long as the process.
    """

    def __init__(self):
        self._jobs: Dict[str, JobStatusRecord] = {}

    def create(self, job_id: str) -> JobStatusRecord:
        """Start tracking a job at 0%. A colliding id is overwritten (last write wins)."""
        record = JobStatusRecord()
        self._jobs[job_id] = record
        return record

    def advance(self, job_id: str, progress: int, stage: str) -> JobStatusRecord:
        record = self._require(job_id)
        if not 0 <= progress <= 100:
            raise InvalidProgressError(f"Progress {progress} outside [0, 100]")
        if progress < record.progress:
            raise InvalidProgressError(
                f"Progress for job '{job_id}' cannot go from {record.progress} to {progress}"
            )
        updated = record.model_copy(update={"progress": progress, "current_stage": stage})
        self._jobs[job_id] = updated
        return updated

    def complete(self, job_id: str) -> JobStatusRecord:
        record = self._require(job_id)
        updated = record.model_copy(update={
            "state": JobState.COMPLETED,
            "progress": 100,
            "current_stage": None,
            "completed_time": utcnow(),
        })
        self._jobs[job_id] = updated
        return updated

    def fail(self, job_id: str, error: str) -> JobStatusRecord:
        """Mark a job failed, keeping the last progress it reached."""
        record = self._require(job_id)
        updated = record.model_copy(update={
            "state": JobState.FAILED,
            "current_stage": None,
            "completed_time": utcnow(),
            "error": error,
        })
        self._jobs[job_id] = updated
        return updated

    def get(self, job_id: str) -> Optional[JobStatusRecord]:
        return self._jobs.get(job_id)

    def active_count(self) -> int:
        return sum(1 for r in self._jobs.values() if r.state == JobState.PROCESSING)

    def __len__(self) -> int:
        return len(self._jobs)

    def _require(self, job_id: str) -> JobStatusRecord:
        record = self._jobs.get(job_id)
        if record is None:
            raise JobNotFoundError(job_id)
        return record
