"""Domain errors raised by the job registry."""


class JobNotFoundError(KeyError):
    """Raised when a registry operation targets an unknown job id."""

    def __init__(self, job_id: str):
        super().__init__(job_id)
        self.job_id = job_id

    def __str__(self) -> str:
        return f"Job '{self.job_id}' not found"


class InvalidProgressError(ValueError):
    """Raised when a job's progress would move backwards or leave [0, 100]."""


class UploadTooLargeError(Exception):
    """Raised when an upload stream exceeds the configured size cap."""

    def __init__(self, limit_bytes: int):
        super().__init__(f"Upload exceeds {limit_bytes} bytes")
        self.limit_bytes = limit_bytes
