"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Server
    app_port: int = 3001

    # Storage
    uploads_dir: str = "uploads"
    analyses_dir: str = "analyses"

    # Uploads
    max_upload_mb: int = 500

    # Simulated pipeline (multiplies every stage delay; 0 disables sleeping)
    stage_time_scale: float = 1.0

    # CORS
    cors_origins: List[str] = ["*"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


settings = Settings()
