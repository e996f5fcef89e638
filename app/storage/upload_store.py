"""Disk storage for uploaded video binaries."""

import os
import time
import uuid
from typing import Tuple

from fastapi import UploadFile

from app.errors import UploadTooLargeError

CHUNK_BYTES = 1024 * 1024


class UploadStore:
    """Stores uploads as {epoch_ms}-{uuid4}{ext}, keeping the original extension."""

    def __init__(self, base_dir: str, max_bytes: int):
        self._base_dir = base_dir
        self._max_bytes = max_bytes
        os.makedirs(self._base_dir, exist_ok=True)

    @property
    def base_dir(self) -> str:
        return self._base_dir

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def generate_filename(self, original_name: str) -> str:
        ext = os.path.splitext(original_name or "")[1]
        return f"{int(time.time() * 1000)}-{uuid.uuid4()}{ext}"

    async def save(self, file: UploadFile) -> Tuple[str, str, int]:
        """Stream an upload to disk in 1 MB chunks.

        Returns (stored filename, full path, size in bytes). If the stream
        exceeds the size cap the partial file is removed and
        UploadTooLargeError is raised.
        """
        filename = self.generate_filename(file.filename)
        path = os.path.join(self._base_dir, filename)

        total = 0
        try:
            with open(path, "wb") as dst:
                while True:
                    chunk = await file.read(CHUNK_BYTES)
                    if not chunk:
                        break
                    total += len(chunk)
                    if total > self._max_bytes:
                        raise UploadTooLargeError(self._max_bytes)
                    dst.write(chunk)
        except BaseException:
            if os.path.exists(path):
                os.remove(path)
            raise

        return filename, path, total
