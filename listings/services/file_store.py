"""Disk storage for uploaded property images.

Files are named ``<epoch-ms><original extension>`` and served back under
``/uploads``. Replaced or orphaned images are never removed.
"""

import logging
import time
from pathlib import Path

from starlette.datastructures import UploadFile

from listings.core.errors import StorageFailure

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1 MB streaming chunks
UPLOADS_URL_PREFIX = "/uploads"


def stored_filename(original_name: str, timestamp_ms: int) -> str:
    """Name for an upload: the timestamp plus the original extension."""
    return f"{timestamp_ms}{Path(original_name).suffix}"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class FileStore:
    def __init__(self, directory: str | Path, url_prefix: str = UPLOADS_URL_PREFIX):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def public_path(self, name: str) -> str:
        return f"{self.url_prefix}/{name}"

    def write(self, content: bytes, original_name: str) -> str:
        """Write ``content`` under a fresh name and return that name."""
        timestamp = _now_ms()
        try:
            while True:
                name = stored_filename(original_name, timestamp)
                try:
                    # "x" refuses to clobber an upload made in the same millisecond
                    with open(self.directory / name, "xb") as fh:
                        fh.write(content)
                except FileExistsError:
                    timestamp += 1
                    continue
                break
        except OSError as exc:
            logger.error("Could not store upload %s: %s", original_name, exc)
            raise StorageFailure(f"Could not store image: {exc.strerror or exc}") from exc

        logger.debug("Stored %s as %s (%d bytes)", original_name, name, len(content))
        return name

    async def save_upload(self, upload: UploadFile) -> str:
        chunks: list[bytes] = []
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
        return self.write(b"".join(chunks), upload.filename or "")
