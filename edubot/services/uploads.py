"""Local storage for files submitted through the admission form upload."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


class UploadTooLargeError(Exception):
    """Raised when an upload exceeds the configured size limit."""

    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes
        super().__init__(f"Upload exceeds the {max_bytes} byte limit")


def _stored_name(filename: str | None) -> str:
    """Prefix the client's file name with the current epoch milliseconds.

    Only the final path component is kept so a crafted name cannot escape
    the upload directory.
    """
    base = Path(filename or "").name or "upload"
    return f"{int(time.time() * 1000)}-{base}"


async def save_upload(
    upload: UploadFile,
    upload_dir: Path | str,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> Path:
    """Stream *upload* into *upload_dir* and return the stored path.

    Raises
    ------
    UploadTooLargeError
        If the file is larger than *max_bytes*.  Nothing is left on disk.
    """
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / _stored_name(upload.filename)

    written = 0
    try:
        with target.open("wb") as out:
            while True:
                chunk = await upload.read(_CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    raise UploadTooLargeError(max_bytes)
                await run_in_threadpool(out.write, chunk)
    except Exception:
        target.unlink(missing_ok=True)
        raise

    logger.info("Stored upload %r (%d bytes) at %s", upload.filename, written, target)
    return target
