"""
Temporary upload storage
Copies incoming multipart files to the upload directory and removes them again
"""

import asyncio
import os
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, List, Sequence

from fastapi import UploadFile
import structlog

logger = structlog.get_logger(__name__)

CHUNK_SIZE = 64 * 1024


class FileTooLargeError(Exception):
    """Raised when an upload exceeds the per-file size ceiling"""

    status_code = 413

    def __init__(self, filename: str, max_size_bytes: int):
        self.filename = filename
        self.max_size_bytes = max_size_bytes
        super().__init__(f"{filename} exceeds the {max_size_bytes} byte limit")


@dataclass
class UploadedFile:
    """A received file held on disk for the lifetime of one request"""
    filename: str
    size: int
    path: str


def ensure_upload_dir(upload_dir: str) -> str:
    """Create the upload directory if it does not exist"""
    if not os.path.isdir(upload_dir):
        os.makedirs(upload_dir, exist_ok=True)
        logger.info("Created upload directory", upload_dir=upload_dir)
    return upload_dir


def save_upload(upload: UploadFile, upload_dir: str, max_size_bytes: int, stored: List[UploadedFile]) -> UploadedFile:
    """
    Copy one upload to disk under a random name.

    The record is appended to ``stored`` before any bytes are written so a
    partially written file is still cleaned up when the size limit trips.
    """
    filename = upload.filename or "unnamed"
    record = UploadedFile(
        filename=filename,
        size=0,
        path=os.path.join(upload_dir, uuid.uuid4().hex),
    )
    stored.append(record)

    upload.file.seek(0)
    with open(record.path, "wb") as out:
        while True:
            chunk = upload.file.read(CHUNK_SIZE)
            if not chunk:
                break
            record.size += len(chunk)
            if record.size > max_size_bytes:
                raise FileTooLargeError(filename, max_size_bytes)
            out.write(chunk)

    return record


def remove_upload(uploaded: UploadedFile) -> bool:
    """Delete a stored upload; failures are logged, never raised"""
    try:
        os.remove(uploaded.path)
    except OSError as e:
        logger.warning(
            "Failed to delete upload",
            filename=uploaded.filename,
            path=uploaded.path,
            error=str(e),
        )
        return False

    logger.info("Cleaned up upload", filename=uploaded.filename)
    return True


@asynccontextmanager
async def stored_uploads(
    uploads: Sequence[UploadFile],
    upload_dir: str,
    max_size_bytes: int,
) -> AsyncIterator[List[UploadedFile]]:
    """
    Store ``uploads`` on disk for the duration of the block.

    Every file written, including one rejected half way for being too
    large, is deleted exactly once when the block exits.
    """
    stored: List[UploadedFile] = []
    try:
        for upload in uploads:
            # Disk copy is blocking; keep it off the event loop
            await asyncio.to_thread(save_upload, upload, upload_dir, max_size_bytes, stored)
        yield stored
    finally:
        for uploaded in stored:
            remove_upload(uploaded)
