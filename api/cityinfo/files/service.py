"""
File download / upload logic, independent of the city domain.

Uploads:
- must be sent as `application/pdf`
- must be non-empty and at most 20 MiB
- are stored under a random name, never the client's filename
"""

from __future__ import annotations

import logging
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path

from fastapi import HTTPException, UploadFile, status
from starlette.concurrency import run_in_threadpool

from cityinfo.core.settings import get_settings

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPE = "application/pdf"
MAX_UPLOAD_BYTES = 20 * 1024 * 1024  # 20 MiB
DEFAULT_CONTENT_TYPE = "application/octet-stream"

_INVALID_UPLOAD = "No file or an invalid one has been inputted."


@dataclass(frozen=True)
class DownloadableFile:
    path: Path
    content_type: str
    filename: str


def resolve_download(file_id: str) -> DownloadableFile:
    """
    Every id currently resolves to the single configured download file.
    """
    path = Path(get_settings().download_file_path)
    if not path.is_file():
        logger.info("File %r requested but %s does not exist.", file_id, path)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found.")

    content_type, _ = mimetypes.guess_type(path.name)
    return DownloadableFile(
        path=path,
        content_type=content_type or DEFAULT_CONTENT_TYPE,
        filename=path.name,
    )


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, giving up as soon as it exceeds `max_bytes`.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_INVALID_UPLOAD)

    return bytes(buf)


def upload_path() -> Path:
    return Path(get_settings().upload_dir) / f"uploaded_file_{uuid.uuid4()}.pdf"


async def store_upload(file: UploadFile) -> Path:
    if (file.content_type or "").lower() != ALLOWED_CONTENT_TYPE:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_INVALID_UPLOAD)

    data = await read_upload_bytes(file, max_bytes=MAX_UPLOAD_BYTES)
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_INVALID_UPLOAD)

    path = upload_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    await run_in_threadpool(path.write_bytes, data)
    logger.info("Stored upload (%d bytes) as %s.", len(data), path.name)
    return path
