"""
File API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse

from cityinfo.auth import dependencies as auth_dependencies

from . import service

router = APIRouter(
    prefix="/api/files",
    dependencies=[Depends(auth_dependencies.get_current_user)],
)


@router.get("/{file_id}")
async def get_file(file_id: str) -> FileResponse:
    download = service.resolve_download(file_id)
    return FileResponse(
        download.path,
        media_type=download.content_type,
        filename=download.filename,
    )


@router.post("")
async def create_file(file: UploadFile = File(...)) -> str:
    await service.store_upload(file)
    return "Your file has been successfully uploaded."
