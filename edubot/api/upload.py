from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from edubot.config import Settings, get_settings
from edubot.schemas.upload import UploadResponse
from edubot.services.uploads import UploadTooLargeError, save_upload

router = APIRouter(tags=["upload"])


@router.post("/api/upload", response_model=UploadResponse)
async def upload_form(
    upload: Annotated[UploadFile, File(alias="formUpload", description="Completed admission form")],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UploadResponse:
    """Store a single uploaded file (at most ``UPLOAD_MAX_BYTES``)."""
    try:
        await save_upload(upload, settings.UPLOAD_DIR, max_bytes=settings.UPLOAD_MAX_BYTES)
    except UploadTooLargeError as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from exc
    finally:
        await upload.close()
    return UploadResponse(message="File uploaded successfully")
