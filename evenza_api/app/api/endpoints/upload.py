"""
File uploads (event images, payment proofs, gallery media, resumes).
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import get_current_user
from evenza_api.app.schemas.media import UploadResult
from evenza_api.app.services.storage_service import StorageService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=UploadResult)
async def upload_file(
    file: UploadFile = File(...),
    type: str = Form(...),
    folder: str = Form("general"),
    current_user: dict = Depends(get_current_user),
) -> UploadResult:
    """Upload an image (JPEG/PNG/GIF, 5MB) or a video (MP4/MOV/AVI, 50MB).

    Returns the public URL of the stored file.
    """
    try:
        url = await StorageService.save_upload(file, type, folder)
    except ValueError as e:
        raise http_error(e) from e
    finally:
        await file.close()
    logger.info("User %s uploaded %s", current_user["user_id"], url)
    return UploadResult(url=url)
