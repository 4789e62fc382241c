"""
Gallery endpoints.  Reading is public; changes are admin only.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import require_admin
from evenza_api.app.schemas.media import MediaCreate, MediaList, MediaRead
from evenza_api.app.services.media_service import MediaService


router = APIRouter()


@router.get("", response_model=MediaList)
async def list_media(
    category: Optional[str] = Query(None),
    type: Optional[Literal["image", "video"]] = Query(None),
) -> MediaList:
    return MediaList(media=await MediaService.list_media(category=category, media_type=type))


@router.post("", response_model=MediaRead, status_code=status.HTTP_201_CREATED)
async def create_media(data: MediaCreate, current_user: dict = Depends(require_admin)) -> MediaRead:
    try:
        return await MediaService.create_media(data, current_user)
    except ValueError as e:
        raise http_error(e) from e


@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_media(media_id: int, current_user: dict = Depends(require_admin)) -> None:
    try:
        await MediaService.delete_media(media_id, current_user)
    except ValueError as e:
        raise http_error(e) from e
    return None
