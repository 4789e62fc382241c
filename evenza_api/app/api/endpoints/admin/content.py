"""
CMS content management for administrators.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import require_admin
from evenza_api.app.schemas.common import Pagination
from evenza_api.app.schemas.content import ContentCreate, ContentListResponse, ContentRead, ContentUpdate
from evenza_api.app.services.content_service import ContentService


router = APIRouter()


@router.get("", response_model=ContentListResponse)
async def list_content(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    current_user: dict = Depends(require_admin),
) -> ContentListResponse:
    items, total = await ContentService.list_content(page=page, limit=limit, search=search, content_type=type)
    return ContentListResponse(content=items, pagination=Pagination.build(total, page, limit))


@router.post("", response_model=ContentRead, status_code=status.HTTP_201_CREATED)
async def create_content(data: ContentCreate, current_user: dict = Depends(require_admin)) -> ContentRead:
    """Create a page, post, legal text or FAQ entry.

    The slug is derived from the title when omitted; a duplicate slug
    is rejected with 400.
    """
    try:
        return await ContentService.create_content(data, current_user)
    except ValueError as e:
        raise http_error(e) from e


@router.get("/{content_id}", response_model=ContentRead)
async def get_content(content_id: int, current_user: dict = Depends(require_admin)) -> ContentRead:
    try:
        return await ContentService.get_content(content_id)
    except ValueError as e:
        raise http_error(e) from e


@router.put("/{content_id}", response_model=ContentRead)
async def update_content(
    content_id: int,
    updates: ContentUpdate,
    current_user: dict = Depends(require_admin),
) -> ContentRead:
    try:
        return await ContentService.update_content(content_id, updates.model_dump(exclude_none=True), current_user)
    except ValueError as e:
        raise http_error(e) from e


@router.delete("/{content_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_content(content_id: int, current_user: dict = Depends(require_admin)) -> None:
    try:
        await ContentService.delete_content(content_id, current_user)
    except ValueError as e:
        raise http_error(e) from e
    return None
