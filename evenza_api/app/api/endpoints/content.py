"""
Public access to published CMS content.
"""

from fastapi import APIRouter, HTTPException, status

from evenza_api.app.schemas.content import ContentRead
from evenza_api.app.services.content_service import ContentService


router = APIRouter()


@router.get("/homepage", response_model=ContentRead)
async def get_homepage() -> ContentRead:
    try:
        return await ContentService.get_homepage()
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/{slug}", response_model=ContentRead)
async def get_content_by_slug(slug: str) -> ContentRead:
    try:
        return await ContentService.get_published_by_slug(slug)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
