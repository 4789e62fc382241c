"""
Publicly readable site settings.
"""

from fastapi import APIRouter

from evenza_api.app.schemas.setting import SettingsResponse
from evenza_api.app.services.settings_service import SettingsService


router = APIRouter()


@router.get("/public", response_model=SettingsResponse)
async def get_public_settings() -> SettingsResponse:
    """Settings of the ``general`` category (site name, description, contact email)."""
    return SettingsResponse(settings=await SettingsService.get_all(category="general"))
