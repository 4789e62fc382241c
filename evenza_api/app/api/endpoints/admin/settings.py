"""
Site settings editor.
"""

from fastapi import APIRouter, Depends

from evenza_api.app.core.security import require_admin
from evenza_api.app.schemas.setting import SettingsBatch, SettingsResponse
from evenza_api.app.services.settings_service import SettingsService


router = APIRouter()


@router.get("", response_model=SettingsResponse)
async def get_settings(current_user: dict = Depends(require_admin)) -> SettingsResponse:
    """All settings as a flat ``{"category.key": value}`` mapping."""
    return SettingsResponse(settings=await SettingsService.get_all())


@router.post("", response_model=SettingsResponse)
async def save_settings(data: SettingsBatch, current_user: dict = Depends(require_admin)) -> SettingsResponse:
    """Save one settings form: each key is stored as ``<category>.<key>``."""
    return SettingsResponse(settings=await SettingsService.save_category(data.category, data.settings, current_user))
