"""
Pydantic models for site settings.

Settings are stored as ``category.key`` with JSON-encoded values, so a
value may be any JSON type.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field


class SettingsBatch(BaseModel):
    category: str = Field(..., min_length=1, pattern=r"^\w+$", examples=["general"])
    settings: Dict[str, Any] = Field(..., examples=[{"siteName": "Evenza", "maintenanceMode": False}])


class SettingsResponse(BaseModel):
    success: bool = True
    settings: Dict[str, Any]
