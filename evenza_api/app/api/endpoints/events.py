"""
Public event endpoints.

Anonymous visitors can browse published events; registering requires
an authenticated user.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import get_current_user
from evenza_api.app.schemas.event import (
    EventList,
    EventRead,
    EventRegistrationCreate,
    EventRegistrationResult,
)
from evenza_api.app.services.event_service import EventService


router = APIRouter()


@router.get("", response_model=EventList)
async def list_events(
    category: Optional[str] = Query(None),
    featured: Optional[bool] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=100),
) -> EventList:
    """Опубликованные мероприятия, ближайшие первыми.

    - **category** - фильтр по категории.
    - **featured** - только избранные (true) или только обычные (false).
    - **limit** - максимальное количество записей.
    """
    events = await EventService.list_published(category=category, featured=featured, limit=limit)
    return EventList(events=events)


@router.get("/{event_id}", response_model=EventRead)
async def get_event(event_id: int) -> EventRead:
    try:
        return await EventService.get_event(event_id, published_only=True)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{event_id}/register", response_model=EventRegistrationResult, status_code=status.HTTP_201_CREATED)
async def register_for_event(
    event_id: int,
    data: EventRegistrationCreate,
    current_user: dict = Depends(get_current_user),
) -> EventRegistrationResult:
    """Register the current user.

    Returns 400 when the event is full, not active, or the user is
    already registered.  Paid events return the id of the pending
    payment created for the registration.
    """
    try:
        return await EventService.register(event_id, current_user["user_id"], data)
    except ValueError as e:
        raise http_error(e) from e
