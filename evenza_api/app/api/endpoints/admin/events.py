"""
Event management for administrators.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import require_admin
from evenza_api.app.schemas.event import EventCreate, EventRead, EventRegistrationRead, EventUpdate
from evenza_api.app.services.event_service import EventService


router = APIRouter()


@router.get("", response_model=List[EventRead])
async def list_events(current_user: dict = Depends(require_admin)) -> List[EventRead]:
    """All events, including unpublished ones, newest first."""
    return await EventService.list_all()


@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(event: EventCreate, current_user: dict = Depends(require_admin)) -> EventRead:
    """Create a new event.

    ``title``, ``description``, ``date``, ``location``, ``category`` and
    ``max_attendees`` are required; the rest have defaults.
    """
    return await EventService.create_event(event, current_user)


@router.get("/{event_id}", response_model=EventRead)
async def get_event(event_id: int, current_user: dict = Depends(require_admin)) -> EventRead:
    try:
        return await EventService.get_event(event_id)
    except ValueError as e:
        raise http_error(e) from e


@router.put("/{event_id}", response_model=EventRead)
async def update_event(
    event_id: int,
    updates: EventUpdate,
    current_user: dict = Depends(require_admin),
) -> EventRead:
    """Partial update; fields absent from the body remain unchanged."""
    try:
        return await EventService.update_event(event_id, updates.model_dump(exclude_none=True), current_user)
    except ValueError as e:
        raise http_error(e) from e


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: int, current_user: dict = Depends(require_admin)) -> None:
    try:
        await EventService.delete_event(event_id, current_user)
    except ValueError as e:
        raise http_error(e) from e
    return None


@router.get("/{event_id}/attendees", response_model=List[EventRegistrationRead])
async def list_attendees(event_id: int, current_user: dict = Depends(require_admin)) -> List[EventRegistrationRead]:
    try:
        return await EventService.list_attendees(event_id)
    except ValueError as e:
        raise http_error(e) from e
