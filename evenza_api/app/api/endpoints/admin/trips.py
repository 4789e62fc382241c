"""
Trip management for administrators.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import require_admin
from evenza_api.app.schemas.trip import TripCreate, TripParticipantRead, TripRead, TripUpdate
from evenza_api.app.services.trip_service import TripService


router = APIRouter()


@router.get("", response_model=List[TripRead])
async def list_trips(current_user: dict = Depends(require_admin)) -> List[TripRead]:
    return await TripService.list_all()


@router.post("", response_model=TripRead, status_code=status.HTTP_201_CREATED)
async def create_trip(trip: TripCreate, current_user: dict = Depends(require_admin)) -> TripRead:
    return await TripService.create_trip(trip, current_user)


@router.get("/{trip_id}", response_model=TripRead)
async def get_trip(trip_id: int, current_user: dict = Depends(require_admin)) -> TripRead:
    try:
        return await TripService.get_trip(trip_id)
    except ValueError as e:
        raise http_error(e) from e


@router.put("/{trip_id}", response_model=TripRead)
async def update_trip(trip_id: int, updates: TripUpdate, current_user: dict = Depends(require_admin)) -> TripRead:
    try:
        return await TripService.update_trip(trip_id, updates.model_dump(exclude_none=True), current_user)
    except ValueError as e:
        raise http_error(e) from e


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_trip(trip_id: int, current_user: dict = Depends(require_admin)) -> None:
    try:
        await TripService.delete_trip(trip_id, current_user)
    except ValueError as e:
        raise http_error(e) from e
    return None


@router.get("/{trip_id}/participants", response_model=List[TripParticipantRead])
async def list_participants(trip_id: int, current_user: dict = Depends(require_admin)) -> List[TripParticipantRead]:
    try:
        return await TripService.list_participants(trip_id)
    except ValueError as e:
        raise http_error(e) from e
