"""
Public trip endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import get_current_user
from evenza_api.app.schemas.trip import TripEnrollmentCreate, TripEnrollmentResult, TripList, TripRead
from evenza_api.app.services.trip_service import TripService


router = APIRouter()


@router.get("", response_model=TripList)
async def list_trips() -> TripList:
    return TripList(trips=await TripService.list_published())


@router.get("/{trip_id}", response_model=TripRead)
async def get_trip(trip_id: int) -> TripRead:
    try:
        return await TripService.get_trip(trip_id, published_only=True)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{trip_id}/enroll", response_model=TripEnrollmentResult, status_code=status.HTTP_201_CREATED)
async def enroll_in_trip(
    trip_id: int,
    data: TripEnrollmentCreate,
    current_user: dict = Depends(get_current_user),
) -> TripEnrollmentResult:
    """Enroll the current user; 400 when the trip is full or the user is already enrolled."""
    try:
        return await TripService.enroll(trip_id, current_user["user_id"], data)
    except ValueError as e:
        raise http_error(e) from e
