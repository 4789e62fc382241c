"""
Public interview endpoints and the application form.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import get_current_user
from evenza_api.app.schemas.interview import (
    InterviewList,
    InterviewRead,
    SubmissionCreate,
    SubmissionResult,
)
from evenza_api.app.services.interview_service import InterviewService


router = APIRouter()


@router.get("", response_model=InterviewList)
async def list_interviews() -> InterviewList:
    return InterviewList(interviews=await InterviewService.list_published())


@router.get("/{interview_id}", response_model=InterviewRead)
async def get_interview(interview_id: int) -> InterviewRead:
    try:
        return await InterviewService.get_interview(interview_id, published_only=True)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{interview_id}/submit", response_model=SubmissionResult, status_code=status.HTTP_201_CREATED)
async def submit_application(
    interview_id: int,
    data: SubmissionCreate,
    current_user: dict = Depends(get_current_user),
) -> SubmissionResult:
    """Apply for an interview.  One application per user and interview."""
    try:
        return await InterviewService.submit(interview_id, current_user["user_id"], data)
    except ValueError as e:
        raise http_error(e) from e
