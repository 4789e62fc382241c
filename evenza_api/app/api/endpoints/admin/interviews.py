"""
Interview management and application review for administrators.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import require_admin
from evenza_api.app.schemas.interview import (
    InterviewCreate,
    InterviewRead,
    InterviewUpdate,
    SubmissionRead,
    SubmissionStatusUpdate,
)
from evenza_api.app.services.interview_service import InterviewService


router = APIRouter()
submissions_router = APIRouter()


@router.get("", response_model=List[InterviewRead])
async def list_interviews(current_user: dict = Depends(require_admin)) -> List[InterviewRead]:
    return await InterviewService.list_all()


@router.post("", response_model=InterviewRead, status_code=status.HTTP_201_CREATED)
async def create_interview(interview: InterviewCreate, current_user: dict = Depends(require_admin)) -> InterviewRead:
    return await InterviewService.create_interview(interview, current_user)


@router.get("/{interview_id}", response_model=InterviewRead)
async def get_interview(interview_id: int, current_user: dict = Depends(require_admin)) -> InterviewRead:
    try:
        return await InterviewService.get_interview(interview_id)
    except ValueError as e:
        raise http_error(e) from e


@router.put("/{interview_id}", response_model=InterviewRead)
async def update_interview(
    interview_id: int,
    updates: InterviewUpdate,
    current_user: dict = Depends(require_admin),
) -> InterviewRead:
    try:
        return await InterviewService.update_interview(
            interview_id, updates.model_dump(exclude_none=True), current_user
        )
    except ValueError as e:
        raise http_error(e) from e


@router.delete("/{interview_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_interview(interview_id: int, current_user: dict = Depends(require_admin)) -> None:
    try:
        await InterviewService.delete_interview(interview_id, current_user)
    except ValueError as e:
        raise http_error(e) from e
    return None


@router.get("/{interview_id}/submissions", response_model=List[SubmissionRead])
async def list_submissions(
    interview_id: int,
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: dict = Depends(require_admin),
) -> List[SubmissionRead]:
    try:
        await InterviewService.get_interview(interview_id)
    except ValueError as e:
        raise http_error(e) from e
    return await InterviewService.list_submissions(interview_id=interview_id, status=status_filter)


@submissions_router.get("", response_model=List[SubmissionRead])
async def list_all_submissions(
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: dict = Depends(require_admin),
) -> List[SubmissionRead]:
    return await InterviewService.list_submissions(status=status_filter)


@submissions_router.put("/{submission_id}", response_model=SubmissionRead)
async def update_submission_status(
    submission_id: int,
    data: SubmissionStatusUpdate,
    current_user: dict = Depends(require_admin),
) -> SubmissionRead:
    """Set the review status of an application and notify the applicant by email.

    Accepted statuses: pending, approved, rejected, completed, cancelled.
    """
    try:
        return await InterviewService.update_submission_status(
            submission_id, data.status, data.admin_notes, current_user
        )
    except ValueError as e:
        raise http_error(e) from e
