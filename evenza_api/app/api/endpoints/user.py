"""
Endpoints for the signed-in user's own account and dashboard.
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import get_current_user
from evenza_api.app.schemas.activity import ActivityRead, UserDashboard
from evenza_api.app.schemas.common import MessageResponse
from evenza_api.app.schemas.interview import SubmissionRead
from evenza_api.app.schemas.payment import PaymentProof, PaymentRead
from evenza_api.app.schemas.user import PasswordChange, ProfileUpdate, UserRead
from evenza_api.app.services.activity_service import ActivityService
from evenza_api.app.services.dashboard_service import DashboardService
from evenza_api.app.services.interview_service import InterviewService
from evenza_api.app.services.payment_service import PaymentService
from evenza_api.app.services.user_service import UserService


router = APIRouter()


@router.get("/profile", response_model=UserRead)
async def get_profile(current_user: dict = Depends(get_current_user)) -> UserRead:
    try:
        return await UserService.get_user(current_user["user_id"])
    except ValueError as e:
        raise http_error(e) from e


@router.put("/profile", response_model=UserRead)
async def update_profile(data: ProfileUpdate, current_user: dict = Depends(get_current_user)) -> UserRead:
    """Update name, phone, student id, department, year, bio or picture."""
    updates = data.model_dump(exclude_none=True)
    try:
        return await UserService.update_profile(current_user["user_id"], updates)
    except ValueError as e:
        raise http_error(e) from e


@router.post("/change-password", response_model=MessageResponse)
async def change_password(data: PasswordChange, current_user: dict = Depends(get_current_user)) -> MessageResponse:
    """Change the password.  The new one must have at least 8 characters."""
    try:
        await UserService.change_password(current_user["user_id"], data.current_password, data.new_password)
    except ValueError as e:
        raise http_error(e) from e
    return MessageResponse(message="Password updated successfully")


@router.get("/dashboard", response_model=UserDashboard)
async def get_dashboard(current_user: dict = Depends(get_current_user)) -> UserDashboard:
    try:
        return await DashboardService.user_dashboard(current_user["user_id"])
    except ValueError as e:
        raise http_error(e) from e


@router.get("/activity", response_model=List[ActivityRead])
async def get_activity(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
) -> List[ActivityRead]:
    logs = await ActivityService.list_logs(user_id=current_user["user_id"], limit=limit, offset=offset)
    return [ActivityRead(**item) for item in logs]


@router.get("/payments", response_model=List[PaymentRead])
async def list_my_payments(current_user: dict = Depends(get_current_user)) -> List[PaymentRead]:
    payments, _ = await PaymentService.list_payments(limit=None, user_id=current_user["user_id"])
    return payments


@router.post("/payments/{payment_id}/proof", response_model=PaymentRead)
async def upload_payment_proof(
    payment_id: int,
    data: PaymentProof,
    current_user: dict = Depends(get_current_user),
) -> PaymentRead:
    """Attach the URL of an uploaded receipt to a pending payment."""
    try:
        return await PaymentService.attach_proof(payment_id, current_user["user_id"], data.proof_image)
    except (ValueError, PermissionError) as e:
        raise http_error(e) from e


@router.get("/interview-submissions", response_model=List[SubmissionRead])
async def list_my_submissions(current_user: dict = Depends(get_current_user)) -> List[SubmissionRead]:
    return await InterviewService.list_submissions(user_id=current_user["user_id"])
