"""
First-run setup: creating the initial administrator.
"""

from fastapi import APIRouter, Depends, Response, status

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import get_optional_user
from evenza_api.app.schemas.user import SetupAdminRequest, SetupAdminResponse, UserSummary
from evenza_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/admin", response_model=SetupAdminResponse)
async def setup_admin(
    data: SetupAdminRequest,
    response: Response,
    current_user: dict = Depends(get_optional_user),
) -> SetupAdminResponse:
    """Create (201) or promote (200) an administrator.

    Anyone may call this while no administrator exists; the first one
    becomes super admin.  Afterwards the caller must be a super admin.
    """
    try:
        created, message, user = await UserService.setup_admin(data, current_user)
    except (ValueError, PermissionError) as e:
        raise http_error(e) from e
    if created:
        response.status_code = status.HTTP_201_CREATED
    return SetupAdminResponse(
        message=message,
        user=UserSummary(id=user.id, name=user.name, email=user.email, role=user.role),
    )
