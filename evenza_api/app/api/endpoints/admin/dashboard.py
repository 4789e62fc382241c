"""
Admin dashboard and activity log.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from evenza_api.app.core.security import require_admin
from evenza_api.app.schemas.activity import ActivityRead, AdminDashboard
from evenza_api.app.services.activity_service import ActivityService
from evenza_api.app.services.dashboard_service import DashboardService


router = APIRouter()


@router.get("/dashboard", response_model=AdminDashboard)
async def get_dashboard(current_user: dict = Depends(require_admin)) -> AdminDashboard:
    """Totals, recent activity and six-month charts for the admin home page."""
    return await DashboardService.admin_dashboard()


@router.get("/activity", response_model=List[ActivityRead])
async def list_activity(
    user_id: Optional[int] = Query(None),
    action: Optional[str] = Query(None),
    resource_type: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    current_user: dict = Depends(require_admin),
) -> List[ActivityRead]:
    logs = await ActivityService.list_logs(
        user_id=user_id, resource_type=resource_type, action=action, limit=limit, offset=offset
    )
    return [ActivityRead(**item) for item in logs]
