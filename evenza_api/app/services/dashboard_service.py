"""
Aggregations for the admin and user dashboards.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List

from evenza_api.app.core.db import get_connection
from evenza_api.app.schemas.activity import (
    ActivityRead,
    AdminDashboard,
    EnrolledTrip,
    MonthlyPoint,
    RegisteredEvent,
    UserDashboard,
)
from evenza_api.app.services.activity_service import ActivityService
from evenza_api.app.services.event_service import EVENT_SELECT, EventService
from evenza_api.app.services.interview_service import InterviewService
from evenza_api.app.services.trip_service import TRIP_SELECT, TripService
from evenza_api.app.services.user_service import UserService


logger = logging.getLogger(__name__)

AVAILABLE_LIMIT = 6
CHART_MONTHS = 6

_TOTAL_TABLES = ("users", "events", "trips", "interviews", "payments", "messages", "queries")


def last_months(count: int, now: datetime = None) -> List[str]:
    """Return ``count`` month keys (``YYYY-MM``) ending with the current month, oldest first."""
    now = now or datetime.now(timezone.utc)
    year, month = now.year, now.month
    keys = []
    for _ in range(count):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


class DashboardService:

    @classmethod
    async def admin_dashboard(cls) -> AdminDashboard:
        months = last_months(CHART_MONTHS)
        conn = get_connection()
        try:
            totals = {
                table: conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
                for table in _TOTAL_TABLES
            }
            growth_rows = conn.execute(
                "SELECT strftime('%Y-%m', created_at) AS month, COUNT(*) AS value "
                "FROM users WHERE strftime('%Y-%m', created_at) >= ? GROUP BY month",
                (months[0],),
            ).fetchall()
            revenue_rows = conn.execute(
                "SELECT strftime('%Y-%m', COALESCE(verified_at, created_at)) AS month, SUM(amount) AS value "
                "FROM payments WHERE status = 'completed' "
                "AND strftime('%Y-%m', COALESCE(verified_at, created_at)) >= ? GROUP BY month",
                (months[0],),
            ).fetchall()
        finally:
            conn.close()

        growth = {row["month"]: row["value"] for row in growth_rows}
        revenue = {row["month"]: row["value"] for row in revenue_rows}
        recent = await ActivityService.list_logs(limit=10)
        return AdminDashboard(
            totals=totals,
            recent_activity=[ActivityRead(**item) for item in recent],
            user_growth=[MonthlyPoint(month=m, value=growth.get(m, 0)) for m in months],
            revenue=[MonthlyPoint(month=m, value=revenue.get(m, 0) or 0) for m in months],
            activity_by_type=await ActivityService.counts_by_resource_type(),
        )

    @classmethod
    async def user_dashboard(cls, user_id: int) -> UserDashboard:
        """Everything the user's dashboard page shows, in one response."""
        user = await UserService.get_user(user_id)
        conn = get_connection()
        try:
            event_rows = conn.execute(
                f"SELECT * FROM ({EVENT_SELECT}) e "
                "JOIN (SELECT event_id, tickets, payment_status, registered_at FROM event_registrations "
                "WHERE user_id = ?) r ON r.event_id = e.id ORDER BY e.date ASC",
                (user_id,),
            ).fetchall()
            trip_rows = conn.execute(
                f"SELECT * FROM ({TRIP_SELECT}) t "
                "JOIN (SELECT trip_id, payment_status, enrolled_at FROM trip_participants "
                "WHERE user_id = ?) p ON p.trip_id = t.id ORDER BY t.date ASC",
                (user_id,),
            ).fetchall()
            query_count = conn.execute("SELECT COUNT(*) FROM queries WHERE user_id = ?", (user_id,)).fetchone()[0]
        finally:
            conn.close()

        registered_events = [RegisteredEvent(**dict(row)) for row in event_rows]
        enrolled_trips = [EnrolledTrip(**dict(row)) for row in trip_rows]
        submissions = await InterviewService.list_submissions(user_id=user_id)
        stats: Dict[str, int] = {
            "events": len(registered_events),
            "trips": len(enrolled_trips),
            "interviews": len(submissions),
            "queries": query_count,
        }
        return UserDashboard(
            user=user,
            stats=stats,
            registered_events=registered_events,
            enrolled_trips=enrolled_trips,
            interview_submissions=submissions,
            available_events=await EventService.list_published(limit=AVAILABLE_LIMIT),
            available_trips=await TripService.list_published(limit=AVAILABLE_LIMIT),
            available_interviews=await InterviewService.list_published(limit=AVAILABLE_LIMIT),
        )
