"""
Top‑level API router.

Aggregates the domain routers under one ``APIRouter``; ``create_app``
mounts it at ``/api``.  When a new domain is added, include its router
here.
"""

from fastapi import APIRouter

from .endpoints import (
    auth,
    content,
    events,
    health,
    interviews,
    media,
    queries,
    settings,
    setup,
    trips,
    upload,
    user,
)
from .endpoints.admin import (
    content as admin_content,
    dashboard as admin_dashboard,
    events as admin_events,
    interviews as admin_interviews,
    messages as admin_messages,
    payments as admin_payments,
    settings as admin_settings,
    trips as admin_trips,
    users as admin_users,
)


router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(setup.router, prefix="/setup", tags=["auth"])
router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(trips.router, prefix="/trips", tags=["trips"])
router.include_router(interviews.router, prefix="/interviews", tags=["interviews"])
router.include_router(queries.router, prefix="/queries", tags=["queries"])
router.include_router(user.router, prefix="/user", tags=["user"])
router.include_router(content.router, prefix="/content", tags=["content"])
router.include_router(settings.router, prefix="/settings", tags=["settings"])
router.include_router(media.router, prefix="/media", tags=["media"])
router.include_router(upload.router, prefix="/upload", tags=["upload"])
router.include_router(health.router, prefix="/health", tags=["health"])

# Admin panel
router.include_router(admin_dashboard.router, prefix="/admin", tags=["admin"])
router.include_router(admin_events.router, prefix="/admin/events", tags=["admin"])
router.include_router(admin_trips.router, prefix="/admin/trips", tags=["admin"])
router.include_router(admin_interviews.router, prefix="/admin/interviews", tags=["admin"])
router.include_router(
    admin_interviews.submissions_router, prefix="/admin/interview-submissions", tags=["admin"]
)
router.include_router(admin_users.router, prefix="/admin/users", tags=["admin"])
router.include_router(admin_messages.router, prefix="/admin/messages", tags=["admin"])
router.include_router(admin_payments.router, prefix="/admin/payments", tags=["admin"])
router.include_router(admin_content.router, prefix="/admin/content", tags=["admin"])
router.include_router(admin_settings.router, prefix="/admin/settings", tags=["admin"])
