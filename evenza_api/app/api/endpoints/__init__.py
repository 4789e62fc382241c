"""
Endpoint modules.

Each module defines an ``APIRouter`` for one area of the platform.
Routers are included by ``evenza_api.app.api.router``.
"""
