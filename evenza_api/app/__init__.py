"""
Application package initializer.

Each domain (events, trips, interviews, users, payments, content,
messages) exposes a router from ``api/endpoints`` backed by a service
class in ``services`` and pydantic models in ``schemas``.
"""

from .main import app  # noqa: F401
