"""
Domain exceptions raised by the service layer.

They subclass the builtin exception an endpoint would otherwise catch
(``ValueError`` / ``PermissionError``), so a handler that only knows the
builtin still behaves sensibly.
"""


class NotFoundError(ValueError):
    """Requested record does not exist (HTTP 404)."""


class ConflictError(ValueError):
    """Record clashes with an existing one, e.g. a duplicate email (HTTP 409)."""


class PermissionDenied(PermissionError):
    """Caller is authenticated but not allowed to perform the action (HTTP 403)."""
