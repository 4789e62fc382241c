"""
Translation of service-layer exceptions into HTTP errors.
"""

from fastapi import HTTPException, status

from evenza_api.app.core.exceptions import ConflictError, NotFoundError


def http_error(exc: Exception) -> HTTPException:
    """Map an exception raised by a service to the matching ``HTTPException``."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, PermissionError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
