"""
Security helpers for password hashing and request authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC‑SHA256 signatures and base64url encoding.  Tokens embed the
user's id (``sub``), email, name and role together with an expiration
timestamp (``exp``).  Passwords are hashed with PBKDF2‑HMAC‑SHA256.

A request is authenticated by the first credential found in this order:

1. ``Authorization: Bearer <jwt>`` header;
2. the JWT cookie (``settings.auth_cookie_name``, ``authToken`` by default);
3. the opaque server‑side session cookie (``settings.session_cookie_name``).

Whatever the source, the user is re-read from the database so that
deleted or disabled accounts and role changes take effect immediately.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import time
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings


logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLE_SUPER_ADMIN = "super_admin"
ROLES = (ROLE_USER, ROLE_ADMIN, ROLE_SUPER_ADMIN)
ADMIN_ROLES = (ROLE_ADMIN, ROLE_SUPER_ADMIN)

PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC‑SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT token with the given payload.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. ``{"sub": "1", "role": "user"}``).
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.

    Returns
    -------
    str
        A token of the form ``header.payload.signature``.
    """
    to_encode = data.copy()
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def create_user_token(user: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Issue an access token for a user record (dict or ``sqlite3.Row``)."""
    claims = {
        "sub": str(user["id"]),
        "email": user["email"],
        "name": user["name"],
        "role": user["role"],
    }
    return create_access_token(claims, expires_delta)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify and decode a JWT token.

    Returns the payload dictionary when the signature matches and the
    ``exp`` claim lies in the future, otherwise ``None``.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    expected_sig = _sign(signing_input, settings.secret_key)
    try:
        actual_sig = _b64_url_decode(signature_b64)
    except (ValueError, TypeError):
        return None
    if not hmac.compare_digest(expected_sig, actual_sig):
        return None
    try:
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    try:
        if data.get("exp") is None or int(data["exp"]) < int(time.time()):
            return None
    except (TypeError, ValueError):
        return None
    return data


security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _resolve_user_id(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[int]:
    """Return the user id carried by the request, or ``None`` if it has no credentials.

    Raises 401 when a credential is present but invalid.
    """
    token = None
    if credentials is not None:
        token = credentials.credentials
    elif request.cookies.get(settings.auth_cookie_name):
        token = request.cookies[settings.auth_cookie_name]

    if token is not None:
        payload = decode_access_token(token)
        if not payload:
            raise _unauthorized("Invalid or expired token")
        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise _unauthorized("Invalid token subject")

    session_id = request.cookies.get(settings.session_cookie_name)
    if session_id:
        from evenza_api.app.services.session_service import SessionService

        user_id = await SessionService.resolve(session_id)
        if user_id is None:
            raise _unauthorized("Session expired")
        return user_id
    return None


async def _load_user(user_id: int) -> Dict[str, Any]:
    from evenza_api.app.core.db import get_connection

    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT id, name, email, role, disabled FROM users WHERE id = ?",
            (user_id,),
        ).fetchone()
    finally:
        conn.close()
    if not row:
        raise _unauthorized("User no longer exists")
    if row["disabled"]:
        raise _unauthorized("User account disabled")
    return {
        "user_id": row["id"],
        "email": row["email"],
        "name": row["name"],
        "role": row["role"],
    }


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Dict[str, Any]]:
    """Dependency returning the current user, or ``None`` for anonymous requests."""
    user_id = await _resolve_user_id(request, credentials)
    if user_id is None:
        return None
    return await _load_user(user_id)


async def get_current_user(
    current_user: Optional[Dict[str, Any]] = Depends(get_optional_user),
) -> Dict[str, Any]:
    """Dependency that retrieves the current authenticated user.

    Returns a dictionary with ``user_id``, ``email``, ``name`` and
    ``role``.  Raises HTTP 401 if the request carries no credentials.
    """
    if current_user is None:
        raise _unauthorized("Not authenticated")
    return current_user


def require_roles(*roles: str) -> Callable[..., Dict[str, Any]]:
    """Dependency factory to enforce that the current user has one of the specified roles.

    Use as ``Depends(require_roles("admin", "super_admin"))``.  An
    authenticated user with any other role gets HTTP 403.
    """

    async def _role_dependency(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if current_user.get("role") not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _role_dependency


require_admin = require_roles(*ADMIN_ROLES)


def is_admin(current_user: Optional[Dict[str, Any]]) -> bool:
    return bool(current_user) and current_user.get("role") in ADMIN_ROLES


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    A 16‑byte random salt is generated for each password.  The result
    contains the salt and hash in hex separated by ``$``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored ``salt$hash`` string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except (AttributeError, ValueError):
        logger.warning("Stored password hash has an unexpected format")
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
