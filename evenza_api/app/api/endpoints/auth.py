"""
Authentication endpoints.

Login issues a JWT in three places at once: the response body (for API
clients that send ``Authorization: Bearer``), an httpOnly cookie (for
the browser) and a server-side session cookie.  ``core.security``
accepts any of them, in that order.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.config import settings
from evenza_api.app.core.security import create_user_token, get_current_user, is_admin
from evenza_api.app.schemas.common import MessageResponse
from evenza_api.app.schemas.user import (
    AdminCheckResponse,
    LoginResponse,
    TokenResponse,
    UserLogin,
    UserRead,
    UserRegister,
    UserSummary,
)
from evenza_api.app.services.session_service import SessionService
from evenza_api.app.services.user_service import UserService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(data: UserRegister) -> UserRead:
    """Create a regular user account.  409 if the email is already registered."""
    try:
        return await UserService.register(data)
    except ValueError as e:
        raise http_error(e) from e


@router.post("/login", response_model=LoginResponse)
async def login(data: UserLogin, response: Response) -> LoginResponse:
    """Sign in with email and password.

    With ``remember_me`` the cookies and token live for
    ``REMEMBER_ME_DAYS`` days, otherwise for
    ``ACCESS_TOKEN_EXPIRE_MINUTES``.
    """
    user = await UserService.authenticate(data.email, data.password)
    if not user:
        logger.info("Failed login for %s", data.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    if data.remember_me:
        max_age = settings.remember_me_days * 24 * 60 * 60
    else:
        max_age = settings.access_token_expire_minutes * 60
    token = create_user_token(user, max_age)
    session_id = await SessionService.create(user["id"], max_age)

    cookie_options = {
        "max_age": max_age,
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": "lax",
        "path": "/",
    }
    response.set_cookie(settings.auth_cookie_name, token, **cookie_options)
    response.set_cookie(settings.session_cookie_name, session_id, **cookie_options)
    logger.info("User %s logged in", user["email"])
    return LoginResponse(
        message="Login successful",
        user=UserSummary(id=user["id"], name=user["name"], email=user["email"], role=user["role"]),
        token=token,
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request, response: Response) -> MessageResponse:
    """Drop the server-side session and clear both auth cookies."""
    session_id = request.cookies.get(settings.session_cookie_name)
    if session_id:
        await SessionService.delete(session_id)
    response.delete_cookie(settings.auth_cookie_name, path="/")
    response.delete_cookie(settings.session_cookie_name, path="/")
    return MessageResponse(message="Logged out successfully")


@router.get("/token", response_model=TokenResponse)
async def issue_token(current_user: dict = Depends(get_current_user)) -> TokenResponse:
    """Exchange any valid credential (e.g. the session cookie) for a fresh bearer token."""
    try:
        user = await UserService.get_user(current_user["user_id"])
    except ValueError as e:
        raise http_error(e) from e
    return TokenResponse(token=create_user_token(user.model_dump()))


@router.get("/check-admin", response_model=AdminCheckResponse)
async def check_admin(current_user: dict = Depends(get_current_user)) -> AdminCheckResponse:
    """Used by the admin panel to decide whether to render."""
    if not is_admin(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized as admin")
    return AdminCheckResponse(
        user=UserSummary(
            id=current_user["user_id"],
            name=current_user["name"],
            email=current_user["email"],
            role=current_user["role"],
        )
    )
