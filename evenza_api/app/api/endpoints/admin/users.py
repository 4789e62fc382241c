"""
User management for administrators.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import require_admin
from evenza_api.app.schemas.common import Pagination
from evenza_api.app.schemas.user import UserCreate, UserListResponse, UserRead, UserUpdate
from evenza_api.app.services.user_service import UserService


router = APIRouter()


@router.get("", response_model=UserListResponse)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    current_user: dict = Depends(require_admin),
) -> UserListResponse:
    """Список пользователей.

    - **page**, **limit** - пагинация.
    - **search** - поиск по имени, email и номеру студенческого.
    - **role** - фильтр по роли (`user`, `admin`, `super_admin`).
    """
    users, total = await UserService.list_users(page=page, limit=limit, search=search, role=role)
    return UserListResponse(users=users, pagination=Pagination.build(total, page, limit))


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(data: UserCreate, current_user: dict = Depends(require_admin)) -> UserRead:
    try:
        return await UserService.create_user(data, current_user)
    except (ValueError, PermissionError) as e:
        raise http_error(e) from e


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int, current_user: dict = Depends(require_admin)) -> UserRead:
    try:
        return await UserService.get_user(user_id)
    except ValueError as e:
        raise http_error(e) from e


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    updates: UserUpdate,
    current_user: dict = Depends(require_admin),
) -> UserRead:
    """Update a user.  Only super admins may grant or revoke the super admin role."""
    try:
        return await UserService.update_user(user_id, updates.model_dump(exclude_none=True), current_user)
    except (ValueError, PermissionError) as e:
        raise http_error(e) from e


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, current_user: dict = Depends(require_admin)) -> None:
    """Delete a user.  Admins cannot delete super admins or themselves."""
    try:
        await UserService.delete_user(user_id, current_user)
    except (ValueError, PermissionError) as e:
        raise http_error(e) from e
    return None
