"""
Admin inbox: contact messages and user queries in one list.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import require_admin
from evenza_api.app.schemas.message import InboxResponse, MessageCreate, MessageRead, MessageUpdate
from evenza_api.app.services.message_service import MessageService


router = APIRouter()


@router.get("", response_model=InboxResponse)
async def list_inbox(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: dict = Depends(require_admin),
) -> InboxResponse:
    """Messages and queries merged into one paginated list.

    - **search** - substring of name, email, subject or text.
    - **status** - exact status; `all` shows everything.

    Each item carries ``type`` (`message` or `query`).  Within a page
    items are ordered newest first.
    """
    return await MessageService.list_inbox(page=page, limit=limit, search=search, status=status_filter)


@router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def create_message(data: MessageCreate, current_user: dict = Depends(require_admin)) -> MessageRead:
    return await MessageService.create_message(data)


@router.get("/{message_id}", response_model=MessageRead)
async def get_message(message_id: int, current_user: dict = Depends(require_admin)) -> MessageRead:
    try:
        return await MessageService.get_message(message_id)
    except ValueError as e:
        raise http_error(e) from e


@router.patch("/{message_id}", response_model=MessageRead)
@router.put("/{message_id}", response_model=MessageRead)
async def update_message(
    message_id: int,
    updates: MessageUpdate,
    current_user: dict = Depends(require_admin),
) -> MessageRead:
    """Change the status of a message or the admin's notes on it."""
    try:
        return await MessageService.update_message(message_id, updates.model_dump(exclude_none=True), current_user)
    except ValueError as e:
        raise http_error(e) from e


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(message_id: int, current_user: dict = Depends(require_admin)) -> None:
    try:
        await MessageService.delete_message(message_id, current_user)
    except ValueError as e:
        raise http_error(e) from e
    return None
