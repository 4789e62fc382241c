"""
Support queries submitted by signed-in users.
"""

from fastapi import APIRouter, Depends, Query, status

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import get_current_user, require_admin
from evenza_api.app.schemas.common import Pagination
from evenza_api.app.schemas.message import QueryCreate, QueryListResponse, QueryRead, QueryResponse
from evenza_api.app.services.message_service import MessageService


router = APIRouter()


@router.post("", response_model=QueryRead, status_code=status.HTTP_201_CREATED)
async def create_query(data: QueryCreate, current_user: dict = Depends(get_current_user)) -> QueryRead:
    """Submit a question to the organisers.  The subject defaults to "General Query"."""
    return await MessageService.create_query(data, current_user["user_id"])


@router.get("", response_model=QueryListResponse)
async def list_my_queries(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: dict = Depends(get_current_user),
) -> QueryListResponse:
    queries, total = await MessageService.list_user_queries(current_user["user_id"], page, limit)
    return QueryListResponse(queries=queries, pagination=Pagination.build(total, page, limit))


@router.get("/{query_id}", response_model=QueryRead)
async def get_query(query_id: int, current_user: dict = Depends(get_current_user)) -> QueryRead:
    """Only the author of the query or an admin may read it."""
    try:
        return await MessageService.get_query(query_id, current_user)
    except (ValueError, PermissionError) as e:
        raise http_error(e) from e


@router.put("/{query_id}", response_model=QueryRead)
async def respond_to_query(
    query_id: int,
    data: QueryResponse,
    current_user: dict = Depends(require_admin),
) -> QueryRead:
    """Answer a query (admin only); its status becomes ``answered`` unless ``closed`` is given."""
    try:
        return await MessageService.respond_to_query(query_id, data.response, data.status, current_user)
    except ValueError as e:
        raise http_error(e) from e
