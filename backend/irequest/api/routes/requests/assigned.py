"""
Personal List Routes

- /my: requests the caller created
- /assigned: requests assigned to the caller, most urgent first
- /assigned-stats: counters for the assigned view
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ...deps import get_current_user_dep
from ....config.settings import settings
from ....domain.models import AssignedStats, AuthContext, RequestFilters
from ....services.request_service import RequestService
from .schemas import RequestListResponse, total_pages

router = APIRouter()


class AssignedStatsResponse(BaseModel):
    success: bool = True
    stats: AssignedStats


@router.get("/my", response_model=RequestListResponse)
async def list_my_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=100),
    status_id: Optional[int] = Query(None, alias="statusId"),
    search: Optional[str] = Query(None, max_length=200),
    actor: AuthContext = Depends(get_current_user_dep)
):
    service = RequestService()
    filters = RequestFilters(status_id=status_id, search=search)
    items, total = service.list_my_requests(actor, filters, page=page, limit=limit)
    return RequestListResponse(
        items=items, page=page, limit=limit, total=total, total_pages=total_pages(total, limit)
    )


@router.get("/assigned", response_model=RequestListResponse)
async def list_assigned(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=100),
    status_id: Optional[int] = Query(None, alias="statusId"),
    priority_id: Optional[int] = Query(None, alias="priorityId"),
    search: Optional[str] = Query(None, max_length=200),
    actor: AuthContext = Depends(get_current_user_dep)
):
    """
    Requests assigned to the caller.

    Ordered by priority (urgent first) then newest; each item carries
    is_new for requests created in the last 24 hours.
    """
    service = RequestService()
    filters = RequestFilters(status_id=status_id, priority_id=priority_id, search=search)
    items, total = service.list_assigned(actor, filters, page=page, limit=limit)
    return RequestListResponse(
        items=items, page=page, limit=limit, total=total, total_pages=total_pages(total, limit)
    )


@router.get("/assigned-stats", response_model=AssignedStatsResponse)
async def assigned_stats(actor: AuthContext = Depends(get_current_user_dep)):
    service = RequestService()
    return AssignedStatsResponse(stats=service.assigned_stats(actor))
