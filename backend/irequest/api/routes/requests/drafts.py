"""
Draft Routes

The caller's own drafts: list, count and publish.
"""

from fastapi import APIRouter, Depends, Query, Request

from ...deps import get_current_user_dep
from ...negotiation import action_response
from ....config.settings import settings
from ....domain.models import AuthContext
from ....services.request_service import RequestService
from .schemas import ActionResponse, CountResponse, RequestListResponse, total_pages

router = APIRouter()


@router.get("/drafts", response_model=RequestListResponse)
async def list_drafts(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=100),
    actor: AuthContext = Depends(get_current_user_dep)
):
    """Drafts owned by the caller, most recently edited first."""
    service = RequestService()
    items, total = service.get_drafts(actor, page=page, limit=limit)
    return RequestListResponse(
        items=items, page=page, limit=limit, total=total, total_pages=total_pages(total, limit)
    )


@router.get("/drafts/count", response_model=CountResponse)
async def count_drafts(actor: AuthContext = Depends(get_current_user_dep)):
    service = RequestService()
    return CountResponse(count=service.count_drafts(actor))


@router.post("/{request_id}/publish", response_model=ActionResponse)
async def publish_draft(
    request_id: int,
    request: Request,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """
    Publish one of the caller's drafts.

    Someone else's draft, a non-draft or a missing id all answer 404.
    """
    service = RequestService()
    service.publish_draft(request_id, actor)
    return action_response(request, "Đã gửi yêu cầu", f"/requests/{request_id}")
