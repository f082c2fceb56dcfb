"""
Request CRUD Routes

Create, list, detail, assign and delete endpoints.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from ...deps import get_current_user_dep, read_payload
from ...negotiation import action_response, wants_json
from ....config.settings import settings
from ....domain.models import AuthContext, NewRequest, RequestFilters
from ....services.request_service import RequestService
from ....utils.logger import get_logger
from .schemas import (
    ActionResponse, AssignBody, CreateRequestBody, CreateRequestResponse,
    RequestDetailResponse, RequestListResponse, total_pages
)

logger = get_logger(__name__)
router = APIRouter()


@router.post("", response_model=CreateRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(
    request: Request,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """
    Create a new request.

    With isDraft the request is saved as a draft visible only to its creator;
    otherwise a title is required and the request starts as "Mới".
    """
    body = await read_payload(request, CreateRequestBody)
    service = RequestService()
    created = service.create_request(actor, NewRequest(**body.model_dump()))

    logger.info(
        f"Created request: {created.request_id}",
        extra={"request_id": created.request_id, "user_id": actor.user_id}
    )

    message = "Đã lưu bản nháp" if body.is_draft else "Tạo yêu cầu thành công"
    if not wants_json(request):
        target = "/requests/drafts" if body.is_draft else f"/requests/{created.request_id}"
        return RedirectResponse(url=target, status_code=status.HTTP_303_SEE_OTHER)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=CreateRequestResponse(message=message, request=created).model_dump(mode="json")
    )


@router.get("", response_model=RequestListResponse)
async def list_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=100),
    status_id: Optional[int] = Query(None, alias="statusId"),
    priority_id: Optional[int] = Query(None, alias="priorityId"),
    search: Optional[str] = Query(None, max_length=200),
    actor: AuthContext = Depends(get_current_user_dep)
):
    """
    List requests visible to the caller (drafts never included).

    Admins see every published request; others see what they created
    or are assigned.
    """
    service = RequestService()
    filters = RequestFilters(status_id=status_id, priority_id=priority_id, search=search)
    items, total = service.list_requests(actor, filters, page=page, limit=limit)
    return RequestListResponse(
        items=items, page=page, limit=limit, total=total, total_pages=total_pages(total, limit)
    )


@router.get("/{request_id}", response_model=RequestDetailResponse)
async def get_request(
    request_id: int,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """Request detail with workflow steps, status history and approvals."""
    service = RequestService()
    detail = service.get_request_detail(request_id, actor)
    return RequestDetailResponse(**detail.model_dump())


@router.post("/{request_id}/assign", response_model=ActionResponse)
async def assign_request(
    request_id: int,
    request: Request,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """Assign a request to a user (admin only)."""
    body = await read_payload(request, AssignBody)
    service = RequestService()
    service.assign_request(request_id, body.assigned_user_id, actor)
    return action_response(request, "Đã phân công yêu cầu", f"/requests/{request_id}")


@router.delete("/{request_id}", response_model=ActionResponse)
async def delete_request(
    request_id: int,
    request: Request,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """Delete a request and its history (admin only)."""
    service = RequestService()
    service.delete_request(request_id, actor)
    return action_response(request, "Đã xóa yêu cầu", "/requests")
