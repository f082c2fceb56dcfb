"""
Request Actions Routes

Lifecycle endpoints:
- Approve / Reject
- Start processing
- Direct status change
"""

from fastapi import APIRouter, Depends, Request

from ...deps import get_current_user_dep, read_payload
from ...negotiation import action_response
from ....domain.models import AuthContext
from ....services.request_service import RequestService
from ....utils.logger import get_logger
from .schemas import ActionResponse, NoteBody, StatusBody

logger = get_logger(__name__)
router = APIRouter()

ASSIGNED_LIST_URL = "/requests/assigned"


def _detail_url(request_id: int) -> str:
    return f"/requests/{request_id}"


@router.post("/{request_id}/approve", response_model=ActionResponse)
async def approve(
    request_id: int,
    request: Request,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """
    Approve a request.

    Only the creator or assignee may approve. Marks the request approved
    and records the approver; the status itself is not changed.
    """
    body = await read_payload(request, NoteBody)
    service = RequestService()
    service.approve(request_id, actor, body.note)
    return action_response(request, "Đã phê duyệt yêu cầu", _detail_url(request_id))


@router.post("/{request_id}/reject", response_model=ActionResponse)
async def reject(
    request_id: int,
    request: Request,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """
    Reject a request.

    A non-empty reason is required. Browsers return to the assigned list.
    """
    body = await read_payload(request, NoteBody)
    service = RequestService()
    service.reject(request_id, actor, body.note)
    return action_response(request, "Đã từ chối yêu cầu", ASSIGNED_LIST_URL)


@router.post("/{request_id}/start-processing", response_model=ActionResponse)
async def start_processing(
    request_id: int,
    request: Request,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """Move a request to "Đang xử lý"."""
    service = RequestService()
    service.start_processing(request_id, actor)
    return action_response(request, "Đã bắt đầu xử lý yêu cầu", _detail_url(request_id))


@router.post("/{request_id}/status", response_model=ActionResponse)
async def update_status(
    request_id: int,
    request: Request,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """
    Set a request's status directly.

    Any seeded status is accepted unless strict transitions are enabled.
    """
    body = await read_payload(request, StatusBody)
    service = RequestService()
    service.update_status(request_id, body.status_id, body.note, actor)
    return action_response(request, "Cập nhật trạng thái thành công", _detail_url(request_id))
