"""
Comment Routes

List and add comments on a request; edit and delete single comments.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from ...deps import get_current_user_dep, read_payload
from ...negotiation import action_response, wants_json
from ....domain.models import AuthContext
from ....services.comment_service import CommentService
from .schemas import ActionResponse, CommentBody, CommentListResponse, CreateCommentResponse, UpdateCommentBody

router = APIRouter()


@router.get("/{request_id}/comments", response_model=CommentListResponse)
async def list_comments(
    request_id: int,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """Comments on a request; internal ones only for admins and the assignee."""
    service = CommentService()
    return CommentListResponse(comments=service.list_comments(request_id, actor))


@router.post("/{request_id}/comments", response_model=CreateCommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    request_id: int,
    request: Request,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """Add a comment; notifies the creator and any mentioned users."""
    body = await read_payload(request, CommentBody)
    service = CommentService()
    comment_id = service.add_comment(
        request_id,
        actor,
        body.content,
        is_internal=body.is_internal,
        parent_comment_id=body.parent_comment_id,
        mentioned_user_ids=body.mentioned_user_ids,
    )
    if not wants_json(request):
        return RedirectResponse(url=f"/requests/{request_id}#comments", status_code=status.HTTP_303_SEE_OTHER)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={"success": True, "message": "Đã thêm bình luận", "comment_id": comment_id}
    )


@router.put("/comments/{comment_id}", response_model=ActionResponse)
async def update_comment(
    comment_id: int,
    request: Request,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """Edit a comment (author or admin)."""
    body = await read_payload(request, UpdateCommentBody)
    service = CommentService()
    request_id = service.update_comment(comment_id, actor, body.content)
    return action_response(request, "Đã cập nhật bình luận", f"/requests/{request_id}#comments")


@router.delete("/comments/{comment_id}", response_model=ActionResponse)
async def delete_comment(
    comment_id: int,
    request: Request,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """Delete a comment and its replies (author or admin)."""
    service = CommentService()
    request_id = service.delete_comment(comment_id, actor)
    return action_response(request, "Đã xóa bình luận", f"/requests/{request_id}#comments")
