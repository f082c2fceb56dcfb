"""Comment Service - Discussion on requests"""
from typing import List, Optional

from ..domain.errors import CommentNotFoundError, PermissionDeniedError, RequestNotFoundError, ValidationError
from ..domain.models import AuthContext, Comment, Request
from ..engine.permission_guard import PermissionGuard
from ..repositories.comment_repo import CommentRepository
from ..repositories.request_repo import RequestRepository
from ..repositories.tables import CommentRow
from ..utils.logger import get_logger
from .notification_service import NotificationService

logger = get_logger(__name__)


def _require_content(content: Optional[str]) -> str:
    text = (content or "").strip()
    if not text:
        raise ValidationError("Nội dung bình luận không được để trống", details={"field": "content"})
    return text


class CommentService:
    """Service for comment operations"""

    def __init__(self):
        self.request_repo = RequestRepository()
        self.comment_repo = CommentRepository()
        self.permission_guard = PermissionGuard()
        self.notification_service = NotificationService()

    def _get_accessible_request(self, request_id: int, actor: AuthContext) -> Request:
        request = self.request_repo.get_request(request_id)
        if request is None or self.permission_guard.is_hidden_draft(actor.user_id, request):
            raise RequestNotFoundError("Request không tồn tại", details={"request_id": request_id})
        if not self.permission_guard.can_access_comments(actor, request):
            raise PermissionDeniedError(
                "Bạn không có quyền truy cập bình luận của yêu cầu này",
                details={"request_id": request_id}
            )
        return request

    def list_comments(self, request_id: int, actor: AuthContext) -> List[Comment]:
        """Comments visible to the actor; internal ones only for admins and the assignee"""
        request = self._get_accessible_request(request_id, actor)
        include_internal = self.permission_guard.can_see_internal_comments(actor, request)
        return self.comment_repo.list_for_request(request_id, include_internal=include_internal)

    def add_comment(
        self,
        request_id: int,
        actor: AuthContext,
        content: Optional[str],
        is_internal: bool = False,
        parent_comment_id: Optional[int] = None,
        mentioned_user_ids: Optional[List[str]] = None
    ) -> int:
        """
        Add a comment and notify the creator and mentioned users

        `is_internal` is silently dropped for users who cannot see internal comments.
        """
        text = _require_content(content)

        request = self._get_accessible_request(request_id, actor)
        internal = bool(is_internal) and self.permission_guard.can_see_internal_comments(actor, request)
        mentions = [m for m in (mentioned_user_ids or []) if m]

        comment_id = self.comment_repo.create_comment(
            request_id=request_id,
            user_id=actor.user_id,
            content=text,
            is_internal=internal,
            parent_comment_id=parent_comment_id,
            mentioned_user_ids=mentions,
        )

        if not internal:
            self.notification_service.notify_comment(request, actor)
        if mentions:
            self.notification_service.notify_mentions(request, actor, mentions)
        return comment_id

    def _get_modifiable_comment(self, comment_id: int, actor: AuthContext, action: str) -> CommentRow:
        comment = self.comment_repo.get_comment(comment_id)
        if comment is None:
            raise CommentNotFoundError("Bình luận không tồn tại", details={"comment_id": comment_id})
        if not self.permission_guard.can_modify_comment(actor, comment.user_id):
            logger.warning(
                f"Denied {action} on comment {comment_id}",
                extra={"request_id": comment.request_id, "user_id": actor.user_id, "action": action}
            )
            raise PermissionDeniedError(
                "Bạn chỉ có thể sửa hoặc xóa bình luận của mình",
                details={"comment_id": comment_id}
            )
        return comment

    def update_comment(self, comment_id: int, actor: AuthContext, content: Optional[str]) -> int:
        """Edit a comment (author or admin); marks it edited. Returns the request id."""
        text = _require_content(content)
        comment = self._get_modifiable_comment(comment_id, actor, "update_comment")
        self.comment_repo.update_content(comment_id, text)
        return comment.request_id

    def delete_comment(self, comment_id: int, actor: AuthContext) -> int:
        """Delete a comment and its replies (author or admin). Returns the request id."""
        comment = self._get_modifiable_comment(comment_id, actor, "delete_comment")
        self.comment_repo.delete_comment(comment_id)
        return comment.request_id
