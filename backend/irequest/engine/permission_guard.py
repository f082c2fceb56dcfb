"""Permission Guard - Authorization rules for request actions"""
from typing import Optional

from ..config.settings import settings
from ..domain.enums import StatusKind
from ..domain.models import AuthContext, Request
from ..utils.logger import get_logger

logger = get_logger(__name__)


class PermissionGuard:
    """
    Permission enforcement for request operations

    Rules:
    - Creator and assignee may process (approve/reject/change status)
    - Admins may process only when admin_can_process_any_request is set
    - Drafts are visible to their creator alone
    - Non-draft requests are visible to creator, assignee and admins
    - Comments: admin, creator or assignee; internal ones admin or assignee
    - A comment is edited or deleted by its author or an admin
    - Assign and delete are admin-only
    """

    def __init__(self, admin_can_process: Optional[bool] = None):
        self._admin_can_process = admin_can_process

    @property
    def admin_can_process(self) -> bool:
        if self._admin_can_process is None:
            return settings.admin_can_process_any_request
        return self._admin_can_process

    @staticmethod
    def _is_same_user(user_id: Optional[str], other_id: Optional[str]) -> bool:
        """Exact id match; a missing id on either side never matches"""
        return bool(user_id) and bool(other_id) and user_id == other_id

    def is_creator(self, user_id: str, request: Request) -> bool:
        return self._is_same_user(user_id, request.users_id)

    def is_assignee(self, user_id: str, request: Request) -> bool:
        return self._is_same_user(user_id, request.assigned_user_id)

    def is_hidden_draft(self, user_id: str, request: Request) -> bool:
        """Someone else's draft; callers report it as a missing request"""
        return request.status_kind == StatusKind.DRAFT and not self.is_creator(user_id, request)

    def can_process(self, user_id: str, request: Optional[Request], is_admin: bool = False) -> bool:
        """Creator or assignee (or admin, when explicitly enabled)"""
        if request is None:
            return False
        if self.is_creator(user_id, request) or self.is_assignee(user_id, request):
            return True
        return is_admin and self.admin_can_process

    def can_view(self, ctx: AuthContext, request: Request) -> bool:
        """Detail visibility; drafts are private to their creator"""
        if request.status_kind == StatusKind.DRAFT:
            return self.is_creator(ctx.user_id, request)
        if ctx.is_admin:
            return True
        return self.is_creator(ctx.user_id, request) or self.is_assignee(ctx.user_id, request)

    def can_access_comments(self, ctx: AuthContext, request: Request) -> bool:
        if ctx.is_admin:
            return True
        return self.is_creator(ctx.user_id, request) or self.is_assignee(ctx.user_id, request)

    def can_see_internal_comments(self, ctx: AuthContext, request: Request) -> bool:
        return ctx.is_admin or self.is_assignee(ctx.user_id, request)

    def can_modify_comment(self, ctx: AuthContext, author_id: str) -> bool:
        """Edit and delete: the author or an admin"""
        return ctx.is_admin or self._is_same_user(ctx.user_id, author_id)

    def can_assign(self, ctx: AuthContext) -> bool:
        return ctx.is_admin

    def can_delete(self, ctx: AuthContext) -> bool:
        return ctx.is_admin
