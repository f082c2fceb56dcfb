"""Request Service - Request management business logic"""
import json
from typing import List, Optional, Tuple

from ..config.settings import settings
from ..domain.enums import DRAFT_DEFAULT_TITLE, PriorityName, StatusKind
from ..domain.errors import (
    PermissionDeniedError, RequestNotFoundError, UserNotFoundError, ValidationError
)
from ..domain.models import (
    AssignedStats, AuthContext, DashboardSummary, NewRequest, Request,
    RequestDetail, RequestFilters
)
from ..engine.engine import PROCESS_DENIED_MESSAGE, RequestLifecycleEngine
from ..repositories.audit_repo import AuditRepository
from ..repositories.lookup_repo import LookupRepository
from ..repositories.request_repo import RequestRepository
from ..repositories.status_registry import get_status_registry
from ..repositories.tables import RequestRow
from ..repositories.user_repo import UserRepository
from ..utils.logger import get_logger
from .notification_service import NotificationService

logger = get_logger(__name__)

URGENT_PRIORITIES = (PriorityName.URGENT.value, PriorityName.HIGH.value)


class RequestService:
    """Service for request operations"""

    def __init__(self):
        self.request_repo = RequestRepository()
        self.lookup_repo = LookupRepository()
        self.audit_repo = AuditRepository()
        self.user_repo = UserRepository()
        self.engine = RequestLifecycleEngine(request_repo=self.request_repo, lookup_repo=self.lookup_repo)
        self.notification_service = NotificationService()

    # =========================================================================
    # Create
    # =========================================================================

    def create_request(self, actor: AuthContext, data: NewRequest) -> Request:
        """
        Create a request (or a draft) owned by the actor

        Non-drafts need a title; drafts fall back to a placeholder.
        Priority defaults to settings.default_priority_name and the workflow
        is picked from the priority when none is given.
        """
        title = (data.title or "").strip()
        if not title:
            if not data.is_draft:
                raise ValidationError("Tiêu đề không được để trống", details={"field": "title"})
            title = DRAFT_DEFAULT_TITLE

        registry = get_status_registry()
        status_id = registry.id_of(StatusKind.DRAFT if data.is_draft else StatusKind.NEW)

        if data.priority_id is not None:
            priority = self.lookup_repo.get_priority_or_raise(data.priority_id)
        else:
            priority = self.lookup_repo.get_priority_by_name(settings.default_priority_name)

        workflow_id = data.workflow_id
        if workflow_id is not None:
            self.lookup_repo.get_workflow_or_raise(workflow_id)
        else:
            candidate = (
                settings.urgent_workflow_id
                if priority and priority.priority_name in URGENT_PRIORITIES
                else settings.default_workflow_id
            )
            workflow_id = candidate if self.lookup_repo.get_workflow(candidate) else None

        if data.assigned_user_id and not self.user_repo.exists(data.assigned_user_id):
            raise UserNotFoundError(
                "User không tồn tại",
                details={"assigned_user_id": data.assigned_user_id}
            )

        values = {
            RequestRow.title: title,
            RequestRow.description: data.description,
            RequestRow.users_id: actor.user_id,
            RequestRow.assigned_user_id: data.assigned_user_id or None,
            RequestRow.status_id: status_id,
            RequestRow.priority_id: priority.priority_id if priority else None,
            RequestRow.workflow_id: workflow_id,
            RequestRow.current_step_order: 1,
            RequestRow.is_approved: False,
            RequestRow.issue_type: data.issue_type or "General",
            RequestRow.form_data: json.dumps(data.form_data, ensure_ascii=False) if data.form_data else None,
            RequestRow.attachment_url: data.attachment_url,
            RequestRow.attachment_file_name: data.attachment_file_name,
            RequestRow.attachment_file_size: data.attachment_file_size,
            RequestRow.attachment_file_type: data.attachment_file_type,
        }
        request_id = self.request_repo.create_request(values)

        request = self.request_repo.get_request_or_raise(request_id)
        if request.assigned_user_id:
            self.notification_service.notify_assigned(request, request.assigned_user_id, actor)
        return request

    # =========================================================================
    # Listings
    # =========================================================================

    def list_requests(
        self,
        actor: AuthContext,
        filters: Optional[RequestFilters] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Request], int]:
        items = self.request_repo.list_requests(actor, filters, page, limit)
        return items, self.request_repo.count_requests(actor, filters)

    def list_my_requests(
        self,
        actor: AuthContext,
        filters: Optional[RequestFilters] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Request], int]:
        items = self.request_repo.list_by_creator(actor.user_id, filters, page, limit)
        return items, self.request_repo.count_by_creator(actor.user_id, filters)

    def list_assigned(
        self,
        actor: AuthContext,
        filters: Optional[RequestFilters] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Request], int]:
        items = self.request_repo.list_assigned(actor.user_id, filters, page, limit)
        return items, self.request_repo.count_assigned(actor.user_id, filters)

    def assigned_stats(self, actor: AuthContext) -> AssignedStats:
        return self.request_repo.assigned_stats(actor.user_id)

    def dashboard(self, actor: AuthContext) -> DashboardSummary:
        return self.request_repo.dashboard(actor.user_id)

    # =========================================================================
    # Detail
    # =========================================================================

    def get_visible_request(self, request_id: int, actor: AuthContext) -> Request:
        """
        Fetch a request the actor may see

        Someone else's draft is reported exactly like a missing request.
        """
        request = self.request_repo.get_request(request_id)
        if request is None or self.engine.permission_guard.is_hidden_draft(actor.user_id, request):
            raise RequestNotFoundError("Request không tồn tại", details={"request_id": request_id})
        if not self.engine.permission_guard.can_view(actor, request):
            raise PermissionDeniedError(
                "Bạn không có quyền xem yêu cầu này",
                details={"request_id": request_id}
            )
        return request

    def get_request_detail(self, request_id: int, actor: AuthContext) -> RequestDetail:
        request = self.get_visible_request(request_id, actor)
        self.request_repo.add_view(request_id, actor.user_id)

        guard = self.engine.permission_guard
        return RequestDetail(
            request=request,
            workflow_steps=self.request_repo.get_workflow_steps(request.workflow_id),
            history=self.audit_repo.get_history(request_id),
            approvals=self.audit_repo.get_approvals(request_id),
            view_count=self.request_repo.count_views(request_id),
            is_owner=guard.is_creator(actor.user_id, request),
            is_assigned=guard.is_assignee(actor.user_id, request),
            can_process=guard.can_process(actor.user_id, request, is_admin=actor.is_admin),
        )

    # =========================================================================
    # Admin operations
    # =========================================================================

    def assign_request(self, request_id: int, assignee_id: str, actor: AuthContext) -> Request:
        if not self.engine.permission_guard.can_assign(actor):
            raise PermissionDeniedError("Chỉ quản trị viên được phân công yêu cầu")
        request = self.request_repo.get_request_or_raise(request_id)
        self.user_repo.get_user_or_raise(assignee_id)

        self.request_repo.assign(request_id, assignee_id)
        self.notification_service.notify_assigned(request, assignee_id, actor)
        return self.request_repo.get_request_or_raise(request_id)

    def delete_request(self, request_id: int, actor: AuthContext) -> None:
        if not self.engine.permission_guard.can_delete(actor):
            raise PermissionDeniedError("Chỉ quản trị viên được xóa yêu cầu")
        if not self.request_repo.delete_request(request_id):
            raise RequestNotFoundError("Request không tồn tại", details={"request_id": request_id})

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _require_process(self, request_id: int, actor: AuthContext) -> None:
        """404 for unknown ids and other users' drafts, 403 for users who may not process"""
        request = self.request_repo.get_request_or_raise(request_id)
        if self.engine.permission_guard.is_hidden_draft(actor.user_id, request):
            raise RequestNotFoundError("Request không tồn tại", details={"request_id": request_id})
        if not self.engine.can_process_request(request_id, actor.user_id, is_admin=actor.is_admin):
            raise PermissionDeniedError(PROCESS_DENIED_MESSAGE, details={"request_id": request_id})

    def update_status(self, request_id: int, status_id: int, note: Optional[str], actor: AuthContext) -> None:
        self._require_process(request_id, actor)
        self.engine.update_status(request_id, status_id, note)

    def start_processing(self, request_id: int, actor: AuthContext) -> None:
        self._require_process(request_id, actor)
        self.engine.start_processing(request_id)

    def approve(self, request_id: int, actor: AuthContext, note: Optional[str] = None) -> None:
        request = self.engine.approve_request(request_id, actor, note)
        self.notification_service.notify_approved(request, actor)

    def reject(self, request_id: int, actor: AuthContext, note: Optional[str]) -> None:
        request = self.engine.reject_request(request_id, actor, note)
        self.notification_service.notify_rejected(request, actor, note.strip())

    # =========================================================================
    # Drafts
    # =========================================================================

    def get_drafts(self, actor: AuthContext, page: int = 1, limit: int = 10) -> Tuple[List[Request], int]:
        items = self.request_repo.list_drafts(actor.user_id, page, limit)
        return items, self.request_repo.count_drafts(actor.user_id)

    def count_drafts(self, actor: AuthContext) -> int:
        return self.request_repo.count_drafts(actor.user_id)

    def publish_draft(self, request_id: int, actor: AuthContext) -> None:
        """Publish the actor's draft; anything else reads as not found"""
        if not self.engine.publish_draft(request_id, actor.user_id):
            raise RequestNotFoundError("Request không tồn tại", details={"request_id": request_id})
