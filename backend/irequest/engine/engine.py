"""
Request Lifecycle Engine - The core of the system

Owns every write that changes where a request is in its lifecycle:

- can_process_request: creator/assignee check
- update_status: status change + history, atomically
- approve_request: approval flag + approval row + history, atomically
- reject_request: rejected status + history, atomically
- start_processing: update_status to "Đang xử lý"
- publish_draft: owner-guarded draft -> "Mới"

Notifications and HTTP concerns live in the service and route layers.
"""

from typing import Optional

from sqlalchemy import update

from ..config.settings import settings
from ..domain.enums import HistoryNote, StatusKind
from ..domain.errors import PermissionDeniedError, RequestNotFoundError, ValidationError
from ..domain.models import AuthContext, Request
from ..repositories.database import transaction, query
from ..repositories.lookup_repo import LookupRepository
from ..repositories.request_repo import RequestRepository
from ..repositories.status_registry import StatusRegistry, get_status_registry
from ..repositories.tables import RequestRow
from ..utils.logger import get_logger
from ..utils.time import utc_now
from .audit_writer import AuditWriter
from .permission_guard import PermissionGuard
from .transition_resolver import TransitionResolver

logger = get_logger(__name__)

PROCESS_DENIED_MESSAGE = "Bạn không có quyền xử lý yêu cầu này"
REJECT_NOTE_REQUIRED_MESSAGE = "Vui lòng nhập lý do từ chối"


class RequestLifecycleEngine:
    """
    Central orchestrator for request status changes

    Each mutating operation runs its request update and audit rows in a
    single transaction; a failure leaves the database untouched.
    """

    def __init__(
        self,
        request_repo: Optional[RequestRepository] = None,
        lookup_repo: Optional[LookupRepository] = None,
        registry: Optional[StatusRegistry] = None
    ):
        self._registry = registry
        self.request_repo = request_repo or RequestRepository(registry=registry)
        self.lookup_repo = lookup_repo or LookupRepository()
        self.audit_writer = AuditWriter()
        self.permission_guard = PermissionGuard()
        self.transition_resolver = TransitionResolver(registry=registry)

    @property
    def registry(self) -> StatusRegistry:
        return self._registry or get_status_registry()

    # =========================================================================
    # Access
    # =========================================================================

    def can_process_request(self, request_id: int, user_id: str, is_admin: bool = False) -> bool:
        """True iff the user created or is assigned the request; False if it does not exist"""
        request = self.request_repo.get_request(request_id)
        return self.permission_guard.can_process(user_id, request, is_admin=is_admin)

    def _require_process(self, actor: AuthContext, request: Request, action: str) -> None:
        if self.permission_guard.is_hidden_draft(actor.user_id, request):
            raise RequestNotFoundError("Request không tồn tại", details={"request_id": request.request_id})
        if not self.permission_guard.can_process(actor.user_id, request, is_admin=actor.is_admin):
            logger.warning(
                f"Denied {action} on request {request.request_id}",
                extra={"request_id": request.request_id, "user_id": actor.user_id, "action": action}
            )
            raise PermissionDeniedError(
                PROCESS_DENIED_MESSAGE,
                details={"request_id": request.request_id, "action": action}
            )

    # =========================================================================
    # Status changes
    # =========================================================================

    def update_status(self, request_id: int, status_id: int, note: Optional[str] = None) -> None:
        """
        Set a request's status and append the matching history row

        Raises:
            RequestNotFoundError: Unknown request
            StatusNotFoundError: Unknown status id
            InvalidStateError: Strict transitions enabled and move not allowed
        """
        request = self.request_repo.get_request_or_raise(request_id)
        self.lookup_repo.get_status_or_raise(status_id)
        self.transition_resolver.validate(request_id, request.status_id, status_id)

        now = utc_now()
        transaction([
            update(RequestRow)
            .where(RequestRow.request_id == request_id)
            .values({RequestRow.status_id: status_id, RequestRow.updated_at: now}),
            self.audit_writer.history(request_id, status_id, note, now),
        ])
        logger.info(
            f"Request {request_id} status -> {status_id}",
            extra={"request_id": request_id, "status_id": status_id, "action": "update_status"}
        )

    def start_processing(self, request_id: int) -> None:
        """Move a request to "Đang xử lý" with the standard note"""
        self.update_status(
            request_id,
            self.registry.id_of(StatusKind.IN_PROGRESS),
            HistoryNote.PROCESSING_STARTED.value
        )

    def approve_request(self, request_id: int, actor: AuthContext, note: Optional[str] = None) -> Request:
        """
        Approve a request

        Sets IsApproved, records the approver and writes a history row
        tagged with the completed status. StatusID itself only changes when
        approval_completes_request is enabled.

        Raises:
            RequestNotFoundError: Unknown request
            PermissionDeniedError: Actor is neither creator nor assignee
            ConfigurationError: Completed status not seeded
        """
        request = self.request_repo.get_request_or_raise(request_id)
        self._require_process(actor, request, "approve")
        completed_id = self.registry.id_of(StatusKind.COMPLETED)

        now = utc_now()
        values = {RequestRow.is_approved: True, RequestRow.updated_at: now}
        if settings.approval_completes_request:
            self.transition_resolver.validate(request_id, request.status_id, completed_id)
            values[RequestRow.status_id] = completed_id

        transaction([
            update(RequestRow).where(RequestRow.request_id == request_id).values(values),
            self.audit_writer.approval(request_id, actor.user_id, note, now),
            self.audit_writer.history(request_id, completed_id, self.audit_writer.approve_note(note), now),
        ])
        logger.info(
            f"Request {request_id} approved",
            extra={"request_id": request_id, "user_id": actor.user_id, "action": "approve"}
        )
        return request

    def reject_request(self, request_id: int, actor: AuthContext, note: Optional[str]) -> Request:
        """
        Reject a request with a mandatory reason

        Raises:
            ValidationError: Empty or whitespace-only note (checked before any DB access)
            RequestNotFoundError: Unknown request
            PermissionDeniedError: Actor is neither creator nor assignee
        """
        if note is None or not note.strip():
            raise ValidationError(REJECT_NOTE_REQUIRED_MESSAGE, details={"field": "note"})

        request = self.request_repo.get_request_or_raise(request_id)
        self._require_process(actor, request, "reject")
        rejected_id = self.registry.id_of(StatusKind.REJECTED)
        self.transition_resolver.validate(request_id, request.status_id, rejected_id)

        now = utc_now()
        transaction([
            update(RequestRow)
            .where(RequestRow.request_id == request_id)
            .values({RequestRow.status_id: rejected_id, RequestRow.updated_at: now}),
            self.audit_writer.history(request_id, rejected_id, self.audit_writer.reject_note(note), now),
        ])
        logger.info(
            f"Request {request_id} rejected",
            extra={"request_id": request_id, "user_id": actor.user_id, "action": "reject"}
        )
        return request

    # =========================================================================
    # Drafts
    # =========================================================================

    def publish_draft(self, request_id: int, user_id: str) -> bool:
        """
        Publish the caller's own draft as a new request

        One guarded UPDATE (id, owner and draft status must all match).
        Returns False when nothing matched; no history row is written.
        """
        draft_id = self.registry.id_of(StatusKind.DRAFT)
        new_id = self.registry.id_of(StatusKind.NEW)
        statement = (
            update(RequestRow)
            .where(
                RequestRow.request_id == request_id,
                RequestRow.users_id == user_id,
                RequestRow.status_id == draft_id,
            )
            .values({RequestRow.status_id: new_id, RequestRow.updated_at: utc_now()})
        )
        published = query(statement).rowcount > 0
        logger.info(
            f"Publish draft {request_id}: {'published' if published else 'no matching draft'}",
            extra={"request_id": request_id, "user_id": user_id, "action": "publish_draft"}
        )
        return published
