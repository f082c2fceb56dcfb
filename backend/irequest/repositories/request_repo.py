"""Request Repository - Data access for requests and their listings"""
import json
from datetime import timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, delete, false, func, insert, or_, select, true, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import aliased

from .database import query, transaction
from .tables import (
    CommentRow, NotificationRow, PriorityRow, RequestApprovalRow, RequestRow,
    RequestStepHistoryRow, RequestViewRow, RoleRow, StatusRow, UserRow,
    WorkflowRow, WorkflowStepRow
)
from ..domain.enums import PriorityName, StatusKind
from ..domain.errors import RequestNotFoundError
from ..domain.models import (
    AssignedStats, AuthContext, DashboardSummary, Request, RequestFilters, WorkflowStep
)
from .status_registry import StatusRegistry, get_status_registry
from ..utils.logger import get_logger
from ..utils.time import is_within, relative_time, utc_now

logger = get_logger(__name__)

Creator = aliased(UserRow, name="creator")
Assignee = aliased(UserRow, name="assignee")

JOINED_FIELDS = (
    "status_name", "is_final", "priority_name", "priority_color",
    "creator_name", "assignee_name", "workflow_name",
)

NEW_REQUEST_WINDOW = timedelta(hours=24)


def _load_json(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    if not raw:
        return None
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring malformed FormData JSON")
        return None
    return value if isinstance(value, dict) else {"value": value}


def _to_request(row: Any) -> Request:
    """Build a Request from a `_base_select` row"""
    entity = row[0]
    data = {attr.key: getattr(entity, attr.key) for attr in RequestRow.__mapper__.column_attrs}
    data["form_data"] = _load_json(entity.form_data)
    mapping = row._mapping
    for key in JOINED_FIELDS:
        data[key] = mapping[key]
    return Request.model_validate(data)


def _page_offset(page: int, limit: int) -> int:
    return max(page - 1, 0) * limit


class RequestRepository:
    """Repository for request operations"""

    def __init__(self, registry: Optional[StatusRegistry] = None):
        self._registry = registry

    @property
    def registry(self) -> StatusRegistry:
        return self._registry or get_status_registry()

    # =========================================================================
    # Query building
    # =========================================================================

    @staticmethod
    def _base_select():
        return (
            select(
                RequestRow,
                StatusRow.status_name.label("status_name"),
                StatusRow.is_final.label("is_final"),
                PriorityRow.priority_name.label("priority_name"),
                PriorityRow.color_code.label("priority_color"),
                Creator.user_name.label("creator_name"),
                Assignee.user_name.label("assignee_name"),
                WorkflowRow.workflow_name.label("workflow_name"),
            )
            .join(StatusRow, StatusRow.status_id == RequestRow.status_id)
            .outerjoin(PriorityRow, PriorityRow.priority_id == RequestRow.priority_id)
            .outerjoin(Creator, Creator.id == RequestRow.users_id)
            .outerjoin(Assignee, Assignee.id == RequestRow.assigned_user_id)
            .outerjoin(WorkflowRow, WorkflowRow.workflow_id == RequestRow.workflow_id)
        )

    def _not_draft(self):
        """Excludes drafts; with no draft status seeded there is nothing to exclude"""
        draft_id = self.registry.maybe_id(StatusKind.DRAFT)
        if draft_id is None:
            return true()
        return RequestRow.status_id != draft_id

    def _is_draft(self):
        draft_id = self.registry.maybe_id(StatusKind.DRAFT)
        if draft_id is None:
            return false()
        return RequestRow.status_id == draft_id

    @staticmethod
    def _involves(user_id: str):
        return or_(RequestRow.users_id == user_id, RequestRow.assigned_user_id == user_id)

    @staticmethod
    def _filter_conditions(filters: Optional[RequestFilters]) -> List[Any]:
        if filters is None:
            return []
        conditions = []
        if filters.status_id is not None:
            conditions.append(RequestRow.status_id == filters.status_id)
        if filters.priority_id is not None:
            conditions.append(RequestRow.priority_id == filters.priority_id)
        if filters.search:
            pattern = f"%{filters.search.strip()}%"
            conditions.append(or_(
                RequestRow.title.ilike(pattern),
                RequestRow.description.ilike(pattern),
            ))
        return conditions

    def _visible_conditions(self, ctx: AuthContext, filters: Optional[RequestFilters]) -> List[Any]:
        conditions = [self._not_draft()]
        if not ctx.is_admin:
            conditions.append(self._involves(ctx.user_id))
        return conditions + self._filter_conditions(filters)

    def _fetch(self, statement) -> List[Request]:
        return [_to_request(row) for row in query(statement).rows]

    @staticmethod
    def _count(*conditions) -> int:
        statement = select(func.count()).select_from(RequestRow).where(and_(*conditions))
        return int(query(statement).scalar() or 0)

    # =========================================================================
    # CRUD
    # =========================================================================

    def create_request(self, values: Dict[Any, Any]) -> int:
        """Insert a request; `values` is keyed by RequestRow attributes"""
        now = utc_now()
        values.setdefault(RequestRow.created_at, now)
        values.setdefault(RequestRow.updated_at, now)
        statement = insert(RequestRow).values(values).returning(RequestRow.request_id)
        request_id = int(query(statement).scalar())
        logger.info(f"Created request: {request_id}", extra={"request_id": request_id})
        return request_id

    def get_request(self, request_id: int) -> Optional[Request]:
        """Get request by ID (drafts included)"""
        rows = query(self._base_select().where(RequestRow.request_id == request_id)).rows
        return _to_request(rows[0]) if rows else None

    def get_request_or_raise(self, request_id: int) -> Request:
        """Get request by ID or raise error"""
        request = self.get_request(request_id)
        if not request:
            raise RequestNotFoundError(
                "Request không tồn tại",
                details={"request_id": request_id}
            )
        return request

    def assign(self, request_id: int, assignee_id: Optional[str]) -> bool:
        statement = (
            update(RequestRow)
            .where(RequestRow.request_id == request_id)
            .values({RequestRow.assigned_user_id: assignee_id, RequestRow.updated_at: utc_now()})
        )
        updated = query(statement).rowcount > 0
        logger.info(
            f"Assigned request {request_id} to {assignee_id}",
            extra={"request_id": request_id, "user_id": assignee_id}
        )
        return updated

    def delete_request(self, request_id: int) -> bool:
        """Delete a request and every row that hangs off it, atomically"""
        results = transaction([
            update(NotificationRow)
            .where(NotificationRow.request_id == request_id)
            .values({NotificationRow.request_id: None}),
            delete(CommentRow).where(CommentRow.request_id == request_id),
            delete(RequestViewRow).where(RequestViewRow.request_id == request_id),
            delete(RequestApprovalRow).where(RequestApprovalRow.request_id == request_id),
            delete(RequestStepHistoryRow).where(RequestStepHistoryRow.request_id == request_id),
            delete(RequestRow).where(RequestRow.request_id == request_id),
        ])
        deleted = results[-1].rowcount > 0
        if deleted:
            logger.info(f"Deleted request: {request_id}", extra={"request_id": request_id})
        return deleted

    # =========================================================================
    # Listings (drafts always excluded)
    # =========================================================================

    def list_requests(
        self,
        ctx: AuthContext,
        filters: Optional[RequestFilters] = None,
        page: int = 1,
        limit: int = 10
    ) -> List[Request]:
        """Requests visible to ctx, newest first"""
        statement = (
            self._base_select()
            .where(and_(*self._visible_conditions(ctx, filters)))
            .order_by(RequestRow.created_at.desc(), RequestRow.request_id.desc())
            .offset(_page_offset(page, limit))
            .limit(limit)
        )
        return self._fetch(statement)

    def count_requests(self, ctx: AuthContext, filters: Optional[RequestFilters] = None) -> int:
        return self._count(*self._visible_conditions(ctx, filters))

    def list_by_creator(
        self,
        user_id: str,
        filters: Optional[RequestFilters] = None,
        page: int = 1,
        limit: int = 10
    ) -> List[Request]:
        conditions = [RequestRow.users_id == user_id, self._not_draft()] + self._filter_conditions(filters)
        statement = (
            self._base_select()
            .where(and_(*conditions))
            .order_by(RequestRow.created_at.desc(), RequestRow.request_id.desc())
            .offset(_page_offset(page, limit))
            .limit(limit)
        )
        return self._fetch(statement)

    def count_by_creator(self, user_id: str, filters: Optional[RequestFilters] = None) -> int:
        return self._count(RequestRow.users_id == user_id, self._not_draft(), *self._filter_conditions(filters))

    def list_assigned(
        self,
        user_id: str,
        filters: Optional[RequestFilters] = None,
        page: int = 1,
        limit: int = 10
    ) -> List[Request]:
        """Assigned to the user, most urgent priority first, then newest"""
        conditions = [RequestRow.assigned_user_id == user_id, self._not_draft()] + self._filter_conditions(filters)
        statement = (
            self._base_select()
            .where(and_(*conditions))
            .order_by(
                func.coalesce(PriorityRow.sort_order, 999).asc(),
                RequestRow.created_at.desc(),
                RequestRow.request_id.desc(),
            )
            .offset(_page_offset(page, limit))
            .limit(limit)
        )
        now = utc_now()
        requests = self._fetch(statement)
        for request in requests:
            request.is_new = is_within(request.created_at, NEW_REQUEST_WINDOW, now)
            request.relative_time = relative_time(request.created_at, now)
        return requests

    def count_assigned(self, user_id: str, filters: Optional[RequestFilters] = None) -> int:
        return self._count(
            RequestRow.assigned_user_id == user_id, self._not_draft(), *self._filter_conditions(filters)
        )

    def assigned_stats(self, user_id: str) -> AssignedStats:
        base = [RequestRow.assigned_user_id == user_id, self._not_draft()]
        urgent_statement = (
            select(func.count())
            .select_from(RequestRow)
            .join(PriorityRow, PriorityRow.priority_id == RequestRow.priority_id)
            .where(and_(*base, PriorityRow.priority_name == PriorityName.URGENT.value))
        )
        completed_id = self.registry.maybe_id(StatusKind.COMPLETED)
        pending_ids = self.registry.non_final_ids()
        return AssignedStats(
            total=self._count(*base),
            urgent=int(query(urgent_statement).scalar() or 0),
            pending=self._count(*base, RequestRow.status_id.in_(pending_ids)) if pending_ids else 0,
            completed=self._count(*base, RequestRow.status_id == completed_id) if completed_id else 0,
        )

    # =========================================================================
    # Drafts
    # =========================================================================

    def list_drafts(self, user_id: str, page: int = 1, limit: int = 10) -> List[Request]:
        """The user's own drafts, most recently edited first"""
        statement = (
            self._base_select()
            .where(and_(RequestRow.users_id == user_id, self._is_draft()))
            .order_by(RequestRow.updated_at.desc(), RequestRow.request_id.desc())
            .offset(_page_offset(page, limit))
            .limit(limit)
        )
        return self._fetch(statement)

    def count_drafts(self, user_id: str) -> int:
        return self._count(RequestRow.users_id == user_id, self._is_draft())

    # =========================================================================
    # Dashboard
    # =========================================================================

    def dashboard(self, user_id: str, recent_limit: int = 5) -> DashboardSummary:
        pending_ids = self.registry.non_final_ids()
        recent_statement = (
            self._base_select()
            .where(and_(self._involves(user_id), self._not_draft()))
            .order_by(RequestRow.updated_at.desc(), RequestRow.request_id.desc())
            .limit(recent_limit)
        )
        now = utc_now()
        recent = self._fetch(recent_statement)
        for request in recent:
            request.relative_time = relative_time(request.updated_at, now)
        return DashboardSummary(
            my_requests=self._count(RequestRow.users_id == user_id, self._not_draft()),
            assigned_to_me=self._count(RequestRow.assigned_user_id == user_id, self._not_draft()),
            pending_requests=(
                self._count(
                    RequestRow.users_id == user_id,
                    self._not_draft(),
                    RequestRow.status_id.in_(pending_ids),
                )
                if pending_ids else 0
            ),
            recent_activity=recent,
        )

    # =========================================================================
    # Detail helpers
    # =========================================================================

    def get_workflow_steps(self, workflow_id: Optional[int]) -> List[WorkflowStep]:
        if workflow_id is None:
            return []
        statement = (
            select(
                WorkflowStepRow,
                RoleRow.name.label("role_name"),
                StatusRow.status_name.label("status_name"),
            )
            .outerjoin(RoleRow, RoleRow.id == WorkflowStepRow.role_id)
            .outerjoin(StatusRow, StatusRow.status_id == WorkflowStepRow.status_id)
            .where(WorkflowStepRow.workflow_id == workflow_id)
            .order_by(WorkflowStepRow.step_order.asc())
        )
        steps = []
        for row in query(statement).rows:
            step = WorkflowStep.model_validate(row[0])
            step.role_name = row._mapping["role_name"]
            step.status_name = row._mapping["status_name"]
            steps.append(step)
        return steps

    def add_view(self, request_id: int, user_id: str) -> None:
        """Record that a user opened a request (once per user); never fatal"""
        try:
            existing = query(
                select(RequestViewRow.request_view_id).where(
                    RequestViewRow.request_id == request_id,
                    RequestViewRow.user_id == user_id,
                )
            ).scalar()
            if existing is None:
                query(insert(RequestViewRow).values({
                    RequestViewRow.request_id: request_id,
                    RequestViewRow.user_id: user_id,
                    RequestViewRow.viewed_at: utc_now(),
                }))
        except SQLAlchemyError as e:
            logger.warning(
                f"Could not record view of request {request_id}: {e}",
                extra={"request_id": request_id, "user_id": user_id}
            )

    def count_views(self, request_id: int) -> int:
        statement = select(func.count()).select_from(RequestViewRow).where(RequestViewRow.request_id == request_id)
        return int(query(statement).scalar() or 0)
