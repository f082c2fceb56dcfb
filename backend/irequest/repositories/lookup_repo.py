"""Lookup Repository - Statuses, priorities and workflows"""
from typing import List, Optional

from sqlalchemy import select

from .database import query
from .tables import PriorityRow, StatusRow, WorkflowRow
from ..domain.errors import NotFoundError, PriorityNotFoundError, StatusNotFoundError
from ..domain.models import Priority, Status, Workflow
from ..utils.logger import get_logger

logger = get_logger(__name__)


class LookupRepository:
    """Repository for seeded reference data (read-only)"""

    # =========================================================================
    # Status
    # =========================================================================

    def list_statuses(self) -> List[Status]:
        rows = query(select(StatusRow).order_by(StatusRow.status_id)).scalars()
        return [Status.model_validate(row) for row in rows]

    def get_status(self, status_id: int) -> Optional[Status]:
        row = query(select(StatusRow).where(StatusRow.status_id == status_id)).scalar()
        return Status.model_validate(row) if row else None

    def get_status_or_raise(self, status_id: int) -> Status:
        """Get status by ID or raise error"""
        status = self.get_status(status_id)
        if not status:
            raise StatusNotFoundError(
                f"Trạng thái {status_id} không tồn tại",
                details={"status_id": status_id}
            )
        return status

    # =========================================================================
    # Priority
    # =========================================================================

    def list_priorities(self, active_only: bool = True) -> List[Priority]:
        statement = select(PriorityRow).order_by(PriorityRow.sort_order, PriorityRow.priority_id)
        if active_only:
            statement = statement.where(PriorityRow.is_active.is_(True))
        return [Priority.model_validate(row) for row in query(statement).scalars()]

    def get_priority(self, priority_id: int) -> Optional[Priority]:
        row = query(select(PriorityRow).where(PriorityRow.priority_id == priority_id)).scalar()
        return Priority.model_validate(row) if row else None

    def get_priority_or_raise(self, priority_id: int) -> Priority:
        """Get priority by ID or raise error"""
        priority = self.get_priority(priority_id)
        if not priority:
            raise PriorityNotFoundError(
                f"Độ ưu tiên {priority_id} không tồn tại",
                details={"priority_id": priority_id}
            )
        return priority

    def get_priority_by_name(self, name: str) -> Optional[Priority]:
        row = query(select(PriorityRow).where(PriorityRow.priority_name == name)).scalar()
        return Priority.model_validate(row) if row else None

    # =========================================================================
    # Workflow
    # =========================================================================

    def list_workflows(self, active_only: bool = True) -> List[Workflow]:
        statement = select(WorkflowRow).order_by(WorkflowRow.workflow_id)
        if active_only:
            statement = statement.where(WorkflowRow.is_active.is_(True))
        return [Workflow.model_validate(row) for row in query(statement).scalars()]

    def get_workflow(self, workflow_id: int) -> Optional[Workflow]:
        row = query(select(WorkflowRow).where(WorkflowRow.workflow_id == workflow_id)).scalar()
        return Workflow.model_validate(row) if row else None

    def get_workflow_or_raise(self, workflow_id: int) -> Workflow:
        workflow = self.get_workflow(workflow_id)
        if not workflow:
            raise NotFoundError(
                f"Quy trình {workflow_id} không tồn tại",
                details={"workflow_id": workflow_id},
                error_code="WORKFLOW_NOT_FOUND"
            )
        return workflow
