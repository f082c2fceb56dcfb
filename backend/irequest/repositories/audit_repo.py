"""Audit Repository - Read access to status history and approvals"""
from typing import List

from sqlalchemy import select

from .database import query
from .tables import RequestApprovalRow, RequestStepHistoryRow, StatusRow, UserRow
from ..domain.models import Approval, HistoryEntry
from ..utils.logger import get_logger

logger = get_logger(__name__)


class AuditRepository:
    """Repository for the append-only audit trail (writes go through AuditWriter)"""

    def get_history(self, request_id: int) -> List[HistoryEntry]:
        """Status history of a request, oldest first"""
        statement = (
            select(RequestStepHistoryRow, StatusRow.status_name.label("status_name"))
            .outerjoin(StatusRow, StatusRow.status_id == RequestStepHistoryRow.status_id)
            .where(RequestStepHistoryRow.request_id == request_id)
            .order_by(RequestStepHistoryRow.action_time.asc(), RequestStepHistoryRow.history_id.asc())
        )
        entries = []
        for row in query(statement).rows:
            entry = HistoryEntry.model_validate(row[0])
            entry.status_name = row._mapping["status_name"]
            entries.append(entry)
        return entries

    def get_approvals(self, request_id: int) -> List[Approval]:
        """Approvals of a request, oldest first"""
        statement = (
            select(RequestApprovalRow, UserRow.user_name.label("approver_name"))
            .outerjoin(UserRow, UserRow.id == RequestApprovalRow.approved_by_user_id)
            .where(RequestApprovalRow.request_id == request_id)
            .order_by(RequestApprovalRow.approved_at.asc(), RequestApprovalRow.approval_id.asc())
        )
        approvals = []
        for row in query(statement).rows:
            approval = Approval.model_validate(row[0])
            approval.approver_name = row._mapping["approver_name"]
            approvals.append(approval)
        return approvals
