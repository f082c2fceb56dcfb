"""Audit Writer - Append-only history and approval rows

The writer only builds INSERT statements; the lifecycle engine runs them
in the same transaction as the request update they describe.
"""
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import insert

from ..domain.enums import HistoryNote
from ..repositories.tables import RequestApprovalRow, RequestStepHistoryRow
from ..utils.time import utc_now


class AuditWriter:
    """
    Build audit trail statements

    History rows are written for every status change, approval and
    rejection; approval rows only for approvals.
    """

    def history(
        self,
        request_id: int,
        status_id: int,
        note: Optional[str],
        at: Optional[datetime] = None
    ) -> Any:
        """INSERT for one RequestStepHistory row"""
        at = at or utc_now()
        return insert(RequestStepHistoryRow).values({
            RequestStepHistoryRow.request_id: request_id,
            RequestStepHistoryRow.status_id: status_id,
            RequestStepHistoryRow.created_at: at,
            RequestStepHistoryRow.action_time: at,
            RequestStepHistoryRow.note: note,
        })

    def approval(
        self,
        request_id: int,
        approver_id: str,
        note: Optional[str],
        at: Optional[datetime] = None
    ) -> Any:
        """INSERT for one RequestApprovals row"""
        return insert(RequestApprovalRow).values({
            RequestApprovalRow.request_id: request_id,
            RequestApprovalRow.approved_by_user_id: approver_id,
            RequestApprovalRow.approved_at: at or utc_now(),
            RequestApprovalRow.note: note,
        })

    @staticmethod
    def approve_note(note: Optional[str]) -> str:
        return f"{HistoryNote.APPROVED.value}{note or ''}"

    @staticmethod
    def reject_note(note: str) -> str:
        return f"{HistoryNote.REJECTED.value}{note}"
