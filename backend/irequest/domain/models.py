"""Domain Models - Pydantic schemas for all entities"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .enums import StatusKind


# ============================================================================
# Identity
# ============================================================================

class AuthContext(BaseModel):
    """Authenticated caller, resolved once per HTTP request"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_id: str = Field(..., description="Users.Id")
    user_name: str = Field("", description="Display/login name")
    email: Optional[str] = Field(None, description="User email")
    department_id: Optional[int] = None
    is_admin: bool = False
    roles: List[str] = Field(default_factory=list, description="Role names")


class UserSummary(BaseModel):
    """Public view of a user"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_name: str
    email: Optional[str] = None
    department_id: Optional[int] = None
    avatar: Optional[str] = None


# ============================================================================
# Reference data
# ============================================================================

class Status(BaseModel):
    """Seeded status row"""
    model_config = ConfigDict(from_attributes=True)

    status_id: int
    status_name: str
    description: Optional[str] = None
    is_final: bool = False

    @property
    def kind(self) -> Optional[StatusKind]:
        return StatusKind.from_name(self.status_name)


class Priority(BaseModel):
    """Seeded priority row"""
    model_config = ConfigDict(from_attributes=True)

    priority_id: int
    priority_name: str
    color_code: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True


class Workflow(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    workflow_id: int
    workflow_name: str
    description: Optional[str] = None
    is_active: bool = True


class WorkflowStep(BaseModel):
    """Display-only workflow step"""
    model_config = ConfigDict(from_attributes=True)

    step_id: int
    workflow_id: int
    step_name: str
    step_order: int
    role_id: Optional[str] = None
    role_name: Optional[str] = None
    status_id: Optional[int] = None
    status_name: Optional[str] = None
    assigned_user_id: Optional[str] = None


# ============================================================================
# Requests
# ============================================================================

class Request(BaseModel):
    """A ticket, joined with its display names"""
    model_config = ConfigDict(from_attributes=True)

    request_id: int
    title: str
    description: Optional[str] = None
    users_id: str
    assigned_user_id: Optional[str] = None
    status_id: int
    priority_id: Optional[int] = None
    workflow_id: Optional[int] = None
    current_step_order: int = 1
    is_approved: bool = False
    issue_type: Optional[str] = None
    form_data: Optional[Dict[str, Any]] = None
    attachment_url: Optional[str] = None
    attachment_file_name: Optional[str] = None
    attachment_file_size: Optional[int] = None
    attachment_file_type: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    # Joined display fields
    status_name: Optional[str] = None
    is_final: Optional[bool] = None
    priority_name: Optional[str] = None
    priority_color: Optional[str] = None
    creator_name: Optional[str] = None
    assignee_name: Optional[str] = None
    workflow_name: Optional[str] = None

    # Computed for list views
    is_new: Optional[bool] = None
    relative_time: Optional[str] = None

    @property
    def status_kind(self) -> Optional[StatusKind]:
        return StatusKind.from_name(self.status_name)


class NewRequest(BaseModel):
    """Input for creating a request"""
    title: Optional[str] = None
    description: Optional[str] = None
    priority_id: Optional[int] = None
    workflow_id: Optional[int] = None
    assigned_user_id: Optional[str] = None
    issue_type: Optional[str] = None
    form_data: Optional[Dict[str, Any]] = None
    attachment_url: Optional[str] = None
    attachment_file_name: Optional[str] = None
    attachment_file_size: Optional[int] = None
    attachment_file_type: Optional[str] = None
    is_draft: bool = False


class RequestFilters(BaseModel):
    """List filters shared by the request listings"""
    status_id: Optional[int] = None
    priority_id: Optional[int] = None
    search: Optional[str] = None


class HistoryEntry(BaseModel):
    """Append-only status history row"""
    model_config = ConfigDict(from_attributes=True)

    history_id: int
    request_id: int
    status_id: int
    status_name: Optional[str] = None
    created_at: datetime
    action_time: datetime
    note: Optional[str] = None


class Approval(BaseModel):
    """Append-only approval row"""
    model_config = ConfigDict(from_attributes=True)

    approval_id: int
    request_id: int
    approved_by_user_id: str
    approver_name: Optional[str] = None
    approved_at: datetime
    note: Optional[str] = None


class RequestDetail(BaseModel):
    """Everything the detail view needs"""
    request: Request
    workflow_steps: List[WorkflowStep] = Field(default_factory=list)
    history: List[HistoryEntry] = Field(default_factory=list)
    approvals: List[Approval] = Field(default_factory=list)
    view_count: int = 0
    is_owner: bool = False
    is_assigned: bool = False
    can_process: bool = False


class AssignedStats(BaseModel):
    total: int = 0
    urgent: int = 0
    pending: int = 0
    completed: int = 0


class DashboardSummary(BaseModel):
    my_requests: int = 0
    assigned_to_me: int = 0
    pending_requests: int = 0
    recent_activity: List[Request] = Field(default_factory=list)


# ============================================================================
# Collaboration
# ============================================================================

class Comment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    comment_id: int
    request_id: int
    user_id: str
    user_name: Optional[str] = None
    content: str
    is_internal: bool = False
    is_edited: bool = False
    parent_comment_id: Optional[int] = None
    mentioned_user_ids: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None
    edited_at: Optional[datetime] = None


class Notification(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    notification_id: int
    user_id: str
    title: str
    message: Optional[str] = None
    type: str
    request_id: Optional[int] = None
    is_read: bool = False
    created_at: datetime
