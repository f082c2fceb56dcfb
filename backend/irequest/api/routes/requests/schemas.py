"""
Request Schemas

Request and response models for request API endpoints.
Bodies may arrive as JSON or as HTML form posts, so field aliases follow
the camelCase names the forms use while snake_case is accepted too.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from ....domain.models import Approval, HistoryEntry, Request, WorkflowStep, Comment


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# =============================================================================
# Create / list
# =============================================================================

class CreateRequestBody(_Body):
    """Request to create a new request or draft"""
    title: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=10000)
    priority_id: Optional[int] = Field(None, alias="priorityId")
    workflow_id: Optional[int] = Field(None, alias="workflowId")
    assigned_user_id: Optional[str] = Field(None, alias="assignedUserId")
    issue_type: Optional[str] = Field(None, alias="issueType", max_length=100)
    form_data: Optional[Dict[str, Any]] = Field(None, alias="formData")
    attachment_url: Optional[str] = Field(None, alias="attachmentUrl")
    attachment_file_name: Optional[str] = Field(None, alias="attachmentFileName")
    attachment_file_size: Optional[int] = Field(None, alias="attachmentFileSize", ge=0)
    attachment_file_type: Optional[str] = Field(None, alias="attachmentFileType")
    is_draft: bool = Field(False, alias="isDraft")


class CreateRequestResponse(BaseModel):
    """Response after creating a request"""
    success: bool = True
    message: str
    request: Request


class RequestListResponse(BaseModel):
    """Paginated request list"""
    success: bool = True
    items: List[Request]
    page: int
    limit: int
    total: int
    total_pages: int


class CountResponse(BaseModel):
    success: bool = True
    count: int


class RequestDetailResponse(BaseModel):
    success: bool = True
    request: Request
    workflow_steps: List[WorkflowStep]
    history: List[HistoryEntry]
    approvals: List[Approval]
    view_count: int = 0
    is_owner: bool
    is_assigned: bool
    can_process: bool


# =============================================================================
# Action Schemas
# =============================================================================

class NoteBody(_Body):
    """Body for approve / reject"""
    note: Optional[str] = Field(None, max_length=2000)


class StatusBody(_Body):
    """Body for a direct status change"""
    status_id: int = Field(..., alias="statusId")
    note: Optional[str] = Field(None, max_length=2000)


class AssignBody(_Body):
    assigned_user_id: str = Field(..., alias="assignedUserId", min_length=1)


class ActionResponse(BaseModel):
    """Standard response for actions"""
    success: bool = True
    message: str


# =============================================================================
# Comment Schemas
# =============================================================================

class CommentBody(_Body):
    content: Optional[str] = Field(None, max_length=5000)
    is_internal: bool = Field(False, alias="isInternal")
    parent_comment_id: Optional[int] = Field(None, alias="parentCommentId")
    mentioned_user_ids: List[str] = Field(default_factory=list, alias="mentionedUserIds")


class UpdateCommentBody(_Body):
    content: Optional[str] = Field(None, max_length=5000)


class CommentListResponse(BaseModel):
    success: bool = True
    comments: List[Comment]


class CreateCommentResponse(BaseModel):
    success: bool = True
    message: str
    comment_id: int


def total_pages(total: int, limit: int) -> int:
    return (total + limit - 1) // limit if limit else 0
