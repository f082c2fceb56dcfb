"""Table Definitions - SQLAlchemy declarative mapping of the relational schema

Attribute names are snake_case; the stored column names keep the
PascalCase layout the existing database uses.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all iRequest tables"""
    pass


# ============================================================================
# Identity
# ============================================================================

class UserRow(Base):
    __tablename__ = "Users"

    id: Mapped[str] = mapped_column("Id", String(36), primary_key=True)
    user_name: Mapped[str] = mapped_column("UserName", String(256), nullable=False)
    normalized_user_name: Mapped[Optional[str]] = mapped_column("NormalizedUserName", String(256), index=True)
    email: Mapped[Optional[str]] = mapped_column("Email", String(256))
    normalized_email: Mapped[Optional[str]] = mapped_column("NormalizedEmail", String(256), index=True)
    password_hash: Mapped[Optional[str]] = mapped_column("PasswordHash", Text)
    department_id: Mapped[Optional[int]] = mapped_column("DepartmentID", ForeignKey("Departments.DepartmentID"))
    avatar: Mapped[Optional[str]] = mapped_column("Avatar", String(500))
    created_at: Mapped[Optional[datetime]] = mapped_column("CreatedAt", DateTime(timezone=True))


class RoleRow(Base):
    __tablename__ = "Roles"

    id: Mapped[str] = mapped_column("Id", String(36), primary_key=True)
    name: Mapped[str] = mapped_column("Name", String(256), nullable=False)
    normalized_name: Mapped[Optional[str]] = mapped_column("NormalizedName", String(256))


class UserRoleRow(Base):
    __tablename__ = "UserRoles"

    user_id: Mapped[str] = mapped_column("UserId", ForeignKey("Users.Id"), primary_key=True)
    role_id: Mapped[str] = mapped_column("RoleId", ForeignKey("Roles.Id"), primary_key=True)


class DepartmentRow(Base):
    __tablename__ = "Departments"

    department_id: Mapped[int] = mapped_column("DepartmentID", Integer, primary_key=True, autoincrement=True)
    department_name: Mapped[str] = mapped_column("DepartmentName", String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column("Description", Text)


# ============================================================================
# Reference data
# ============================================================================

class StatusRow(Base):
    __tablename__ = "Status"

    status_id: Mapped[int] = mapped_column("StatusID", Integer, primary_key=True, autoincrement=True)
    status_name: Mapped[str] = mapped_column("StatusName", String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column("Description", Text)
    is_final: Mapped[bool] = mapped_column("IsFinal", Boolean, nullable=False, default=False)
    created_at: Mapped[Optional[datetime]] = mapped_column("CreatedAt", DateTime(timezone=True))


class PriorityRow(Base):
    __tablename__ = "Priority"

    priority_id: Mapped[int] = mapped_column("PriorityID", Integer, primary_key=True, autoincrement=True)
    priority_name: Mapped[str] = mapped_column("PriorityName", String(100), nullable=False, unique=True)
    color_code: Mapped[Optional[str]] = mapped_column("ColorCode", String(20))
    sort_order: Mapped[int] = mapped_column("SortOrder", Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column("IsActive", Boolean, nullable=False, default=True)


class WorkflowRow(Base):
    __tablename__ = "Workflow"

    workflow_id: Mapped[int] = mapped_column("WorkflowID", Integer, primary_key=True, autoincrement=True)
    workflow_name: Mapped[str] = mapped_column("WorkflowName", String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column("Description", Text)
    is_active: Mapped[bool] = mapped_column("IsActive", Boolean, nullable=False, default=True)
    created_at: Mapped[Optional[datetime]] = mapped_column("CreatedAt", DateTime(timezone=True))


class WorkflowStepRow(Base):
    __tablename__ = "WorkflowSteps"

    step_id: Mapped[int] = mapped_column("StepID", Integer, primary_key=True, autoincrement=True)
    workflow_id: Mapped[int] = mapped_column("WorkflowID", ForeignKey("Workflow.WorkflowID"), nullable=False, index=True)
    step_name: Mapped[str] = mapped_column("StepName", String(200), nullable=False)
    step_order: Mapped[int] = mapped_column("StepOrder", Integer, nullable=False)
    role_id: Mapped[Optional[str]] = mapped_column("RoleId", ForeignKey("Roles.Id"))
    status_id: Mapped[Optional[int]] = mapped_column("StatusID", ForeignKey("Status.StatusID"))
    assigned_user_id: Mapped[Optional[str]] = mapped_column("AssignedUserId", ForeignKey("Users.Id"))


# ============================================================================
# Requests and audit trail
# ============================================================================

class RequestRow(Base):
    __tablename__ = "Requests"

    request_id: Mapped[int] = mapped_column("RequestID", Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column("Title", String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column("Description", Text)
    users_id: Mapped[str] = mapped_column("UsersId", ForeignKey("Users.Id"), nullable=False, index=True)
    assigned_user_id: Mapped[Optional[str]] = mapped_column("AssignedUserId", ForeignKey("Users.Id"), index=True)
    status_id: Mapped[int] = mapped_column("StatusID", ForeignKey("Status.StatusID"), nullable=False, index=True)
    priority_id: Mapped[Optional[int]] = mapped_column("PriorityID", ForeignKey("Priority.PriorityID"))
    workflow_id: Mapped[Optional[int]] = mapped_column("WorkflowID", ForeignKey("Workflow.WorkflowID"))
    current_step_order: Mapped[int] = mapped_column("CurrentStepOrder", Integer, nullable=False, default=1)
    is_approved: Mapped[bool] = mapped_column("IsApproved", Boolean, nullable=False, default=False)
    issue_type: Mapped[Optional[str]] = mapped_column("IssueType", String(100))
    form_data: Mapped[Optional[str]] = mapped_column("FormData", Text)
    attachment_url: Mapped[Optional[str]] = mapped_column("AttachmentURL", String(1000))
    attachment_file_name: Mapped[Optional[str]] = mapped_column("AttachmentFileName", String(500))
    attachment_file_size: Mapped[Optional[int]] = mapped_column("AttachmentFileSize", Integer)
    attachment_file_type: Mapped[Optional[str]] = mapped_column("AttachmentFileType", String(200))
    created_at: Mapped[datetime] = mapped_column("CreatedAt", DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column("UpdatedAt", DateTime(timezone=True), nullable=False)


class RequestStepHistoryRow(Base):
    __tablename__ = "RequestStepHistory"

    history_id: Mapped[int] = mapped_column("HistoryID", Integer, primary_key=True, autoincrement=True)
    request_id: Mapped[int] = mapped_column("RequestID", ForeignKey("Requests.RequestID", ondelete="CASCADE"), nullable=False, index=True)
    status_id: Mapped[int] = mapped_column("StatusID", ForeignKey("Status.StatusID"), nullable=False)
    created_at: Mapped[datetime] = mapped_column("CreatedAt", DateTime(timezone=True), nullable=False)
    action_time: Mapped[datetime] = mapped_column("ActionTime", DateTime(timezone=True), nullable=False)
    note: Mapped[Optional[str]] = mapped_column("Note", Text)


class RequestApprovalRow(Base):
    __tablename__ = "RequestApprovals"

    approval_id: Mapped[int] = mapped_column("ApprovalID", Integer, primary_key=True, autoincrement=True)
    request_id: Mapped[int] = mapped_column("RequestId", ForeignKey("Requests.RequestID", ondelete="CASCADE"), nullable=False, index=True)
    approved_by_user_id: Mapped[str] = mapped_column("ApprovedByUserId", ForeignKey("Users.Id"), nullable=False)
    approved_at: Mapped[datetime] = mapped_column("ApprovedAt", DateTime(timezone=True), nullable=False)
    note: Mapped[Optional[str]] = mapped_column("Note", Text)


class RequestViewRow(Base):
    __tablename__ = "RequestViews"
    __table_args__ = (UniqueConstraint("RequestID", "UserId", name="UQ_RequestViews_Request_User"),)

    request_view_id: Mapped[int] = mapped_column("RequestViewId", Integer, primary_key=True, autoincrement=True)
    request_id: Mapped[int] = mapped_column("RequestID", ForeignKey("Requests.RequestID", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[str] = mapped_column("UserId", ForeignKey("Users.Id"), nullable=False)
    viewed_at: Mapped[datetime] = mapped_column("ViewedAt", DateTime(timezone=True), nullable=False)


# ============================================================================
# Collaboration
# ============================================================================

class CommentRow(Base):
    __tablename__ = "Comments"

    comment_id: Mapped[int] = mapped_column("CommentId", Integer, primary_key=True, autoincrement=True)
    request_id: Mapped[int] = mapped_column("RequestId", ForeignKey("Requests.RequestID", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column("UserId", ForeignKey("Users.Id"), nullable=False)
    content: Mapped[str] = mapped_column("Content", Text, nullable=False)
    is_internal: Mapped[bool] = mapped_column("IsInternal", Boolean, nullable=False, default=False)
    is_edited: Mapped[bool] = mapped_column("IsEdited", Boolean, nullable=False, default=False)
    parent_comment_id: Mapped[Optional[int]] = mapped_column("ParentCommentId", ForeignKey("Comments.CommentId"))
    mentioned_user_ids: Mapped[Optional[str]] = mapped_column("MentionedUserIds", Text)
    created_at: Mapped[datetime] = mapped_column("CreatedAt", DateTime(timezone=True), nullable=False)
    updated_at: Mapped[Optional[datetime]] = mapped_column("UpdatedAt", DateTime(timezone=True))
    edited_at: Mapped[Optional[datetime]] = mapped_column("EditedAt", DateTime(timezone=True))


class NotificationRow(Base):
    __tablename__ = "Notifications"

    notification_id: Mapped[int] = mapped_column("NotificationId", Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column("UserId", ForeignKey("Users.Id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column("Title", String(500), nullable=False)
    message: Mapped[Optional[str]] = mapped_column("Message", Text)
    type: Mapped[str] = mapped_column("Type", String(50), nullable=False)
    request_id: Mapped[Optional[int]] = mapped_column("RequestId", ForeignKey("Requests.RequestID", ondelete="SET NULL"))
    is_read: Mapped[bool] = mapped_column("IsRead", Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column("CreatedAt", DateTime(timezone=True), nullable=False)
