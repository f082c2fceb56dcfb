"""User Notifications API - In-app notification bell endpoints"""
from typing import List
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ..deps import get_current_user_dep
from ...domain.models import AuthContext, Notification
from ...services.notification_service import NotificationService
from ...utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class NotificationListResponse(BaseModel):
    """List of notifications with metadata"""
    success: bool = True
    items: List[Notification]
    unread_count: int
    total: int


class UnreadCountResponse(BaseModel):
    """Just the unread count"""
    success: bool = True
    unread_count: int


class MarkReadResponse(BaseModel):
    """Response after marking or clearing notifications"""
    success: bool = True
    marked_count: int


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=NotificationListResponse)
async def get_notifications(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = Query(False),
    actor: AuthContext = Depends(get_current_user_dep)
):
    """
    Get notifications for the current user.

    - Sorted by newest first
    - Supports filtering by unread only
    """
    service = NotificationService()
    return NotificationListResponse(
        items=service.list_notifications(actor.user_id, unread_only=unread_only, skip=skip, limit=limit),
        unread_count=service.unread_count(actor.user_id),
        total=service.count_all(actor.user_id)
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    actor: AuthContext = Depends(get_current_user_dep)
):
    """
    Get just the unread notification count.

    This is a lightweight endpoint for polling the notification badge.
    """
    service = NotificationService()
    return UnreadCountResponse(unread_count=service.unread_count(actor.user_id))


@router.put("/mark-all-read", response_model=MarkReadResponse)
async def mark_all_read(
    actor: AuthContext = Depends(get_current_user_dep)
):
    """Mark all of the user's notifications as read."""
    service = NotificationService()
    return MarkReadResponse(marked_count=service.mark_all_read(actor.user_id))


@router.delete("/clear-read", response_model=MarkReadResponse)
async def clear_read(
    actor: AuthContext = Depends(get_current_user_dep)
):
    """Delete every notification the user has already read."""
    service = NotificationService()
    return MarkReadResponse(marked_count=service.clear_read(actor.user_id))


@router.post("/{notification_id}/read", response_model=MarkReadResponse)
async def mark_notification_read(
    notification_id: int,
    actor: AuthContext = Depends(get_current_user_dep)
):
    """
    Mark a single notification as read.
    """
    service = NotificationService()
    service.mark_read(notification_id, actor.user_id)
    return MarkReadResponse(marked_count=1)


@router.delete("/{notification_id}", response_model=MarkReadResponse)
async def delete_notification(
    notification_id: int,
    actor: AuthContext = Depends(get_current_user_dep)
):
    service = NotificationService()
    service.delete(notification_id, actor.user_id)
    return MarkReadResponse(marked_count=1)
