"""Notification Repository - Data access for the in-app notification bell"""
from typing import List, Optional

from sqlalchemy import delete, func, insert, select, update

from .database import query
from .tables import NotificationRow
from ..domain.enums import NotificationType
from ..domain.errors import NotificationNotFoundError
from ..domain.models import Notification
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


class NotificationRepository:
    """Repository for per-user notifications (polled, never pushed)"""

    def create_notification(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        request_id: Optional[int] = None
    ) -> int:
        """Create a new unread notification"""
        statement = insert(NotificationRow).values({
            NotificationRow.user_id: user_id,
            NotificationRow.title: title,
            NotificationRow.message: message,
            NotificationRow.type: notification_type.value,
            NotificationRow.request_id: request_id,
            NotificationRow.is_read: False,
            NotificationRow.created_at: utc_now(),
        }).returning(NotificationRow.notification_id)
        notification_id = int(query(statement).scalar())
        logger.info(
            f"Created {notification_type.value} notification for {user_id}",
            extra={"user_id": user_id, "request_id": request_id}
        )
        return notification_id

    def list_for_user(
        self,
        user_id: str,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 20
    ) -> List[Notification]:
        """User's notifications, newest first"""
        statement = select(NotificationRow).where(NotificationRow.user_id == user_id)
        if unread_only:
            statement = statement.where(NotificationRow.is_read.is_(False))
        statement = (
            statement
            .order_by(NotificationRow.created_at.desc(), NotificationRow.notification_id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [Notification.model_validate(row) for row in query(statement).scalars()]

    def count_for_user(self, user_id: str) -> int:
        statement = select(func.count()).select_from(NotificationRow).where(NotificationRow.user_id == user_id)
        return int(query(statement).scalar() or 0)

    def count_unread(self, user_id: str) -> int:
        statement = (
            select(func.count())
            .select_from(NotificationRow)
            .where(NotificationRow.user_id == user_id, NotificationRow.is_read.is_(False))
        )
        return int(query(statement).scalar() or 0)

    def mark_read(self, notification_id: int, user_id: str) -> None:
        """
        Mark one notification read

        Raises:
            NotificationNotFoundError: If it does not exist or belongs to someone else
        """
        statement = (
            update(NotificationRow)
            .where(NotificationRow.notification_id == notification_id, NotificationRow.user_id == user_id)
            .values({NotificationRow.is_read: True})
        )
        if query(statement).rowcount == 0:
            raise NotificationNotFoundError(
                "Thông báo không tồn tại",
                details={"notification_id": notification_id}
            )

    def mark_all_read(self, user_id: str) -> int:
        statement = (
            update(NotificationRow)
            .where(NotificationRow.user_id == user_id, NotificationRow.is_read.is_(False))
            .values({NotificationRow.is_read: True})
        )
        marked = query(statement).rowcount
        logger.info(f"Marked {marked} notifications read", extra={"user_id": user_id})
        return marked

    def delete_notification(self, notification_id: int, user_id: str) -> None:
        statement = delete(NotificationRow).where(
            NotificationRow.notification_id == notification_id,
            NotificationRow.user_id == user_id,
        )
        if query(statement).rowcount == 0:
            raise NotificationNotFoundError(
                "Thông báo không tồn tại",
                details={"notification_id": notification_id}
            )

    def clear_read(self, user_id: str) -> int:
        statement = delete(NotificationRow).where(
            NotificationRow.user_id == user_id,
            NotificationRow.is_read.is_(True),
        )
        return query(statement).rowcount
