"""Notification Service - In-app notifications raised by request activity"""
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..domain.enums import NotificationType
from ..domain.models import AuthContext, Notification, Request
from ..repositories.notification_repo import NotificationRepository
from ..utils.logger import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Create and read in-app notifications

    Notifications are written after the action they describe has
    committed. A failure to notify is logged and does not undo the action.
    """

    def __init__(self, repo: Optional[NotificationRepository] = None):
        self.repo = repo or NotificationRepository()

    def _notify(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        request_id: Optional[int]
    ) -> Optional[int]:
        try:
            return self.repo.create_notification(user_id, notification_type, title, message, request_id)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to create {notification_type.value} notification: {e}",
                extra={"user_id": user_id, "request_id": request_id}
            )
            return None

    # =========================================================================
    # Request activity
    # =========================================================================

    def notify_approved(self, request: Request, actor: AuthContext) -> Optional[int]:
        """Tell the creator their request was approved (not when they approved it themselves)"""
        if actor.user_id == request.users_id:
            return None
        return self._notify(
            request.users_id,
            NotificationType.APPROVAL,
            "Yêu cầu được phê duyệt",
            f'Yêu cầu "{request.title}" của bạn đã được phê duyệt',
            request.request_id,
        )

    def notify_rejected(self, request: Request, actor: AuthContext, reason: str) -> Optional[int]:
        """Tell the creator their request was rejected, with the reason"""
        if actor.user_id == request.users_id:
            return None
        return self._notify(
            request.users_id,
            NotificationType.REJECTION,
            "Yêu cầu bị từ chối",
            f'Yêu cầu "{request.title}" của bạn đã bị từ chối. Lý do: {reason}',
            request.request_id,
        )

    def notify_assigned(self, request: Request, assignee_id: str, actor: AuthContext) -> Optional[int]:
        if actor.user_id == assignee_id:
            return None
        return self._notify(
            assignee_id,
            NotificationType.ASSIGNMENT,
            "Yêu cầu mới được giao",
            f'Bạn được giao xử lý yêu cầu "{request.title}"',
            request.request_id,
        )

    def notify_comment(self, request: Request, actor: AuthContext) -> Optional[int]:
        """Tell the creator someone else commented on their request"""
        if actor.user_id == request.users_id:
            return None
        return self._notify(
            request.users_id,
            NotificationType.COMMENT,
            "Bình luận mới",
            f'{actor.user_name} đã bình luận về yêu cầu "{request.title}"',
            request.request_id,
        )

    def notify_mentions(self, request: Request, actor: AuthContext, user_ids: Iterable[str]) -> List[int]:
        created = []
        for user_id in dict.fromkeys(user_ids):
            if not user_id or user_id == actor.user_id:
                continue
            notification_id = self._notify(
                user_id,
                NotificationType.MENTION,
                "Bạn được nhắc đến",
                f'{actor.user_name} đã nhắc đến bạn trong yêu cầu "{request.title}"',
                request.request_id,
            )
            if notification_id is not None:
                created.append(notification_id)
        return created

    # =========================================================================
    # Bell
    # =========================================================================

    def list_notifications(
        self,
        user_id: str,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 20
    ) -> List[Notification]:
        return self.repo.list_for_user(user_id, unread_only=unread_only, skip=skip, limit=limit)

    def count_all(self, user_id: str) -> int:
        return self.repo.count_for_user(user_id)

    def unread_count(self, user_id: str) -> int:
        return self.repo.count_unread(user_id)

    def mark_read(self, notification_id: int, user_id: str) -> None:
        self.repo.mark_read(notification_id, user_id)

    def mark_all_read(self, user_id: str) -> int:
        return self.repo.mark_all_read(user_id)

    def delete(self, notification_id: int, user_id: str) -> None:
        self.repo.delete_notification(notification_id, user_id)

    def clear_read(self, user_id: str) -> int:
        return self.repo.clear_read(user_id)
