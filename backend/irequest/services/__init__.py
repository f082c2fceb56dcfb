"""Service modules - Business logic layer"""
from .request_service import RequestService
from .comment_service import CommentService
from .notification_service import NotificationService
from .auth_service import AuthService

__all__ = [
    "RequestService",
    "CommentService",
    "NotificationService",
    "AuthService",
]
