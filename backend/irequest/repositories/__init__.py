"""Repository modules - Data access layer"""
from .database import get_engine, query, transaction, QueryResult
from .status_registry import StatusRegistry, get_status_registry
from .request_repo import RequestRepository
from .lookup_repo import LookupRepository
from .audit_repo import AuditRepository
from .comment_repo import CommentRepository
from .notification_repo import NotificationRepository
from .user_repo import UserRepository

__all__ = [
    "get_engine",
    "query",
    "transaction",
    "QueryResult",
    "StatusRegistry",
    "get_status_registry",
    "RequestRepository",
    "LookupRepository",
    "AuditRepository",
    "CommentRepository",
    "NotificationRepository",
    "UserRepository",
]
