"""Domain Enumerations - All status and type definitions"""
from enum import Enum
from typing import Optional


class StatusKind(str, Enum):
    """
    Lifecycle status of a request.

    Values are the seeded Vietnamese names stored in Status.StatusName;
    the numeric ids are resolved once by the status registry.
    """
    DRAFT = "Nháp"
    NEW = "Mới"
    IN_PROGRESS = "Đang xử lý"
    COMPLETED = "Hoàn thành"
    REJECTED = "Từ chối"

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["StatusKind"]:
        """Match a stored status name, ignoring surrounding whitespace"""
        if not name:
            return None
        cleaned = name.strip()
        for kind in cls:
            if kind.value == cleaned:
                return kind
        return None


class PriorityName(str, Enum):
    """Seeded priorities, most urgent first"""
    URGENT = "Khẩn cấp"
    HIGH = "Cao"
    MEDIUM = "Trung bình"
    LOW = "Thấp"


class NotificationType(str, Enum):
    """In-app notification types"""
    APPROVAL = "approval"
    REJECTION = "rejection"
    COMMENT = "comment"
    MENTION = "mention"
    ASSIGNMENT = "assignment"
    STATUS_CHANGE = "status_change"


class HistoryNote(str, Enum):
    """Fixed notes written to RequestStepHistory"""
    APPROVED = "Approved by user. "
    REJECTED = "Rejected by user: "
    PROCESSING_STARTED = "Request processing started"


ADMIN_ROLE_NAMES = ("Admin", "admin")

# Role given to self-registered users
DEFAULT_ROLE_NAME = "User"

MIN_PASSWORD_LENGTH = 6

DRAFT_DEFAULT_TITLE = "Bản nháp chưa có tiêu đề"
