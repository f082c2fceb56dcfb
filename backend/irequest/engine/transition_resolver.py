"""Transition Resolver - Validate status changes against the lifecycle table"""
from typing import Dict, FrozenSet, Optional

from ..config.settings import settings
from ..domain.enums import StatusKind
from ..domain.errors import InvalidStateError
from ..utils.logger import get_logger
from ..repositories.status_registry import StatusRegistry, get_status_registry

logger = get_logger(__name__)


TRANSITIONS: Dict[StatusKind, FrozenSet[StatusKind]] = {
    StatusKind.DRAFT: frozenset({StatusKind.NEW}),
    StatusKind.NEW: frozenset({StatusKind.IN_PROGRESS}),
    StatusKind.IN_PROGRESS: frozenset({StatusKind.COMPLETED, StatusKind.REJECTED}),
    StatusKind.COMPLETED: frozenset(),
    StatusKind.REJECTED: frozenset(),
}


class TransitionResolver:
    """
    Decide whether a request may move from one status to another

    With strict_status_transitions off (the default) every move is
    allowed, matching the behaviour existing deployments rely on.
    """

    def __init__(self, registry: Optional[StatusRegistry] = None, strict: Optional[bool] = None):
        self._registry = registry
        self._strict = strict

    @property
    def registry(self) -> StatusRegistry:
        return self._registry or get_status_registry()

    @property
    def strict(self) -> bool:
        return settings.strict_status_transitions if self._strict is None else self._strict

    @staticmethod
    def is_allowed(current: Optional[StatusKind], target: Optional[StatusKind]) -> bool:
        """Pure table lookup; unknown kinds never match"""
        if current is None or target is None:
            return False
        return target in TRANSITIONS.get(current, frozenset())

    def validate(self, request_id: int, current_status_id: int, target_status_id: int) -> None:
        """
        Check a status change

        Raises:
            InvalidStateError: In strict mode, when the move is not in the table
        """
        if not self.strict:
            return

        current = self.registry.kind_of(current_status_id)
        target = self.registry.kind_of(target_status_id)
        if self.is_allowed(current, target):
            return

        logger.warning(
            f"Rejected status transition {current_status_id} -> {target_status_id}",
            extra={"request_id": request_id, "status_id": target_status_id}
        )
        raise InvalidStateError(
            f"Không thể chuyển trạng thái từ "
            f"'{current.value if current else current_status_id}' sang "
            f"'{target.value if target else target_status_id}'",
            details={
                "request_id": request_id,
                "from_status_id": current_status_id,
                "to_status_id": target_status_id,
                "allowed": sorted(k.value for k in TRANSITIONS.get(current, frozenset())) if current else [],
            }
        )
