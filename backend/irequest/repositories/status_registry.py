"""Status Registry - Maps StatusKind to seeded Status ids, loaded once"""
import threading
from typing import Dict, List, Optional

from sqlalchemy import select

from ..domain.enums import StatusKind
from ..domain.errors import ConfigurationError
from ..domain.models import Status
from .database import query
from .tables import StatusRow
from ..utils.logger import get_logger

logger = get_logger(__name__)


class StatusRegistry:
    """
    Resolve lifecycle status kinds to database ids

    The Status table is read on first use and cached for the lifetime of
    the process. A kind missing from the table is a deployment problem and
    surfaces as ConfigurationError rather than a NULL foreign key.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._loaded = False
        self._by_kind: Dict[StatusKind, Status] = {}
        self._by_id: Dict[int, Status] = {}

    def load(self, force: bool = False) -> None:
        """Read the Status table (idempotent unless force=True)"""
        with self._lock:
            if self._loaded and not force:
                return
            rows = query(select(StatusRow).order_by(StatusRow.status_id)).scalars()
            by_kind: Dict[StatusKind, Status] = {}
            by_id: Dict[int, Status] = {}
            for row in rows:
                status = Status.model_validate(row)
                by_id[status.status_id] = status
                kind = status.kind
                if kind is not None and kind not in by_kind:
                    by_kind[kind] = status
            self._by_kind = by_kind
            self._by_id = by_id
            self._loaded = True

            missing = [kind.value for kind in StatusKind if kind not in by_kind]
            if missing:
                logger.warning(f"Seed statuses missing from Status table: {missing}")
            else:
                logger.info(f"Status registry loaded ({len(by_id)} statuses)")

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def id_of(self, kind: StatusKind) -> int:
        """
        Id of the status for a kind

        Raises:
            ConfigurationError: If the seed row is absent
        """
        self._ensure_loaded()
        status = self._by_kind.get(kind)
        if status is None:
            raise ConfigurationError(
                f"expected seed status {kind.value} not found",
                details={"status_name": kind.value}
            )
        return status.status_id

    def maybe_id(self, kind: StatusKind) -> Optional[int]:
        """Id of the status for a kind, or None when not seeded"""
        self._ensure_loaded()
        status = self._by_kind.get(kind)
        return status.status_id if status else None

    def get(self, status_id: int) -> Optional[Status]:
        """Status row by id (None when unknown)"""
        self._ensure_loaded()
        return self._by_id.get(status_id)

    def kind_of(self, status_id: Optional[int]) -> Optional[StatusKind]:
        """Kind for a status id, None for ids outside the five lifecycle statuses"""
        if status_id is None:
            return None
        status = self.get(status_id)
        return status.kind if status else None

    def final_ids(self) -> List[int]:
        """Ids of all terminal statuses"""
        self._ensure_loaded()
        return [s.status_id for s in self._by_id.values() if s.is_final]

    def non_final_ids(self) -> List[int]:
        """Ids of statuses that are neither terminal nor the draft sentinel"""
        self._ensure_loaded()
        draft = self._by_kind.get(StatusKind.DRAFT)
        return [
            s.status_id for s in self._by_id.values()
            if not s.is_final and (draft is None or s.status_id != draft.status_id)
        ]

    def all(self) -> List[Status]:
        self._ensure_loaded()
        return list(self._by_id.values())


# Global registry instance
_registry: Optional[StatusRegistry] = None
_registry_lock = threading.Lock()


def get_status_registry() -> StatusRegistry:
    """Get global status registry instance"""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = StatusRegistry()
    return _registry


def reset_status_registry() -> None:
    """Forget cached ids (new database or reseeded Status table)"""
    global _registry
    with _registry_lock:
        _registry = None
