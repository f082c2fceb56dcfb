"""Reference Data - Idempotent seeding of statuses, priorities, roles and workflows

Rows are matched by name, so running the seed twice changes nothing and
existing ids are never renumbered.
"""
from typing import Dict, List, Optional, Tuple

from sqlalchemy import insert, select

from .database import query
from .tables import PriorityRow, RoleRow, StatusRow, UserRow, WorkflowRow, WorkflowStepRow
from .user_repo import UserRepository
from ..domain.enums import ADMIN_ROLE_NAMES, DEFAULT_ROLE_NAME, PriorityName, StatusKind
from ..utils.idgen import generate_id
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)

# (kind, description, is_final)
STATUS_SEED: List[Tuple[StatusKind, str, bool]] = [
    (StatusKind.DRAFT, "Bản nháp, chỉ người tạo nhìn thấy", False),
    (StatusKind.NEW, "Yêu cầu mới được gửi", False),
    (StatusKind.IN_PROGRESS, "Yêu cầu đang được xử lý", False),
    (StatusKind.COMPLETED, "Yêu cầu đã hoàn thành", True),
    (StatusKind.REJECTED, "Yêu cầu bị từ chối", True),
]

# (name, color, sort order)
PRIORITY_SEED: List[Tuple[PriorityName, str, int]] = [
    (PriorityName.URGENT, "#dc3545", 1),
    (PriorityName.HIGH, "#fd7e14", 2),
    (PriorityName.MEDIUM, "#0d6efd", 3),
    (PriorityName.LOW, "#6c757d", 4),
]

ROLE_SEED = (ADMIN_ROLE_NAMES[0], DEFAULT_ROLE_NAME)

# workflow id -> (name, description, [(step name, role, status)])
WORKFLOW_SEED: Dict[int, Tuple[str, str, List[Tuple[str, Optional[str], StatusKind]]]] = {
    1: (
        "Quy trình tiêu chuẩn",
        "Tiếp nhận, xử lý và hoàn thành",
        [
            ("Tiếp nhận", "User", StatusKind.NEW),
            ("Xử lý", "User", StatusKind.IN_PROGRESS),
            ("Hoàn thành", "User", StatusKind.COMPLETED),
        ],
    ),
    2: (
        "Quy trình khẩn cấp",
        "Yêu cầu ưu tiên cao, quản trị viên duyệt",
        [
            ("Tiếp nhận", "Admin", StatusKind.NEW),
            ("Xử lý khẩn", "User", StatusKind.IN_PROGRESS),
            ("Quản trị viên duyệt", "Admin", StatusKind.COMPLETED),
        ],
    ),
}


def seed_statuses() -> Dict[StatusKind, int]:
    """Insert missing lifecycle statuses; returns kind -> StatusID"""
    existing = {
        row.status_name.strip(): row.status_id
        for row in query(select(StatusRow)).scalars()
    }
    ids: Dict[StatusKind, int] = {}
    for kind, description, is_final in STATUS_SEED:
        if kind.value in existing:
            ids[kind] = existing[kind.value]
            continue
        ids[kind] = query(
            insert(StatusRow).values({
                StatusRow.status_name: kind.value,
                StatusRow.description: description,
                StatusRow.is_final: is_final,
                StatusRow.created_at: utc_now(),
            }).returning(StatusRow.status_id)
        ).scalar()
        logger.info(f"Seeded status {kind.value}", extra={"status_id": ids[kind]})
    return ids


def seed_priorities() -> Dict[PriorityName, int]:
    existing = {row.priority_name: row.priority_id for row in query(select(PriorityRow)).scalars()}
    ids: Dict[PriorityName, int] = {}
    for name, color, sort_order in PRIORITY_SEED:
        if name.value in existing:
            ids[name] = existing[name.value]
            continue
        ids[name] = query(
            insert(PriorityRow).values({
                PriorityRow.priority_name: name.value,
                PriorityRow.color_code: color,
                PriorityRow.sort_order: sort_order,
                PriorityRow.is_active: True,
            }).returning(PriorityRow.priority_id)
        ).scalar()
    return ids


def seed_roles() -> Dict[str, str]:
    """Insert missing roles; returns name -> role id"""
    existing = {row.name: row.id for row in query(select(RoleRow)).scalars()}
    for name in ROLE_SEED:
        if name not in existing:
            role_id = generate_id()
            query(insert(RoleRow).values({
                RoleRow.id: role_id,
                RoleRow.name: name,
                RoleRow.normalized_name: name.upper(),
            }))
            existing[name] = role_id
    return existing


def seed_workflows(status_ids: Dict[StatusKind, int], role_ids: Dict[str, str]) -> List[int]:
    """Insert the default and urgent workflows with their display steps"""
    existing = set(query(select(WorkflowRow.workflow_id)).scalars())
    created = []
    for workflow_id, (name, description, steps) in WORKFLOW_SEED.items():
        if workflow_id in existing:
            continue
        query(insert(WorkflowRow).values({
            WorkflowRow.workflow_id: workflow_id,
            WorkflowRow.workflow_name: name,
            WorkflowRow.description: description,
            WorkflowRow.is_active: True,
            WorkflowRow.created_at: utc_now(),
        }))
        for order, (step_name, role, kind) in enumerate(steps, start=1):
            query(insert(WorkflowStepRow).values({
                WorkflowStepRow.workflow_id: workflow_id,
                WorkflowStepRow.step_name: step_name,
                WorkflowStepRow.step_order: order,
                WorkflowStepRow.role_id: role_ids.get(role) if role else None,
                WorkflowStepRow.status_id: status_ids.get(kind),
            }))
        created.append(workflow_id)
    return created


def create_user(
    user_name: str,
    email: Optional[str] = None,
    password_hash: Optional[str] = None,
    roles: Optional[List[str]] = None,
    role_ids: Optional[Dict[str, str]] = None,
    user_id: Optional[str] = None,
) -> str:
    """Insert a user and link the named roles; returns Users.Id"""
    role_ids = role_ids or {}
    return UserRepository().create_user(
        user_name,
        email,
        password_hash,
        role_ids=[role_ids[role] for role in roles or [] if role in role_ids],
        user_id=user_id,
    )


def ensure_admin(user_name: str, email: str, password_hash: str, role_ids: Dict[str, str]) -> Tuple[str, bool]:
    """
    Make sure a bootstrap admin exists

    Returns:
        (user id, created) where created is False when the user name was taken
    """
    existing = query(select(UserRow.id).where(UserRow.user_name == user_name)).scalar()
    if existing:
        return existing, False
    user_id = create_user(user_name, email, password_hash, roles=["Admin"], role_ids=role_ids)
    logger.info(f"Created bootstrap admin {user_name}", extra={"user_id": user_id})
    return user_id, True


def seed_reference_data() -> Dict[str, Dict]:
    """Seed everything except users; safe to run repeatedly"""
    status_ids = seed_statuses()
    priority_ids = seed_priorities()
    role_ids = seed_roles()
    seed_workflows(status_ids, role_ids)
    return {"statuses": status_ids, "priorities": priority_ids, "roles": role_ids}
