"""User Repository - Users, roles and the per-request auth context"""
from typing import List, Optional, Sequence

from sqlalchemy import func, insert, or_, select, update

from .database import query, transaction
from .tables import DepartmentRow, RoleRow, UserRoleRow, UserRow
from ..domain.enums import ADMIN_ROLE_NAMES
from ..domain.errors import UserNotFoundError
from ..domain.models import AuthContext, UserSummary
from ..utils.idgen import generate_id
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


class UserRepository:
    """Repository for users and their roles (users are never deleted)"""

    def get_user(self, user_id: str) -> Optional[UserRow]:
        return query(select(UserRow).where(UserRow.id == user_id)).scalar()

    def get_user_or_raise(self, user_id: str) -> UserRow:
        user = self.get_user(user_id)
        if user is None:
            raise UserNotFoundError("User không tồn tại", details={"user_id": user_id})
        return user

    def find_by_login(self, login: str) -> Optional[UserRow]:
        """Match user name or email, case-insensitively"""
        normalized = login.strip().upper()
        statement = select(UserRow).where(or_(
            func.upper(UserRow.user_name) == normalized,
            func.upper(UserRow.email) == normalized,
        ))
        return query(statement).scalar()

    def find_by_user_name(self, user_name: str) -> Optional[UserRow]:
        statement = select(UserRow).where(func.upper(UserRow.user_name) == user_name.strip().upper())
        return query(statement).scalar()

    def find_by_email(self, email: str) -> Optional[UserRow]:
        statement = select(UserRow).where(func.upper(UserRow.email) == email.strip().upper())
        return query(statement).scalar()

    def list_users(self, search: Optional[str] = None, limit: int = 50) -> List[UserSummary]:
        """Users for assignee and mention pickers, by name"""
        statement = select(UserRow)
        if search:
            pattern = f"%{search.strip()}%"
            statement = statement.where(or_(UserRow.user_name.ilike(pattern), UserRow.email.ilike(pattern)))
        statement = statement.order_by(UserRow.user_name).limit(limit)
        return [UserSummary.model_validate(row) for row in query(statement).scalars()]

    def exists(self, user_id: str) -> bool:
        return self.get_user(user_id) is not None

    def get_role_names(self, user_id: str) -> List[str]:
        statement = (
            select(RoleRow.name)
            .join(UserRoleRow, UserRoleRow.role_id == RoleRow.id)
            .where(UserRoleRow.user_id == user_id)
            .order_by(RoleRow.name)
        )
        return [name for name in query(statement).scalars() if name]

    def get_auth_context(self, user_id: str) -> AuthContext:
        """
        Resolve the caller's identity and roles

        Raises:
            UserNotFoundError: If the token refers to a user that no longer exists
        """
        user = self.get_user_or_raise(user_id)
        roles = self.get_role_names(user_id)
        return AuthContext(
            user_id=user.id,
            user_name=user.user_name,
            email=user.email,
            department_id=user.department_id,
            is_admin=any(role in ADMIN_ROLE_NAMES for role in roles),
            roles=roles,
        )

    def get_role_id(self, role_name: str) -> Optional[str]:
        return query(select(RoleRow.id).where(RoleRow.name == role_name)).scalar()

    def department_exists(self, department_id: int) -> bool:
        statement = select(DepartmentRow.department_id).where(DepartmentRow.department_id == department_id)
        return query(statement).scalar() is not None

    def create_user(
        self,
        user_name: str,
        email: Optional[str],
        password_hash: Optional[str],
        department_id: Optional[int] = None,
        role_ids: Sequence[str] = (),
        user_id: Optional[str] = None,
    ) -> str:
        """Insert a user and its role links in one transaction; returns Users.Id"""
        user_id = user_id or generate_id()
        statements = [insert(UserRow).values({
            UserRow.id: user_id,
            UserRow.user_name: user_name,
            UserRow.normalized_user_name: user_name.upper(),
            UserRow.email: email,
            UserRow.normalized_email: email.upper() if email else None,
            UserRow.password_hash: password_hash,
            UserRow.department_id: department_id,
            UserRow.created_at: utc_now(),
        })]
        statements.extend(
            insert(UserRoleRow).values({UserRoleRow.user_id: user_id, UserRoleRow.role_id: role_id})
            for role_id in role_ids
        )
        transaction(statements)
        logger.info(f"Created user {user_name}", extra={"user_id": user_id, "action": "create_user"})
        return user_id

    def update_password_hash(self, user_id: str, password_hash: str) -> None:
        query(update(UserRow).where(UserRow.id == user_id).values({UserRow.password_hash: password_hash}))
