"""Auth Service - Password login and token issuing"""
from typing import Optional, Tuple

import bcrypt

from ..domain.enums import DEFAULT_ROLE_NAME, MIN_PASSWORD_LENGTH
from ..domain.errors import AuthenticationError, DuplicateUserError, ValidationError
from ..domain.models import AuthContext
from ..repositories.user_repo import UserRepository
from ..utils.jwt import get_jwt_validator
from ..utils.logger import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Tên đăng nhập hoặc mật khẩu không đúng"


def hash_password(password: str) -> str:
    """bcrypt hash suitable for Users.PasswordHash"""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash
        return False


class AuthService:
    """Service for authentication"""

    def __init__(self):
        self.user_repo = UserRepository()

    def login(self, login: str, password: str) -> Tuple[str, AuthContext]:
        """
        Verify credentials and issue an access token

        Raises:
            ValidationError: Missing login or password
            AuthenticationError: Unknown user or wrong password
        """
        if not login or not login.strip() or not password:
            raise ValidationError("Vui lòng nhập tên đăng nhập và mật khẩu")

        user = self.user_repo.find_by_login(login)
        if user is None or not user.password_hash or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt", extra={"action": "login"})
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        logger.info("User logged in", extra={"user_id": user.id, "action": "login"})
        return self._issue(user.id, user.user_name)

    def _issue(self, user_id: str, user_name: str) -> Tuple[str, AuthContext]:
        token = get_jwt_validator().issue_token(user_id, user_name)
        return token, self.user_repo.get_auth_context(user_id)

    def register(
        self,
        user_name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        confirm_password: Optional[str],
        department_id: Optional[int] = None
    ) -> Tuple[str, AuthContext]:
        """
        Create an account with the default role and sign it in

        Raises:
            ValidationError: Missing fields, mismatched or short password, unknown department
            DuplicateUserError: User name or email already taken
        """
        user_name = (user_name or "").strip()
        email = (email or "").strip()
        if not user_name or not email or not password or not confirm_password:
            raise ValidationError("Vui lòng nhập đầy đủ thông tin")
        if password != confirm_password:
            raise ValidationError("Mật khẩu xác nhận không khớp", details={"field": "confirmPassword"})
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Mật khẩu phải có ít nhất {MIN_PASSWORD_LENGTH} ký tự", details={"field": "password"}
            )
        if self.user_repo.find_by_email(email) is not None:
            raise DuplicateUserError("Email đã được sử dụng", details={"field": "email"})
        if self.user_repo.find_by_user_name(user_name) is not None:
            raise DuplicateUserError("Tên đăng nhập đã được sử dụng", details={"field": "username"})
        if department_id is not None and not self.user_repo.department_exists(department_id):
            raise ValidationError("Phòng ban không tồn tại", details={"field": "department"})

        role_id = self.user_repo.get_role_id(DEFAULT_ROLE_NAME)
        user_id = self.user_repo.create_user(
            user_name,
            email,
            hash_password(password),
            department_id=department_id,
            role_ids=[role_id] if role_id else [],
        )
        logger.info("User registered", extra={"user_id": user_id, "action": "register"})
        return self._issue(user_id, user_name)

    def change_password(self, actor: AuthContext, current_password: Optional[str], new_password: Optional[str]) -> None:
        """
        Replace the actor's password after checking the current one

        Raises:
            ValidationError: Missing or short new password, or wrong current password
        """
        if not current_password or not new_password:
            raise ValidationError("Vui lòng nhập mật khẩu hiện tại và mật khẩu mới")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Mật khẩu phải có ít nhất {MIN_PASSWORD_LENGTH} ký tự", details={"field": "newPassword"}
            )

        user = self.user_repo.get_user_or_raise(actor.user_id)
        if not user.password_hash or not verify_password(current_password, user.password_hash):
            logger.warning("Wrong current password", extra={"user_id": actor.user_id, "action": "change_password"})
            raise ValidationError("Mật khẩu hiện tại không đúng", details={"field": "currentPassword"})

        self.user_repo.update_password_hash(actor.user_id, hash_password(new_password))
        logger.info("Password changed", extra={"user_id": actor.user_id, "action": "change_password"})
