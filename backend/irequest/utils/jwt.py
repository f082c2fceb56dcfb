"""JWT Token Issuing and Validation (HS256, application-signed)"""
import jwt
from typing import Any, Dict, Optional
from datetime import timedelta

from ..config.settings import settings
from ..domain.errors import AuthenticationError
from .time import utc_now
from .logger import get_logger

logger = get_logger(__name__)


class JWTValidator:
    """Issue and validate the application's own access tokens"""

    def __init__(self, secret: Optional[str] = None, algorithm: Optional[str] = None):
        self._secret = secret or settings.jwt_secret
        self._algorithm = algorithm or settings.jwt_algorithm

    def issue_token(self, user_id: str, user_name: str, expires_minutes: Optional[int] = None) -> str:
        """
        Create a signed token for a user

        Args:
            user_id: Users.Id
            user_name: Login name, informational only
            expires_minutes: Lifetime override

        Returns:
            Encoded JWT string
        """
        now = utc_now()
        lifetime = expires_minutes if expires_minutes is not None else settings.jwt_expires_minutes
        claims = {
            "sub": user_id,
            "userId": user_id,
            "userName": user_name,
            "iat": now,
            "exp": now + timedelta(minutes=lifetime),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def validate_token(self, token: str) -> Dict[str, Any]:
        """
        Validate a token and return its claims

        Raises:
            AuthenticationError: If token is missing, expired or invalid
        """
        if not token:
            raise AuthenticationError("Token không tồn tại")

        # Remove 'Bearer ' prefix if present
        if token.startswith("Bearer "):
            token = token[7:]

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": True, "require": ["exp"]},
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Token expired")
            raise AuthenticationError("Token đã hết hạn")
        except jwt.PyJWTError as e:
            logger.warning(f"JWT validation error: {e}")
            raise AuthenticationError("Token không hợp lệ")

        if not (claims.get("userId") or claims.get("sub")):
            raise AuthenticationError("Token không hợp lệ")
        return claims

    def get_user_id(self, token: str) -> str:
        """Validated user id carried by the token"""
        claims = self.validate_token(token)
        return claims.get("userId") or claims["sub"]


# Global validator instance
_jwt_validator: Optional[JWTValidator] = None


def get_jwt_validator() -> JWTValidator:
    """Get global JWT validator instance"""
    global _jwt_validator
    if _jwt_validator is None:
        _jwt_validator = JWTValidator()
    return _jwt_validator
