"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error - all errors extend this"""

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to API response dict"""
        return {
            "success": False,
            "message": self.message,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Authentication & Authorization Errors
class AuthenticationError(DomainError):
    """Token missing, invalid, or expired"""
    error_code = "AUTHENTICATION_ERROR"
    http_status = 401


class AuthorizationError(DomainError):
    """User lacks permission for action"""
    error_code = "AUTHORIZATION_ERROR"
    http_status = 403


class PermissionDeniedError(AuthorizationError):
    """Specific permission denied"""
    error_code = "PERMISSION_DENIED"


# Validation Errors
class ValidationError(DomainError):
    """Input validation failed"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


# Not Found Errors
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


class RequestNotFoundError(NotFoundError):
    """Request not found (or a draft owned by someone else)"""
    error_code = "REQUEST_NOT_FOUND"


class StatusNotFoundError(NotFoundError):
    """Status row not found"""
    error_code = "STATUS_NOT_FOUND"


class PriorityNotFoundError(NotFoundError):
    """Priority row not found"""
    error_code = "PRIORITY_NOT_FOUND"


class UserNotFoundError(NotFoundError):
    """User not found"""
    error_code = "USER_NOT_FOUND"


class NotificationNotFoundError(NotFoundError):
    """Notification not found for this user"""
    error_code = "NOTIFICATION_NOT_FOUND"


class CommentNotFoundError(NotFoundError):
    """Comment not found"""
    error_code = "COMMENT_NOT_FOUND"


# Conflict Errors
class ConflictError(DomainError):
    """Resource conflict"""
    error_code = "CONFLICT"
    http_status = 409


class DuplicateUserError(ConflictError):
    """User name or email already registered"""
    error_code = "DUPLICATE_USER"


class InvalidStateError(ConflictError):
    """Action not valid for current state"""
    error_code = "INVALID_STATE"


# Server-side Errors
class ConfigurationError(DomainError):
    """Seed data or settings missing at runtime"""
    error_code = "CONFIGURATION_ERROR"
    http_status = 500
