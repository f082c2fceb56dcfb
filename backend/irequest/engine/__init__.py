"""Request Lifecycle Engine - The core of the system"""
from .engine import RequestLifecycleEngine
from .permission_guard import PermissionGuard
from .transition_resolver import TransitionResolver, TRANSITIONS
from .audit_writer import AuditWriter

__all__ = [
    "RequestLifecycleEngine",
    "PermissionGuard",
    "TransitionResolver",
    "TRANSITIONS",
    "AuditWriter",
]
