"""API module - Routes and dependencies"""
from .deps import get_current_user_dep, read_payload

__all__ = ["get_current_user_dep", "read_payload"]
