"""Utility modules"""
from .logger import get_logger, setup_logging
from .jwt import JWTValidator, get_jwt_validator
from .idgen import generate_correlation_id, generate_id
from .time import utc_now, format_iso, parse_iso, relative_time

__all__ = [
    "get_logger",
    "setup_logging",
    "JWTValidator",
    "get_jwt_validator",
    "generate_correlation_id",
    "generate_id",
    "utc_now",
    "format_iso",
    "parse_iso",
    "relative_time",
]
