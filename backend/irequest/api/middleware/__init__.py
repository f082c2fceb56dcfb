"""
Middleware and exception handlers for the iRequest API.

Modules:
    - correlation: X-Correlation-ID propagation and access log lines
    - error_handlers: Domain errors rendered as JSON or HTML depending on the caller
"""

from .correlation import CorrelationIdMiddleware
from .error_handlers import register_error_handlers

__all__ = ["CorrelationIdMiddleware", "register_error_handlers"]
