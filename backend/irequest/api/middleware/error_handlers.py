"""
Error Handlers

Centralized exception handlers for the FastAPI application.
JSON for API/XHR callers, an HTML page (or login redirect) for browsers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from fastapi.exceptions import RequestValidationError

from ..negotiation import wants_json
from ...domain.errors import AuthenticationError, DomainError
from ...templates.error_pages import render_error_page
from ...utils.logger import get_logger, get_correlation_id

logger = get_logger(__name__)

LOGIN_URL = "/auth/login"


def _error_response(request: Request, status_code: int, content: dict, message: str) -> Response:
    correlation_id = get_correlation_id() or ""
    headers = {"X-Correlation-Id": correlation_id}
    if wants_json(request):
        return JSONResponse(status_code=status_code, content=content, headers=headers)
    return HTMLResponse(
        status_code=status_code,
        content=render_error_page(status_code, message, correlation_id=correlation_id or None),
        headers=headers
    )


async def domain_error_handler(request: Request, exc: DomainError) -> Response:
    """
    Handle domain-specific errors (business logic errors).

    These are expected errors that occur during normal operation,
    such as validation failures, not found errors, permission denied, etc.
    """
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"Domain error: {exc.error_code} - {exc.message}",
        extra={"error_code": exc.error_code, "path": request.url.path}
    )
    if isinstance(exc, AuthenticationError) and not wants_json(request):
        return RedirectResponse(url=LOGIN_URL, status_code=303)
    return _error_response(request, exc.http_status, exc.to_dict(), exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    """
    Handle request validation errors.

    These occur when path/query parameters don't match the expected schema.
    """
    errors = exc.errors()
    logger.warning(
        f"Validation error: {errors}, path={request.url.path}, method={request.method}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path}
    )
    message = "Dữ liệu không hợp lệ"
    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        {
            "success": False,
            "message": message,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": message,
                "details": {"errors": [
                    {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
                    for e in errors
                ]}
            }
        },
        message
    )


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """
    Handle unexpected errors.

    These are unhandled exceptions that should not occur during normal operation.
    Logs full stack trace for debugging.
    """
    logger.error(f"Unexpected error: {exc}", exc_info=True, extra={"path": request.url.path})
    message = "Đã xảy ra lỗi hệ thống, vui lòng thử lại sau"
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {
            "success": False,
            "message": message,
            "error": {
                "code": "INTERNAL_ERROR",
                "message": message,
                "details": {"hint": "Check server logs for details"}
            }
        },
        message
    )


def register_error_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
