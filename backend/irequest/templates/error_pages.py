"""
Error Pages - Minimal HTML error page for browser callers

API and XHR callers get JSON; everything else gets this page.
"""
from enum import Enum
from html import escape
from typing import Optional


class ErrorPageKey(str, Enum):
    """Error pages by HTTP status"""
    BAD_REQUEST = "400"
    FORBIDDEN = "403"
    NOT_FOUND = "404"
    CONFLICT = "409"
    SERVER_ERROR = "500"


PAGE_TITLES = {
    ErrorPageKey.BAD_REQUEST: "Dữ liệu không hợp lệ",
    ErrorPageKey.FORBIDDEN: "Không có quyền truy cập",
    ErrorPageKey.NOT_FOUND: "Không tìm thấy",
    ErrorPageKey.CONFLICT: "Thao tác không hợp lệ",
    ErrorPageKey.SERVER_ERROR: "Lỗi hệ thống",
}

DEFAULT_TITLE = "Đã xảy ra lỗi"


def get_page_title(status_code: int) -> str:
    try:
        return PAGE_TITLES[ErrorPageKey(str(status_code))]
    except ValueError:
        return DEFAULT_TITLE


def render_error_page(
    status_code: int,
    message: str,
    title: Optional[str] = None,
    back_url: str = "/dashboard",
    correlation_id: Optional[str] = None
) -> str:
    """
    Render the error page

    Args:
        status_code: HTTP status shown on the page
        message: User-facing message (escaped)
        title: Heading override, defaults to the status title
        back_url: Target of the "back" link
        correlation_id: Shown small for support requests

    Returns:
        Complete HTML document
    """
    heading = escape(title or get_page_title(status_code))
    reference = (
        f'<p style="color:#9CA3AF;font-size:12px;">Mã tham chiếu: {escape(correlation_id)}</p>'
        if correlation_id else ""
    )
    return f"""<!DOCTYPE html>
<html lang="vi">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{status_code} - {heading} | iRequest</title>
</head>
<body style="margin:0;font-family:Segoe UI,Arial,sans-serif;background:#F3F4F6;">
  <div style="max-width:560px;margin:80px auto;background:#FFFFFF;border-radius:8px;padding:32px;box-shadow:0 1px 3px rgba(0,0,0,0.1);">
    <p style="font-size:48px;font-weight:700;color:#3B82F6;margin:0;">{status_code}</p>
    <h1 style="font-size:22px;color:#111827;">{heading}</h1>
    <p style="color:#374151;">{escape(message)}</p>
    <a href="{escape(back_url)}" style="display:inline-block;margin-top:16px;color:#3B82F6;">&larr; Quay lại</a>
    {reference}
  </div>
</body>
</html>"""
