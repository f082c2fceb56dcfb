"""
Templates Package

HTML error pages for browser callers.
"""
from .error_pages import render_error_page, get_page_title, ErrorPageKey

__all__ = [
    "render_error_page",
    "get_page_title",
    "ErrorPageKey",
]
