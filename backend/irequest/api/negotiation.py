"""Content Negotiation - JSON for API/XHR callers, HTML/redirects for browsers"""
from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from ..utils.logger import get_correlation_id


def wants_json(request: Request) -> bool:
    """
    True when the caller expects JSON

    - path under /api/
    - Accept header mentioning json
    - X-Requested-With: XMLHttpRequest
    """
    if request.url.path.startswith("/api/"):
        return True
    if "json" in request.headers.get("accept", "").lower():
        return True
    return request.headers.get("x-requested-with", "").lower() == "xmlhttprequest"


def action_response(request: Request, message: str, redirect_to: str) -> Response:
    """Success reply for a mutating action"""
    if wants_json(request):
        return JSONResponse(
            content={"success": True, "message": message},
            headers={"X-Correlation-Id": get_correlation_id() or ""}
        )
    return RedirectResponse(url=redirect_to, status_code=303)
