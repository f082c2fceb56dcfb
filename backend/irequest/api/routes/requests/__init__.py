"""
Request Routes Module

This module contains all request-related API endpoints organized by functionality:

- drafts.py: The caller's drafts (list, count, publish)
- assigned.py: My requests, assigned requests and their stats
- crud.py: Create, list, detail, assign, delete
- actions.py: Approve, reject, start processing, status change
- comments.py: Request comments

All routes are combined into a single router for inclusion in the API.
"""

from fastapi import APIRouter

from .drafts import router as drafts_router
from .assigned import router as assigned_router
from .crud import router as crud_router
from .actions import router as actions_router
from .comments import router as comments_router

# Create main router and include all sub-routers
router = APIRouter()

# Order matters for route matching!
# Fixed paths (/drafts, /my, /assigned) must come BEFORE /{request_id} routes.
# The prefix is applied here because the collection routes use an empty path.
PREFIX = "/requests"
router.include_router(drafts_router, prefix=PREFIX)
router.include_router(assigned_router, prefix=PREFIX)
router.include_router(crud_router, prefix=PREFIX)
router.include_router(actions_router, prefix=PREFIX)
router.include_router(comments_router, prefix=PREFIX)

__all__ = ["router"]
