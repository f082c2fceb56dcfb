"""API Routes module"""
from fastapi import APIRouter

from .auth import router as auth_router
from .requests import router as requests_router
from .notifications import router as notifications_router
from .lookups import router as lookups_router
from .dashboard import router as dashboard_router

# Main API router
api_router = APIRouter()

# Include all route modules
api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(requests_router, tags=["Requests"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(lookups_router, prefix="/lookups", tags=["Lookups"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])

__all__ = ["api_router"]
