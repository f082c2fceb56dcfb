"""Dashboard API Routes - Personal counters and recent activity"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..deps import get_current_user_dep
from ...domain.models import AuthContext, DashboardSummary
from ...services.request_service import RequestService

router = APIRouter()


class DashboardResponse(BaseModel):
    success: bool = True
    summary: DashboardSummary


@router.get("", response_model=DashboardResponse)
async def get_dashboard(actor: AuthContext = Depends(get_current_user_dep)):
    """
    Dashboard for the current user.

    Counts of created, assigned and open requests plus the five most
    recently updated ones. Drafts are never counted.
    """
    service = RequestService()
    return DashboardResponse(summary=service.dashboard(actor))
