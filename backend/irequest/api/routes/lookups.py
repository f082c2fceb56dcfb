"""Lookup API Routes - Seeded reference data for forms and filters"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ..deps import get_current_user_dep
from ...domain.models import AuthContext, Priority, Status, UserSummary, Workflow
from ...repositories.lookup_repo import LookupRepository
from ...repositories.user_repo import UserRepository

router = APIRouter()


class StatusListResponse(BaseModel):
    success: bool = True
    items: List[Status]


class PriorityListResponse(BaseModel):
    success: bool = True
    items: List[Priority]


class WorkflowListResponse(BaseModel):
    success: bool = True
    items: List[Workflow]


class UserListResponse(BaseModel):
    success: bool = True
    items: List[UserSummary]


@router.get("/statuses", response_model=StatusListResponse)
async def list_statuses(actor: AuthContext = Depends(get_current_user_dep)):
    return StatusListResponse(items=LookupRepository().list_statuses())


@router.get("/priorities", response_model=PriorityListResponse)
async def list_priorities(actor: AuthContext = Depends(get_current_user_dep)):
    """Active priorities, most urgent first."""
    return PriorityListResponse(items=LookupRepository().list_priorities())


@router.get("/workflows", response_model=WorkflowListResponse)
async def list_workflows(actor: AuthContext = Depends(get_current_user_dep)):
    return WorkflowListResponse(items=LookupRepository().list_workflows())


@router.get("/users", response_model=UserListResponse)
async def list_users(
    search: Optional[str] = Query(None, max_length=100),
    limit: int = Query(50, ge=1, le=200),
    actor: AuthContext = Depends(get_current_user_dep)
):
    """Users for the assignee picker and @mentions."""
    return UserListResponse(items=UserRepository().list_users(search=search, limit=limit))
