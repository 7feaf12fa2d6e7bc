# app/routers/activity_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.activity_schemas import UserActivityListResponse
from app.services.activity_service import list_activities

router = APIRouter(prefix="/activities", tags=["Activity Log"])


@router.get("", response_model=UserActivityListResponse)
async def list_activities_route(
    username: Optional[str] = Query(None),
    contains: Optional[str] = Query(None, description="Text to look for in the activity message"),
    sort_by: str = Query("created_at"),
    order: str = Query("desc"),
    db: AsyncSession = Depends(get_db),
):
    """Audit trail of costing and quotation actions."""
    return await list_activities(db, username=username, contains=contains, sort_by=sort_by, order=order)
