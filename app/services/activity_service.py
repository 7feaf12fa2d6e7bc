# app/services/activity_service.py
from typing import Optional

from sqlalchemy import select, desc, asc
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity_models import UserActivity
from app.schemas.activity_schemas import UserActivityOut

ALLOWED_SORT_FIELDS = {"id", "username", "created_at"}


async def list_activities(
    db: AsyncSession,
    username: Optional[str] = None,
    contains: Optional[str] = None,
    sort_by: str = "created_at",
    order: str = "desc",
) -> dict:
    if sort_by not in ALLOWED_SORT_FIELDS:
        sort_by = "created_at"
    sort_column = getattr(UserActivity, sort_by)
    sort_order = desc(sort_column) if order.lower() == "desc" else asc(sort_column)

    filters = []
    if username:
        filters.append(UserActivity.username.ilike(f"%{username}%"))
    if contains:
        filters.append(UserActivity.message.ilike(f"%{contains}%"))

    result = await db.execute(select(UserActivity).where(*filters).order_by(sort_order, UserActivity.id.desc()))
    activities = result.scalars().all()
    return {
        "message": "Activity log fetched successfully",
        "total": len(activities),
        "data": [UserActivityOut.model_validate(a) for a in activities],
    }
